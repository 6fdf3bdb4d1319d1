"""Suspend, resume and stop background media around modals and players.

The transition table is a pure function of (state, event) that yields the
next state and the commands to run, so the rules can be exercised without
any media at all. MediaSessionCoordinator executes those commands against a
MediaRegistry snapshot that it owns for the lifetime of one session.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

from showreel.core.errors import SessionTransitionError
from showreel.media import MediaRegistry, registry as default_registry
from showreel.media.base import MediaHandle
from showreel.models.media import SessionState

logger = logging.getLogger(__name__)


class SessionEvent(str, Enum):
    OPEN = "open"
    CLOSE = "close"
    SELECT = "select"


class MediaCommand(str, Enum):
    SNAPSHOT = "snapshot"
    MARK_AND_PAUSE = "mark_and_pause"
    RESUME_MARKED = "resume_marked"
    STOP_PERMANENTLY = "stop_permanently"


_TRANSITIONS: Dict[
    Tuple[SessionState, SessionEvent], Tuple[SessionState, Tuple[MediaCommand, ...]]
] = {
    (SessionState.IDLE, SessionEvent.OPEN): (
        SessionState.SUSPENDED,
        (MediaCommand.SNAPSHOT, MediaCommand.MARK_AND_PAUSE),
    ),
    (SessionState.IDLE, SessionEvent.SELECT): (
        SessionState.STOPPED_PERMANENTLY,
        (MediaCommand.SNAPSHOT, MediaCommand.STOP_PERMANENTLY),
    ),
    (SessionState.IDLE, SessionEvent.CLOSE): (SessionState.IDLE, ()),
    (SessionState.SUSPENDED, SessionEvent.OPEN): (SessionState.SUSPENDED, ()),
    (SessionState.SUSPENDED, SessionEvent.CLOSE): (
        SessionState.RESUMED,
        (MediaCommand.RESUME_MARKED,),
    ),
    (SessionState.SUSPENDED, SessionEvent.SELECT): (
        SessionState.STOPPED_PERMANENTLY,
        (MediaCommand.STOP_PERMANENTLY,),
    ),
    # Closing a launched player never brings background media back
    (SessionState.STOPPED_PERMANENTLY, SessionEvent.SELECT): (
        SessionState.STOPPED_PERMANENTLY,
        (),
    ),
    (SessionState.STOPPED_PERMANENTLY, SessionEvent.CLOSE): (
        SessionState.STOPPED_PERMANENTLY,
        (),
    ),
}

TERMINAL_STATES = frozenset({SessionState.RESUMED, SessionState.STOPPED_PERMANENTLY})


def transition(
    state: SessionState, event: SessionEvent
) -> Tuple[SessionState, List[MediaCommand]]:
    """Return the next state and the media commands for an event.

    Raises:
        SessionTransitionError: The state does not accept the event.
    """
    try:
        next_state, commands = _TRANSITIONS[(state, event)]
    except KeyError:
        raise SessionTransitionError(
            f"Cannot {event.value} a media session in state {state.value}"
        ) from None
    return next_state, list(commands)


class MediaSessionCoordinator:
    """One suspend/resume cycle of background media.

    Create a coordinator when a modal or player opens and drop it once it
    reaches a terminal state.
    """

    def __init__(self, registry: MediaRegistry | None = None):
        self.registry = registry or default_registry
        self.state = SessionState.IDLE
        self._snapshot: Optional[List[MediaHandle]] = None

    @property
    def handles(self) -> List[MediaHandle]:
        """Handles captured when the session started (empty before that)."""
        return list(self._snapshot or [])

    def open(self) -> None:
        """Pause whatever is playing, remembering what was."""
        self._dispatch(SessionEvent.OPEN)

    def close_without_selecting(self) -> None:
        """Resume exactly the media that were playing when the session opened."""
        self._dispatch(SessionEvent.CLOSE)

    def select(self, mute: bool = False) -> None:
        """Stop background media for good; nothing resumes afterwards."""
        self._dispatch(SessionEvent.SELECT, mute=mute)

    def _dispatch(self, event: SessionEvent, mute: bool = False) -> None:
        next_state, commands = transition(self.state, event)
        for command in commands:
            self._run(command, mute)

        if next_state != self.state:
            logger.debug(
                "Media session %s -> %s on %s",
                self.state.value,
                next_state.value,
                event.value,
            )
        self.state = next_state
        if next_state in TERMINAL_STATES:
            self.registry.release(self)

    def _run(self, command: MediaCommand, mute: bool) -> None:
        if command is MediaCommand.SNAPSHOT:
            self.registry.acquire(self)
            self._snapshot = self.registry.snapshot()
            logger.debug("Captured %d media handles", len(self._snapshot))
        elif command is MediaCommand.MARK_AND_PAUSE:
            self.registry.mark_playing_and_pause(self._snapshot)
        elif command is MediaCommand.RESUME_MARKED:
            self.registry.resume_marked(self._snapshot)
        elif command is MediaCommand.STOP_PERMANENTLY:
            self.registry.stop_permanently(self._snapshot, mute=mute)
