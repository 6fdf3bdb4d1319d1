"""Media element interfaces and the per-session handles that control them."""

import json
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class MediaElement(ABC):
    """A natively controllable media element.

    Trailer videos and ambient audio sources implement this interface and
    register themselves with a MediaRegistry while they are on screen.
    """

    @property
    @abstractmethod
    def paused(self) -> bool:
        """Return True when the element is not currently playing."""
        pass

    @abstractmethod
    def play(self) -> None:
        pass

    @abstractmethod
    def pause(self) -> None:
        pass

    @abstractmethod
    def seek(self, position: float) -> None:
        """Move the playback position, in seconds from the start."""
        pass

    @abstractmethod
    def mute(self) -> None:
        pass


class EmbeddedFrame(ABC):
    """A third-party player that can only be reached through messages."""

    @abstractmethod
    def post_message(self, message: str) -> None:
        """Deliver a serialized command to the frame.

        Implementations may raise on delivery failure; handles swallow it.
        """
        pass


def frame_command(func: str) -> str:
    """Serialize a player command for an embedded frame."""
    return json.dumps({"event": "command", "func": func, "args": ""})


class MediaHandle(ABC):
    """One element as captured by a registry snapshot.

    The ``was_playing`` flag belongs to the handle, so it lives exactly as
    long as the session that took the snapshot.
    """

    def __init__(self, element):
        self.element = element
        self.was_playing = False

    @abstractmethod
    def mark_and_pause(self) -> None:
        pass

    @abstractmethod
    def resume(self) -> None:
        pass

    @abstractmethod
    def stop(self, mute: bool = False) -> None:
        pass

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.element!r}, "
            f"was_playing={self.was_playing})"
        )


class NativeMediaHandle(MediaHandle):
    """Handle for a video or audio element under direct control."""

    element: MediaElement

    def mark_and_pause(self) -> None:
        if self.element.paused:
            return
        self.was_playing = True
        self.element.pause()

    def resume(self) -> None:
        if not self.was_playing:
            return
        self.element.play()
        self.was_playing = False

    def stop(self, mute: bool = False) -> None:
        self.element.pause()
        self.element.seek(0)
        if mute:
            self.element.mute()
        self.was_playing = False


class EmbeddedMediaHandle(MediaHandle):
    """Handle for a third-party frame driven through its command channel.

    A frame's playback state is not observable, so it is never flagged and
    therefore never resumed.
    """

    element: EmbeddedFrame

    def mark_and_pause(self) -> None:
        self._send("pauseVideo")

    def resume(self) -> None:
        pass

    def stop(self, mute: bool = False) -> None:
        self._send("stopVideo")
        self.was_playing = False

    def _send(self, func: str) -> None:
        try:
            self.element.post_message(frame_command(func))
        except Exception as exc:
            logger.debug("Dropped %s command for %r: %s", func, self.element, exc)
