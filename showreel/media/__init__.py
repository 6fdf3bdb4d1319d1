"""Media registry for the elements that can play in the background."""

import logging
from typing import Iterable, List, Union

from showreel.core.errors import MediaSessionBusy
from showreel.media.base import (
    EmbeddedFrame,
    EmbeddedMediaHandle,
    MediaElement,
    MediaHandle,
    NativeMediaHandle,
)

logger = logging.getLogger(__name__)

Playable = Union[MediaElement, EmbeddedFrame]


class MediaRegistry:
    """Registry of playable elements currently on screen."""

    def __init__(self) -> None:
        self._elements: List[Playable] = []
        self._owner = None

    def register(self, element: Playable) -> None:
        """Register an element; registering twice is a no-op."""
        if not isinstance(element, (MediaElement, EmbeddedFrame)):
            raise TypeError(f"Unsupported media element: {element!r}")
        if not any(e is element for e in self._elements):
            self._elements.append(element)

    def unregister(self, element: Playable) -> None:
        self._elements = [e for e in self._elements if e is not element]

    def clear(self) -> None:
        self._elements.clear()
        self._owner = None

    def elements(self) -> List[Playable]:
        return list(self._elements)

    def snapshot(self) -> List[MediaHandle]:
        """Capture fresh handles for every element registered right now."""
        return [_make_handle(e) for e in self._elements]

    def mark_playing_and_pause(self, handles: Iterable[MediaHandle]) -> None:
        for handle in handles:
            handle.mark_and_pause()

    def resume_marked(self, handles: Iterable[MediaHandle]) -> None:
        for handle in handles:
            handle.resume()

    def stop_permanently(
        self, handles: Iterable[MediaHandle], mute: bool = False
    ) -> None:
        for handle in handles:
            handle.stop(mute=mute)

    def acquire(self, owner) -> None:
        """Claim the registry for one media session."""
        if self._owner is not None and self._owner is not owner:
            raise MediaSessionBusy(
                "A suspended media session must be resolved before a new one opens"
            )
        self._owner = owner

    def release(self, owner) -> None:
        if self._owner is owner:
            self._owner = None

    @property
    def busy(self) -> bool:
        return self._owner is not None


def _make_handle(element: Playable) -> MediaHandle:
    if isinstance(element, EmbeddedFrame):
        return EmbeddedMediaHandle(element)
    if isinstance(element, MediaElement):
        return NativeMediaHandle(element)
    raise TypeError(f"Unsupported media element: {element!r}")


# Process-wide registry used when no explicit one is passed around
registry = MediaRegistry()


def register_media(element: Playable) -> None:
    """Register an element with the global registry."""
    registry.register(element)


def unregister_media(element: Playable) -> None:
    """Remove an element from the global registry."""
    registry.unregister(element)
