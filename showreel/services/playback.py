"""Launch movie and episode playback in the embedded player."""

import asyncio
import logging
import webbrowser
from abc import ABC, abstractmethod
from typing import Optional

from showreel.core.config import get_settings
from showreel.media import MediaRegistry, registry as default_registry
from showreel.models.media import EpisodeTarget, MovieTarget, PlaybackTarget
from showreel.services.session import MediaSessionCoordinator

logger = logging.getLogger(__name__)

ESCAPE_KEY = "Escape"


def build_playback_url(target: PlaybackTarget, base_url: str | None = None) -> str:
    """Build the embedded player URL for a movie or an episode."""
    base = (base_url or get_settings().player_base_url).rstrip("/")
    if isinstance(target, MovieTarget):
        return f"{base}/movie/{target.show_id}"
    if isinstance(target, EpisodeTarget):
        return (
            f"{base}/tv/{target.show_id}/{target.season_number}/{target.episode_number}"
        )
    raise TypeError(f"Unsupported playback target: {target!r}")


class PlayerEmbedder(ABC):
    """Whatever actually shows the embedded player to the viewer."""

    @abstractmethod
    def open(self, url: str) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class BrowserEmbedder(PlayerEmbedder):
    """Open the player in the system web browser."""

    def open(self, url: str) -> None:
        logger.info("Opening player: %s", url)
        webbrowser.open(url)

    def close(self) -> None:
        # The browser tab belongs to the viewer once it is open
        pass


class LaunchedPlayer:
    """A player opened by PlaybackLauncher.

    Closing it is one-way: media stopped for the launch stay stopped.
    """

    def __init__(
        self,
        url: str,
        embedder: PlayerEmbedder,
        coordinator: MediaSessionCoordinator,
    ):
        self.url = url
        self.embedder = embedder
        self.coordinator = coordinator
        self.is_open = True
        self.intro_active = False
        self._intro_timer: Optional[asyncio.TimerHandle] = None

    def start_intro(self, seconds: float) -> None:
        """Show the intro overlay for ``seconds`` if an event loop is running."""
        if seconds <= 0:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, skipping the intro overlay")
            return
        self.intro_active = True
        self._intro_timer = loop.call_later(seconds, self._end_intro)

    def _end_intro(self) -> None:
        self.intro_active = False
        self._intro_timer = None

    def handle_key(self, key: str) -> bool:
        """Handle a key press; returns True when it closed the player."""
        if key == ESCAPE_KEY and self.is_open:
            self.close()
            return True
        return False

    def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        if self._intro_timer is not None:
            self._intro_timer.cancel()
        self._end_intro()
        # Leaves the coordinator in STOPPED_PERMANENTLY, no resume
        self.coordinator.close_without_selecting()
        self.embedder.close()
        logger.info("Closed player: %s", self.url)


class PlaybackLauncher:
    """Stop background media, then hand the player URL to the embedder."""

    def __init__(
        self,
        embedder: PlayerEmbedder | None = None,
        registry: MediaRegistry | None = None,
        base_url: str | None = None,
        intro_seconds: float | None = None,
    ):
        settings = get_settings()
        self.embedder = embedder or BrowserEmbedder()
        self.registry = registry or default_registry
        self.base_url = base_url or settings.player_base_url
        self.intro_seconds = (
            intro_seconds if intro_seconds is not None else settings.intro_seconds
        )

    def launch(
        self,
        target: PlaybackTarget,
        coordinator: MediaSessionCoordinator | None = None,
        show_intro: bool = True,
    ) -> LaunchedPlayer:
        """Launch playback of a movie or an episode.

        Pass the coordinator of the episode picker the selection came from;
        without one a fresh session is stopped directly from idle.
        """
        coordinator = coordinator or MediaSessionCoordinator(self.registry)
        # Everything must be stopped before the new player exists
        coordinator.select(mute=True)

        url = build_playback_url(target, self.base_url)
        self.embedder.open(url)
        logger.info("Launched %s playback: %s", target.kind, url)

        player = LaunchedPlayer(url, self.embedder, coordinator)
        if show_intro:
            player.start_intro(self.intro_seconds)
        return player
