"""Season and episode selection for the episode picker."""

import logging
from typing import List, Optional, Tuple

from showreel.core.errors import FetchFailed, InvalidEpisode, InvalidSeason
from showreel.models.media import Episode, Season, Selection
from showreel.services.episode_cache import SeasonEpisodeCache

logger = logging.getLogger(__name__)


class EpisodeNavigationController:
    """Owns the season/episode cursor of one episode picker.

    Season changes go through the SeasonEpisodeCache; only the response to
    the most recent request for the show is ever applied, whatever order the
    responses arrive in.
    """

    def __init__(self, cache: SeasonEpisodeCache | None = None):
        self.cache = cache or SeasonEpisodeCache()
        self.show_id: Optional[int] = None
        self.seasons: List[Season] = []
        self.selection: Optional[Selection] = None
        self.error: Optional[FetchFailed] = None
        self._episodes: List[Episode] = []
        self._loading = False
        self._context = 0

    @property
    def current_episodes(self) -> Tuple[Episode, ...]:
        """Episodes of the selected season; empty while they are loading."""
        if self._loading:
            return ()
        return tuple(self._episodes)

    @property
    def loading(self) -> bool:
        return self._loading

    async def initialize(self, show_id: int) -> None:
        """Load a show and select its first navigable season.

        Raises:
            FetchFailed: The seasons or first season's episodes failed to load.
        """
        if self.show_id is not None and self.show_id != show_id:
            self.cache.discard_show(self.show_id)

        self._context += 1
        context = self._context
        self.show_id = show_id
        self.seasons = []
        self.selection = None
        self.error = None
        self._episodes = []
        self._loading = True

        try:
            seasons = await self.cache.fetch_show_seasons(show_id)
        except FetchFailed as exc:
            if context == self._context:
                self.error = exc
                self._loading = False
                raise
            return
        if context != self._context:
            logger.debug("Dropping seasons of show %s after a newer initialize", show_id)
            return

        self.seasons = seasons
        if not seasons:
            logger.info("Show %s has no navigable seasons", show_id)
            self._loading = False
            return
        await self._load_season(seasons[0].number)

    async def select_season(self, season_number: int) -> None:
        """Switch to another season and load its episodes.

        Raises:
            InvalidSeason: The season is not navigable for the current show.
            FetchFailed: The episodes failed to load and this is still the
                latest request.
        """
        if self.show_id is None or season_number not in self.season_numbers():
            raise InvalidSeason(season_number)
        await self._load_season(season_number)

    def select_episode(self, episode_number: int) -> Selection:
        """Finalize the (season, episode) pair to hand to playback.

        Raises:
            InvalidEpisode: The episode is not in the loaded list of the
                current season.
        """
        season_number = self.selection.season_number if self.selection else None
        if season_number is None or episode_number not in {
            e.number for e in self.current_episodes
        }:
            raise InvalidEpisode(episode_number, season_number)

        self.selection = Selection(
            season_number=season_number, episode_number=episode_number
        )
        return self.selection

    def season_numbers(self) -> List[int]:
        return [s.number for s in self.seasons]

    async def _load_season(self, season_number: int) -> None:
        show_id = self.show_id
        context = self._context
        self.selection = Selection(season_number=season_number)
        self.error = None
        self._episodes = []
        self._loading = True

        try:
            entry = await self.cache.fetch_episodes(show_id, season_number)
        except FetchFailed as exc:
            if not self._is_latest(show_id, context, exc.generation):
                logger.debug(
                    "Ignoring failed stale fetch for show %s season %s",
                    show_id,
                    season_number,
                )
                return
            self.error = exc
            self._loading = False
            raise

        if not self._is_latest(show_id, context, entry.request_generation):
            logger.debug(
                "Discarding stale episodes for show %s season %s (generation %d)",
                show_id,
                season_number,
                entry.request_generation,
            )
            return

        self._episodes = list(entry.episodes)
        self._loading = False

    def _is_latest(
        self, show_id: Optional[int], context: int, generation: Optional[int]
    ) -> bool:
        # A newer initialize supersedes every request issued before it
        return (
            context == self._context
            and show_id == self.show_id
            and generation is not None
            and self.cache.is_current(show_id, generation)
        )
