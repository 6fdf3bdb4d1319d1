"""Season and episode cache with per-show request generations."""

import itertools
import logging
from typing import List, Optional, Protocol, Tuple

from cachetools import TTLCache

from showreel.core.config import get_settings
from showreel.core.errors import FetchFailed, InvalidSeason
from showreel.models.media import CacheEntry, Episode, Season, Show, navigable_seasons

logger = logging.getLogger(__name__)


class MetadataProvider(Protocol):
    async def get_show(self, show_id: int) -> Show: ...

    async def get_season_episodes(
        self, show_id: int, season_number: int
    ) -> List[Episode]: ...


class SeasonEpisodeCache:
    """Fetch and cache season episode lists keyed by (show id, season number).

    Every episode request takes the next generation number of its show. A
    response may be shown only while its generation is still the latest one,
    which is how a slow answer for an abandoned season gets discarded. The
    underlying request is never cancelled.

    Generation numbers come from one counter shared by all shows, so a show
    whose bookkeeping was evicted can never be handed a number it used before.
    Season lists and latest generations are bounded like the entries.
    """

    def __init__(
        self,
        provider: MetadataProvider | None = None,
        maxsize: int | None = None,
        ttl: int | None = None,
    ):
        settings = get_settings()
        if provider is None:
            from showreel.services.tmdb import TMDBMetadataProvider

            provider = TMDBMetadataProvider()
        self.provider = provider
        maxsize = maxsize or settings.episode_cache_size
        ttl = ttl or settings.episode_cache_ttl
        self._entries: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._seasons: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._generations: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._counter = itertools.count(1)

    def next_generation(self, show_id: int) -> int:
        generation = next(self._counter)
        self._generations[show_id] = generation
        return generation

    def latest_generation(self, show_id: int) -> int:
        return self._generations.get(show_id, 0)

    def is_current(self, show_id: int, generation: int) -> bool:
        return generation == self.latest_generation(show_id)

    def get(self, show_id: int, season_number: int) -> Optional[CacheEntry]:
        return self._entries.get((show_id, season_number))

    def seasons(self, show_id: int) -> Optional[List[Season]]:
        """Navigable seasons of a show, if they have been fetched."""
        seasons = self._seasons.get(show_id)
        return list(seasons) if seasons is not None else None

    async def fetch_show_seasons(self, show_id: int) -> List[Season]:
        """Fetch the navigable seasons of a show.

        Raises:
            FetchFailed: The provider could not deliver the show.
        """
        try:
            show = await self.provider.get_show(show_id)
        except FetchFailed:
            raise
        except Exception as exc:
            raise FetchFailed(f"Failed to fetch seasons for show {show_id}", exc) from exc

        seasons = navigable_seasons(show.seasons)
        self._seasons[show_id] = seasons
        logger.debug(
            "Show %s has %d navigable of %d seasons",
            show_id,
            len(seasons),
            len(show.seasons),
        )
        return list(seasons)

    async def fetch_episodes(
        self, show_id: int, season_number: int, refresh: bool = False
    ) -> CacheEntry:
        """Fetch the episodes of a season, tagged with a fresh generation.

        A cached entry is served without a request unless ``refresh`` is set.
        A successful request overwrites the entry for its key; a failed one
        leaves the previous entry in place. When the show's season list is not
        known yet it is fetched first, so the season is always checked.

        Raises:
            InvalidSeason: The season is not in the show's navigable set.
            FetchFailed: The provider request failed.
        """
        known = self._seasons.get(show_id)
        if known is None:
            # The generation is taken before the season list request so that a
            # later request for the same show supersedes this one
            generation = self.next_generation(show_id)
            try:
                known = await self.fetch_show_seasons(show_id)
            except FetchFailed as exc:
                exc.generation = generation
                raise
            self._check_season(known, season_number)
        else:
            self._check_season(known, season_number)
            generation = self.next_generation(show_id)
        key: Tuple[int, int] = (show_id, season_number)

        cached_entry = None if refresh else self._entries.get(key)
        if cached_entry is not None:
            return cached_entry.model_copy(update={"request_generation": generation})

        try:
            episodes = await self.provider.get_season_episodes(show_id, season_number)
        except Exception as exc:
            logger.warning(
                "Episode fetch for show %s season %s (generation %d) failed: %s",
                show_id,
                season_number,
                generation,
                exc,
            )
            if isinstance(exc, FetchFailed):
                exc.generation = generation
                raise
            raise FetchFailed(
                f"Failed to fetch episodes for show {show_id} S{season_number}",
                exc,
                generation=generation,
            ) from exc

        entry = CacheEntry(
            show_id=show_id,
            season_number=season_number,
            episodes=episodes,
            request_generation=generation,
        )
        self._entries[key] = entry
        return entry

    @staticmethod
    def _check_season(seasons: List[Season], season_number: int) -> None:
        if season_number not in {s.number for s in seasons}:
            raise InvalidSeason(season_number)

    def discard_show(self, show_id: int) -> None:
        """Forget every entry and the season list of a show."""
        for key in [k for k in list(self._entries.keys()) if k[0] == show_id]:
            self._entries.pop(key, None)
        self._seasons.pop(show_id, None)
