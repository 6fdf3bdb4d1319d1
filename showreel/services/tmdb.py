"""TMDB metadata provider for show seasons and season episodes."""

import asyncio
from cachetools import cached
from cachetools import TTLCache
from typing import List, Optional

import tmdbsimple as tmdb

from showreel.core.config import get_settings
from showreel.core.errors import FetchFailed
from showreel.models.media import Episode, Season, Show
import logging
import requests

logger = logging.getLogger(__name__)

show_cache = TTLCache(maxsize=100, ttl=1800)

# Initialize TMDB
settings = get_settings()
tmdb.API_KEY = settings.tmdb_api_key


def still_image_url(path: Optional[str], size: Optional[str] = None) -> Optional[str]:
    """Build the URL of an episode still, or None when there is no image."""
    if not path:
        return None
    settings = get_settings()
    return f"{settings.image_base_url}/{size or settings.still_size}{path}"


def _parse_season(season: dict) -> Season:
    number = season.get("season_number", 0)
    return Season(
        number=number,
        name=season.get("name") or f"Season {number}",
        episode_count=season.get("episode_count") or 0,
    )


def _parse_episode(episode: dict) -> Episode:
    number = episode["episode_number"]
    return Episode(
        number=number,
        name=episode.get("name") or f"Episode {number}",
        overview=episode.get("overview") or "",
        runtime_minutes=episode.get("runtime"),
        still_image_path=episode.get("still_path"),
        air_date=episode.get("air_date"),
    )


@cached(show_cache)
def _get_show_sync(show_id: int) -> Show:
    """Fetch a show and its full season list (synchronous, cached)."""
    tv_api = tmdb.TV(show_id)
    try:
        info = tv_api.info()
    except (requests.exceptions.RequestException, tmdb.APIKeyError) as exc:
        logger.error("Failed to fetch show details for ID %s: %s", show_id, exc)
        raise FetchFailed(f"Failed to fetch show details for ID {show_id}", exc) from exc
    except Exception as exc:
        logger.exception("Unexpected error fetching show %s: %s", show_id, exc)
        raise FetchFailed(f"Failed to fetch show details for ID {show_id}", exc) from exc

    return Show(
        id=info["id"],
        name=info.get("name", "Unknown"),
        genre_ids={g["id"] for g in info.get("genres", [])},
        seasons=[_parse_season(s) for s in info.get("seasons") or []],
    )


def _get_season_episodes_sync(show_id: int, season_number: int) -> List[Episode]:
    """Fetch episodes for a specific season (synchronous)."""
    season_api = tmdb.TV_Seasons(show_id, season_number)
    try:
        info = season_api.info()
    except (requests.exceptions.RequestException, tmdb.APIKeyError) as exc:
        logger.error(
            "Failed to fetch season episodes for ID %s S%s: %s",
            show_id,
            season_number,
            exc,
        )
        raise FetchFailed(
            f"Failed to fetch season episodes for ID {show_id} S{season_number}", exc
        ) from exc
    except Exception as exc:
        logger.exception(
            "Unexpected error fetching show %s S%s: %s", show_id, season_number, exc
        )
        raise FetchFailed(
            f"Failed to fetch season episodes for ID {show_id} S{season_number}", exc
        ) from exc

    return [_parse_episode(ep) for ep in info.get("episodes") or []]


class TMDBMetadataProvider:
    """Async facade over tmdbsimple used by the season cache."""

    async def get_show(self, show_id: int) -> Show:
        """Fetch a show with every season the provider lists (async)."""
        return await asyncio.to_thread(_get_show_sync, show_id)

    async def get_season_episodes(
        self, show_id: int, season_number: int
    ) -> List[Episode]:
        """Fetch the episodes of one season (async)."""
        return await asyncio.to_thread(
            _get_season_episodes_sync, show_id, season_number
        )
