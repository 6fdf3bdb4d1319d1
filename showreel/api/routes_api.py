"""API routes returning JSON for the episode picker and player."""

from functools import lru_cache
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from showreel.core.errors import FetchFailed, InvalidSeason
from showreel.models.media import Episode, PlaybackTarget, Season
from showreel.services.episode_cache import SeasonEpisodeCache
from showreel.services.playback import build_playback_url
from showreel.services.ratings import content_rating
from showreel.services.tmdb import still_image_url

router = APIRouter()


@lru_cache
def get_episode_cache() -> SeasonEpisodeCache:
    """Shared season cache for every request."""
    return SeasonEpisodeCache()


class EpisodeOut(Episode):
    """An episode with its still image URL resolved."""

    still_url: Optional[str] = None


class PlaybackUrlOut(BaseModel):
    url: str


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "showreel"}


@router.get("/shows/{show_id}/seasons", response_model=List[Season])
async def list_seasons(
    show_id: int,
    cache: SeasonEpisodeCache = Depends(get_episode_cache),
):
    """List the navigable seasons of a show."""
    try:
        return await cache.fetch_show_seasons(show_id)
    except FetchFailed as exc:
        raise HTTPException(status_code=502, detail=str(exc))


@router.get(
    "/shows/{show_id}/seasons/{season_number}/episodes",
    response_model=List[EpisodeOut],
)
async def list_episodes(
    show_id: int,
    season_number: int,
    refresh: bool = Query(False, description="Bypass the episode cache"),
    size: Optional[str] = Query(None, description="Still image size, e.g. w92"),
    cache: SeasonEpisodeCache = Depends(get_episode_cache),
):
    """List the episodes of one season."""
    try:
        entry = await cache.fetch_episodes(show_id, season_number, refresh=refresh)
    except InvalidSeason as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except FetchFailed as exc:
        raise HTTPException(status_code=502, detail=str(exc))

    return [
        EpisodeOut(
            **ep.model_dump(), still_url=still_image_url(ep.still_image_path, size)
        )
        for ep in entry.episodes
    ]


class PlaybackRequest(BaseModel):
    """Request body for building a player URL."""

    target: PlaybackTarget


@router.post("/playback-url", response_model=PlaybackUrlOut)
async def playback_url(request: PlaybackRequest):
    """Build the embedded player URL for a movie or episode."""
    return PlaybackUrlOut(url=build_playback_url(request.target))


@router.get("/rating")
async def rating(
    media_type: Literal["movie", "tv"] = Query("tv"),
    genre_ids: List[int] = Query([], description="TMDB genre ids"),
):
    """Audience rating for a set of genres."""
    return {"rating": content_rating(genre_ids, media_type)}
