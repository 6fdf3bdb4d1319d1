"""Media models for shows, seasons, episodes and playback targets."""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Set, Tuple, Union

from pydantic import BaseModel, Field


class Episode(BaseModel):
    """An episode in a season."""

    number: int
    name: str
    overview: str = ""
    runtime_minutes: Optional[int] = None
    still_image_path: Optional[str] = None
    air_date: Optional[str] = None


class Season(BaseModel):
    """A season of a TV show."""

    number: int
    name: str
    episode_count: int

    @property
    def navigable(self) -> bool:
        # Specials (season 0) and empty seasons cannot be browsed
        return self.number > 0 and self.episode_count > 0


def navigable_seasons(seasons: List[Season]) -> List[Season]:
    """Return the seasons a viewer can browse, in provider order."""
    return [s for s in seasons if s.navigable]


class Show(BaseModel):
    """A TV show with its season list."""

    id: int
    name: str = ""
    genre_ids: Set[int] = set()
    seasons: List[Season] = []


class Selection(BaseModel):
    """The navigation cursor of an episode picker."""

    season_number: int
    episode_number: Optional[int] = None


class CacheEntry(BaseModel):
    """Episodes of one season as returned by a single request."""

    show_id: int
    season_number: int
    episodes: List[Episode] = []
    request_generation: int

    @property
    def key(self) -> Tuple[int, int]:
        return (self.show_id, self.season_number)


class SessionState(str, Enum):
    """Lifecycle of one suspend/resume cycle for background media."""

    IDLE = "idle"
    SUSPENDED = "suspended"
    RESUMED = "resumed"
    STOPPED_PERMANENTLY = "stopped_permanently"


class MovieTarget(BaseModel):
    kind: Literal["movie"] = "movie"
    show_id: int


class EpisodeTarget(BaseModel):
    kind: Literal["episode"] = "episode"
    show_id: int
    season_number: int
    episode_number: int


PlaybackTarget = Annotated[
    Union[MovieTarget, EpisodeTarget], Field(discriminator="kind")
]
