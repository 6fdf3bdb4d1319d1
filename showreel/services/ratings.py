"""Audience rating derived from TMDB genre ids."""

from typing import Iterable

# Romance, Horror, Crime, War, Thriller
MOVIE_ADULT_GENRES = frozenset({10749, 27, 80, 10752, 53})
# Family, Animation, Drama, Comedy
MOVIE_GENERAL_GENRES = frozenset({10751, 16, 18, 35})
# Crime, War & Politics
TV_ADULT_GENRES = frozenset({80, 10768})
# Kids, Family, Drama, Comedy, Animation
TV_GENERAL_GENRES = frozenset({10762, 10751, 18, 35, 16})

ADULT = "18+"
GENERAL = "All"


def content_rating(genre_ids: Iterable[int], media_type: str = "tv") -> str:
    """Return "18+" or "All" for a movie or TV show.

    Adult genres win over general ones; unknown genre mixes are rated 18+.
    """
    genres = set(genre_ids)
    if media_type == "movie":
        adult, general = MOVIE_ADULT_GENRES, MOVIE_GENERAL_GENRES
    elif media_type == "tv":
        adult, general = TV_ADULT_GENRES, TV_GENERAL_GENRES
    else:
        raise ValueError(f"Unknown media type: {media_type}")

    if genres & adult:
        return ADULT
    if genres & general:
        return GENERAL
    return ADULT
