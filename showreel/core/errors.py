"""Domain exceptions for Showreel."""


class FetchFailed(Exception):
    """The metadata provider could not deliver seasons or episodes.

    ``generation`` is set by the season cache so callers can tell whether the
    failed request is still the one they are waiting for.
    """

    def __init__(
        self,
        message: str,
        original_exception: Exception = None,
        generation: int | None = None,
    ):
        super().__init__(message)
        self.original_exception = original_exception
        self.generation = generation


class NavigationError(Exception):
    """A selection that a correctly wired UI can never produce."""


class InvalidSeason(NavigationError):
    def __init__(self, season_number: int):
        super().__init__(f"Season {season_number} is not navigable")
        self.season_number = season_number


class InvalidEpisode(NavigationError):
    def __init__(self, episode_number: int, season_number: int | None = None):
        super().__init__(
            f"Episode {episode_number} is not loaded for season {season_number}"
        )
        self.episode_number = episode_number
        self.season_number = season_number


class SessionTransitionError(Exception):
    """A media session event arrived in a state that does not accept it."""


class MediaSessionBusy(Exception):
    """Another session still holds a suspended snapshot of the registry."""
