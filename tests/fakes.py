"""Test doubles for media elements, frames, embedders and the metadata provider."""

import asyncio
from typing import Dict, List, Tuple

from showreel.core.errors import FetchFailed
from showreel.media.base import EmbeddedFrame, MediaElement
from showreel.models.media import Episode, Season, Show
from showreel.services.playback import PlayerEmbedder


class FakeElement(MediaElement):
    def __init__(self, name: str, playing: bool = False, position: float = 0.0):
        self.name = name
        self.playing = playing
        self.position = position
        self.muted = False
        self.calls: List[str] = []

    @property
    def paused(self) -> bool:
        return not self.playing

    def play(self) -> None:
        self.calls.append("play")
        self.playing = True

    def pause(self) -> None:
        self.calls.append("pause")
        self.playing = False

    def seek(self, position: float) -> None:
        self.calls.append(f"seek:{position}")
        self.position = position

    def mute(self) -> None:
        self.calls.append("mute")
        self.muted = True

    def __repr__(self) -> str:
        return f"FakeElement({self.name!r})"


class FakeFrame(EmbeddedFrame):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: List[str] = []

    def post_message(self, message: str) -> None:
        if self.fail:
            raise PermissionError("Blocked a frame with a different origin")
        self.messages.append(message)


class FakeEmbedder(PlayerEmbedder):
    def __init__(self, log: List[str] | None = None):
        self.log = log if log is not None else []
        self.opened: List[str] = []
        self.closed = 0

    def open(self, url: str) -> None:
        self.log.append(f"open:{url}")
        self.opened.append(url)

    def close(self) -> None:
        self.log.append("close")
        self.closed += 1


def make_episodes(*numbers: int, prefix: str = "Episode") -> List[Episode]:
    return [Episode(number=n, name=f"{prefix} {n}") for n in numbers]


class FakeProvider:
    """Metadata provider whose season responses are released by the test.

    With ``manual=True`` every season request waits until ``release`` or
    ``fail`` is called for it, so tests decide the order responses land in.
    With ``manual_show=True`` show requests likewise wait for ``release_show``.
    """

    def __init__(
        self,
        show: Show,
        episodes: Dict[int, List[Episode]] | None = None,
        manual: bool = False,
        manual_show: bool = False,
    ):
        self.show = show
        self.episodes = episodes or {}
        self.manual = manual
        self.manual_show = manual_show
        self.show_calls: List[int] = []
        self.season_calls: List[Tuple[int, int]] = []
        self.show_error: Exception | None = None
        self._pending: Dict[int, List[asyncio.Future]] = {}
        self._pending_shows: List[asyncio.Future] = []

    async def get_show(self, show_id: int) -> Show:
        self.show_calls.append(show_id)
        if self.manual_show:
            future = asyncio.get_running_loop().create_future()
            self._pending_shows.append(future)
            await future
        if self.show_error is not None:
            raise self.show_error
        return self.show

    async def get_season_episodes(self, show_id: int, season_number: int) -> List[Episode]:
        self.season_calls.append((show_id, season_number))
        if not self.manual:
            return list(self.episodes.get(season_number, []))
        future = asyncio.get_running_loop().create_future()
        self._pending.setdefault(season_number, []).append(future)
        return await future

    def release(self, season_number: int) -> None:
        future = self._pending[season_number].pop(0)
        future.set_result(list(self.episodes.get(season_number, [])))

    def release_show(self) -> None:
        self._pending_shows.pop(0).set_result(None)

    def fail(self, season_number: int, message: str = "boom") -> None:
        future = self._pending[season_number].pop(0)
        future.set_exception(FetchFailed(message))


def make_show(show_id: int = 100, seasons: List[Tuple[int, int]] | None = None) -> Show:
    seasons = seasons if seasons is not None else [(1, 8), (0, 1)]
    return Show(
        id=show_id,
        name="Test Show",
        genre_ids={18},
        seasons=[
            Season(number=n, name=f"Season {n}", episode_count=count)
            for n, count in seasons
        ],
    )
