import pytest

from showreel.core.errors import InvalidEpisode
from showreel.media import MediaRegistry
from showreel.models.media import EpisodeTarget, SessionState
from showreel.services.episode_cache import SeasonEpisodeCache
from showreel.services.navigation import EpisodeNavigationController
from showreel.services.playback import PlaybackLauncher
from showreel.services.session import MediaSessionCoordinator

from fakes import FakeElement, FakeEmbedder, FakeProvider, make_episodes, make_show

BASE = "https://player.example"


@pytest.fixture
def world():
    registry = MediaRegistry()
    trailer = FakeElement("trailer", playing=True, position=20.0)
    ambient = FakeElement("ambient", playing=False)
    registry.register(trailer)
    registry.register(ambient)
    provider = FakeProvider(
        make_show(100, [(1, 8), (0, 1)]), episodes={1: make_episodes(1, 2, 4)}
    )
    controller = EpisodeNavigationController(SeasonEpisodeCache(provider))
    embedder = FakeEmbedder()
    launcher = PlaybackLauncher(embedder, registry=registry, base_url=BASE)
    return registry, trailer, ambient, provider, controller, embedder, launcher


@pytest.mark.asyncio
async def test_pick_and_play_an_episode(world):
    registry, trailer, ambient, provider, controller, embedder, launcher = world

    picker = MediaSessionCoordinator(registry)
    picker.open()
    await controller.initialize(100)

    assert [s.number for s in controller.seasons] == [1]
    assert provider.season_calls == [(100, 1)]

    selection = controller.select_episode(2)
    player = launcher.launch(
        EpisodeTarget(
            show_id=100,
            season_number=selection.season_number,
            episode_number=selection.episode_number,
        ),
        coordinator=picker,
    )

    assert embedder.opened == [f"{BASE}/tv/100/1/2"]
    assert picker.state is SessionState.STOPPED_PERMANENTLY
    assert trailer.playing is False and trailer.position == 0

    player.handle_key("Escape")
    assert trailer.playing is False


@pytest.mark.asyncio
async def test_invalid_episode_has_no_side_effects(world):
    registry, trailer, ambient, provider, controller, embedder, launcher = world

    picker = MediaSessionCoordinator(registry)
    picker.open()
    await controller.initialize(100)
    calls = list(provider.season_calls)

    with pytest.raises(InvalidEpisode):
        controller.select_episode(3)

    assert provider.season_calls == calls
    assert embedder.opened == []
    assert picker.state is SessionState.SUSPENDED

    picker.close_without_selecting()
    assert trailer.playing is True
    assert ambient.playing is False
