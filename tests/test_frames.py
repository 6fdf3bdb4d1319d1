import json
import threading
import time
from unittest.mock import MagicMock, patch

import niquests
import pytest

from showreel.media import MediaRegistry
from showreel.media.frames import HttpFrameChannel
from showreel.models.media import SessionState
from showreel.services.session import MediaSessionCoordinator


def test_post_message_sends_json_command():
    channel = HttpFrameChannel("http://frame.local/control", timeout=1.0)
    with patch.object(channel.session, "post") as mock_post:
        mock_post.return_value = MagicMock()
        channel.post_message('{"event":"command","func":"pauseVideo","args":""}')

    mock_post.assert_called_once()
    args, kwargs = mock_post.call_args
    assert args[0] == "http://frame.local/control"
    assert kwargs["timeout"] == 1.0
    assert kwargs["headers"]["Content-Type"] == "application/json"
    mock_post.return_value.raise_for_status.assert_called_once()


def test_timeout_defaults_to_settings(settings):
    channel = HttpFrameChannel("http://frame.local/control")
    assert channel.timeout == settings.frame_command_timeout


def test_unreachable_frame_does_not_break_the_session():
    registry = MediaRegistry()
    channel = HttpFrameChannel("http://frame.local/control")
    registry.register(channel)
    session = MediaSessionCoordinator(registry)

    with patch.object(
        channel.session,
        "post",
        side_effect=niquests.exceptions.ConnectionError("refused"),
    ) as mock_post:
        session.open()
        session.select()

    sent = [json.loads(call.kwargs["data"])["func"] for call in mock_post.call_args_list]
    assert sent == ["pauseVideo", "stopVideo"]


@pytest.mark.asyncio
async def test_slow_frame_does_not_hold_up_the_event_loop():
    registry = MediaRegistry()
    channel = HttpFrameChannel("http://frame.local/control")
    registry.register(channel)
    session = MediaSessionCoordinator(registry)
    gate = threading.Event()

    def slow_post(*args, **kwargs):
        gate.wait(timeout=5)
        return MagicMock()

    with patch.object(channel.session, "post", side_effect=slow_post) as mock_post:
        started = time.monotonic()
        session.open()
        session.select()
        elapsed = time.monotonic() - started

        assert elapsed < 1
        assert not gate.is_set()

        gate.set()
        await channel.drain()

    sent = [json.loads(call.kwargs["data"])["func"] for call in mock_post.call_args_list]
    assert sent == ["pauseVideo", "stopVideo"]
    channel.close()


@pytest.mark.asyncio
async def test_background_command_failures_are_dropped():
    registry = MediaRegistry()
    channel = HttpFrameChannel("http://frame.local/control")
    registry.register(channel)
    session = MediaSessionCoordinator(registry)

    with patch.object(
        channel.session,
        "post",
        side_effect=niquests.exceptions.ConnectionError("refused"),
    ) as mock_post:
        session.open()
        session.select()
        await channel.drain()

    assert mock_post.call_count == 2
    assert session.state == SessionState.STOPPED_PERMANENTLY
    channel.close()
