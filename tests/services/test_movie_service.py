import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from animations.base import BaseAnimation
from animations.gnome_stripes import GnomeStripesAnimation
from engine.tween_manager import TweenManager
from fakes import FakeDeviceTransport
from hardware.twinkly.client import TwinklyClient
from hardware.twinkly.realtime import RealtimeSender
from lifecycle.task_registry import TaskCategory, TaskRegistry
from models.color import Color
from services.activity_service import ActivityService
from services.movie_service import MovieService, bake_frames


class _Ramp(BaseAnimation):
    def render(self, elapsed_s, size):
        return [Color(elapsed_s, 0, 0)] * size

    def duration_s(self):
        return 1.0


def make_client(device):
    return TwinklyClient("10.0.0.2", transport=device, sender=MagicMock(spec=RealtimeSender))


def test_bake_frames_samples_one_loop():
    frames = bake_frames(_Ramp(), fps=4, number_of_leds=3)
    assert len(frames) == 4
    assert [f[0].r for f in frames] == [0, 0.25, 0.5, 0.75]


@pytest.mark.asyncio
async def test_prepare_with_upload():
    device = FakeDeviceTransport(number_of_leds=6, frame_rate=1.0)
    device.movies.append({"name": "stale"})
    movies = MovieService(make_client(device), GnomeStripesAnimation(3), name="Maki")

    assert await movies.prepare(upload=True)

    assert [m["name"] for m in device.movies] == ["Maki"]
    assert device.movies[0]["frames_number"] == 192
    assert len(device.uploads[0]) == 192 * 6 * 3
    assert device.current_movie == 0
    # selected but not started: the device stays off until activated
    assert device.mode == "off"


@pytest.mark.asyncio
async def test_activating_after_upload_starts_playback(clock):
    device = FakeDeviceTransport(number_of_leds=6, frame_rate=1.0)
    movies = MovieService(make_client(device), GnomeStripesAnimation(3))
    await movies.prepare(upload=True)

    tweens = TweenManager(clock=clock)
    activity = ActivityService(
        tweens,
        fade_duration_ms=1000,
        initial_active=await movies.is_playing(),
        on_opacity=movies.on_opacity,
    )
    assert not activity.active

    activity.set_active(True)
    for _ in range(12):
        clock.advance(100)
        tweens.update()
        await movies._brightness_task

    assert device.mode == "movie"
    assert device.brightness == 100


@pytest.mark.asyncio
async def test_prepare_without_upload_selects_first_movie():
    device = FakeDeviceTransport(mode="movie")
    movies = MovieService(make_client(device), GnomeStripesAnimation())

    assert await movies.prepare()

    assert device.uploads == []
    assert device.current_movie == 0
    assert await movies.is_playing()


@pytest.mark.asyncio
async def test_prepare_fails_without_device():
    device = FakeDeviceTransport()
    device.fail_login = True
    movies = MovieService(make_client(device), GnomeStripesAnimation())
    assert await movies.prepare(upload=True) is False


@pytest.mark.asyncio
async def test_brightness_push_keeps_only_latest_value():
    gate = asyncio.Event()
    calls = []

    async def set_brightness(value):
        calls.append(value)
        await gate.wait()

    client = MagicMock()
    client.set_brightness = AsyncMock(side_effect=set_brightness)
    movies = MovieService(client, _Ramp())

    movies.on_opacity(0.1)
    await asyncio.sleep(0)
    movies.on_opacity(0.2)
    movies.on_opacity(0.3)
    gate.set()
    await movies._brightness_task

    assert calls == [0.1, 0.3]
    records = TaskRegistry.instance().list_all()
    assert len(records) == 1
    assert records[0].info.category == TaskCategory.BACKGROUND
