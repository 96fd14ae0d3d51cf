"""Tests for live module."""

import numpy as np
import pytest

from rewind.live import LiveRenderer
from rewind.raster import RasterBuffer
from rewind.settings import Settings


class FakeTime:
    """Manual clock; sleeping advances it."""

    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def clock(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_time():
    return FakeTime()


def make_live(source, fake_time, **kwargs):
    settings = kwargs.pop("settings", Settings.only(brightness=2))
    return LiveRenderer(source, settings, clock=fake_time.clock, sleep=fake_time.sleep,
                        rng=np.random.default_rng(0), **kwargs)


class TestLiveRenderer:
    def test_runs_max_frames(self, source, fake_time):
        seen = []
        live = make_live(source, fake_time, on_frame=lambda f, t: seen.append(t), fps=10)
        assert live.run(max_frames=3) == 3
        assert fake_time.sleeps == pytest.approx([0.1, 0.1, 0.1])
        offset = live.animation.offset
        assert seen == pytest.approx([offset, offset + 0.1, offset + 0.2])

    def test_frames_are_private(self, source, fake_time):
        frames = []
        live = make_live(source, fake_time, on_frame=lambda f, t: frames.append(f))
        live.run(max_frames=2)
        assert isinstance(frames[0], RasterBuffer)
        assert frames[0].data is not frames[1].data
        assert frames[0].data is not source.data

    def test_stop_from_callback(self, source, fake_time):
        def on_frame(frame, t):
            if live.frames_rendered == 2:
                live.stop()

        live = make_live(source, fake_time, on_frame=on_frame)
        assert live.run() == 2
        assert not live.running
        assert len(fake_time.sleeps) == 1

    def test_now_follows_speed(self, source, fake_time):
        live = make_live(source, fake_time, settings=Settings.only(animation_speed=2.0))
        start = live.now()
        fake_time.now += 1.5
        assert live.now() == pytest.approx(start + 3.0)

    def test_offset_in_range(self, source, fake_time):
        live = make_live(source, fake_time)
        assert 0 <= live.animation.offset < 1000
        assert live.now() == pytest.approx(live.animation.offset)

    def test_render_frame_at_time(self, source, fake_time):
        calls = []
        live = make_live(source, fake_time, on_frame=lambda f, t: calls.append(t))
        frame = live.render_frame(4.0)
        assert calls == [4.0]
        assert frame.size == source.size
