# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Pytest configuration and shared fixtures for Worldclock tests.
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from worldclock.surface import DisplaySurface
from worldclock.tick import LoopTickSource


class RecordingSurface(DisplaySurface):
    """Display surface that records every call made to it."""

    def __init__(self):
        self.calls = []
        self.texts = {}

    def build(self, fields):
        self.calls.append(('build', list(fields)))
        self.texts = {}

    def set_text(self, field, text):
        self.calls.append(('set_text', field, text))
        self.texts[field] = text

    def fade_to(self, field, opacity, duration_ms):
        self.calls.append(('fade_to', field, opacity, duration_ms))

    def show(self, field, duration_ms):
        self.calls.append(('show', field, duration_ms))

    def hide(self, field, duration_ms):
        self.calls.append(('hide', field, duration_ms))

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]

    def reset(self):
        self.calls = []


class FixedTimeSource:
    """Time source returning a settable instant."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


class FakeMonotonic:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 100.0):
        self.time = start

    def __call__(self) -> float:
        return self.time

    def advance(self, seconds: float) -> None:
        self.time += seconds


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def surface():
    """A fresh recording display surface."""
    return RecordingSurface()


@pytest.fixture
def time_source():
    """Time source fixed at Monday 2025-01-06 15:04:07 UTC."""
    return FixedTimeSource(datetime(2025, 1, 6, 15, 4, 7, tzinfo=timezone.utc))


@pytest.fixture
def monotonic():
    return FakeMonotonic()


@pytest.fixture
def tick_source(monotonic):
    """Cooperative tick source driven by the fake monotonic clock."""
    return LoopTickSource(clock_fn=monotonic)


@pytest.fixture
def make_clock(surface, time_source, tick_source):
    """Factory building a clock wired to the recording fixtures."""
    from worldclock.clock import Worldclock

    def _make(options=None, **kwargs):
        kwargs.setdefault('time_source', time_source)
        kwargs.setdefault('tick_source', tick_source)
        return Worldclock(kwargs.pop('surface', surface), options, **kwargs)

    return _make


@pytest.fixture
def sample_config_dict():
    """Return a minimal valid config dictionary."""
    return {
        "clocks": [
            "Europe/Berlin",
            {
                "label": "Tokyo",
                "options": {"timezone": "Asia/Tokyo", "animationTime": 500}
            }
        ],
        "window": {
            "resolution": "1024x600",
            "fullscreen": False,
            "font_size": 120,
            "label_font_size": 28,
            "font_color": [255, 255, 255],
            "label_color": [160, 160, 160],
            "background_color": [0, 0, 0],
            "fps": 30
        },
        "logging": {
            "level": "DEBUG",
            "directory": None
        }
    }


@pytest.fixture
def sample_config_yaml(temp_dir, sample_config_dict):
    """Create a temporary config.yaml file."""
    import yaml
    config_path = temp_dir / "config.yaml"
    with open(config_path, 'w') as f:
        yaml.dump(sample_config_dict, f)
    return config_path


@pytest.fixture
def surface_factory():
    """Build additional recording surfaces."""
    return RecordingSurface
