from __future__ import annotations

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from vigil.core.clock import ManualClock
from vigil.world.navigation import NavSurface
from vigil.world.occlusion import BoxWorld


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(t=0.0)


@pytest.fixture
def flat_nav() -> NavSurface:
    return NavSurface.plane(0.0)


@pytest.fixture
def empty_world() -> BoxWorld:
    return BoxWorld()
