"""Shared fixtures for region_annote tests."""

import itertools
import shutil
import tempfile
from pathlib import Path

import pytest

from region_annote.lifecycle import AnnotationLifecycle
from region_annote.playback import PlaybackGateway, PlayerBackend


class FakePlayer(PlayerBackend):
    """Records the commands the gateway sends to the player."""

    def __init__(self):
        self.calls = []

    def play(self):
        self.calls.append("play")

    def pause(self):
        self.calls.append("pause")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    dirpath = tempfile.mkdtemp()
    yield Path(dirpath)
    shutil.rmtree(dirpath)


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def gateway(player):
    gw = PlaybackGateway(player)
    gw.on_duration_known(60.0)
    return gw


@pytest.fixture
def committed():
    """Sink that collects committed annotations."""
    return []


@pytest.fixture
def lifecycle(gateway, committed):
    counter = itertools.count(1)
    return AnnotationLifecycle(
        gateway,
        sinks=[committed.append],
        id_factory=lambda: f"a{next(counter)}",
    )


def draw(lifecycle, start=(10, 10), end=(50, 40)):
    """Full drag gesture: press, move, release."""
    lifecycle.pointer_down(*start)
    lifecycle.pointer_move(*end)
    return lifecycle.pointer_up()
