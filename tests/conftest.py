"""Pytest fixtures for all tests."""

import random

import pytest
from httpx import AsyncClient, ASGITransport

from ui.app import create_app
from communication.bus import EventBus
from game.engine import GameEngine
from game.simulation import Simulation
from game.world import World
from config import Config, GameConfig, LoggingConfig


@pytest.fixture
def rng():
    """Seeded random source for deterministic headings and placements."""
    return random.Random(1234)


@pytest.fixture
def world(rng):
    """Create a test world."""
    return World(width=600, height=400, rng=rng)


class Recorder:
    """Collects simulation callbacks."""

    def __init__(self):
        self.game_overs = 0
        self.scores = []

    def on_game_over(self):
        self.game_overs += 1

    def on_score(self, score):
        self.scores.append(score)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def simulation(rng, recorder):
    """600x400 game with the default layout."""
    sim = Simulation(600, 400, on_game_over=recorder.on_game_over, on_score=recorder.on_score, rng=rng)
    yield sim
    sim.stop()


@pytest.fixture
def game_config():
    """Create test game config."""
    return GameConfig(width=600, height=400, frame_rate=60, seed=7)


@pytest.fixture
async def bus():
    """Create test event bus."""
    return EventBus(queue_size=10)


@pytest.fixture
async def engine(bus, game_config):
    """Create test game engine."""
    eng = GameEngine(bus=bus, config=game_config)
    yield eng
    if eng._task:
        await eng.stop()


@pytest.fixture
async def app(tmp_path):
    """Create test FastAPI app."""
    return create_app(Config(logging=LoggingConfig(file=str(tmp_path / "dodger.log"),
                                                   crash_file=str(tmp_path / "crash.log"))))


@pytest.fixture
async def client(app):
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
