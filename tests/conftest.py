import os
import sys
import random

import pytest
import pytest_asyncio

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from games.game_1001_pairs.game_1001 import PairsGame
from utils.haptics import HapticFeedback

# Timings small enough that a whole game runs in a fraction of a second
FAST_TIMINGS = {
    "tick_seconds": 0.01,
    "wrong_guess_delay": 0.05,
    "win_dwell_seconds": 0.005,
}

class RecordingHaptics(HapticFeedback):
    """Remembers every vibration instead of vibrating."""
    def __init__(self, is_supported=True):
        self.is_supported = is_supported
        self.calls = []

    def vibrate(self, duration_ms=20):
        self.calls.append(duration_ms)

def pairs_of(game):
    """Returns [(id_a, id_b), ...] for every pair in the deck, in deck order."""
    by_symbol = {}
    for card in game.cards:
        by_symbol.setdefault(card.symbol_id, []).append(card.id)
    return [tuple(ids) for ids in by_symbol.values()]

def mismatching_ids(game):
    """Returns ids of two cards that do not form a pair."""
    first, second = pairs_of(game)[:2]
    return first[0], second[0]

@pytest.fixture
def haptics():
    return RecordingHaptics()

@pytest_asyncio.fixture
async def make_game(haptics):
    """Factory for fast engines that are closed after the test."""
    games = []

    def factory(**overrides):
        options = dict(FAST_TIMINGS, rng=random.Random(1234), haptics=haptics)
        options.update(overrides)
        game = PairsGame(**options)
        games.append(game)
        return game

    yield factory

    for game in games:
        await game.close()
