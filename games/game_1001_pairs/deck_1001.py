"""
Deck generation for the Discord Pairs Game (ID: 1001).
"""
import random
import logging
from enum import Enum

from common.config import SYMBOL_POOL_SIZE
from utils.card import Card

logger = logging.getLogger("discord_bot")

class Difficulty(Enum):
    """Difficulty levels; each maps to a pair count and a grid width."""
    EASY = (4, 4)     # 8 cards
    MEDIUM = (8, 4)   # 16 cards
    HARD = (12, 5)    # 24 cards

    def __init__(self, pair_count, grid_columns):
        self.pair_count = pair_count
        self.grid_columns = grid_columns

    @property
    def total_cards(self):
        return self.pair_count * 2

    @property
    def label(self):
        return self.name.capitalize()

    @classmethod
    def from_name(cls, name):
        """Looks up a difficulty by case-insensitive name, or None."""
        try:
            return cls[name.strip().upper()]
        except (KeyError, AttributeError):
            return None

def build_deck(pair_count, rng=None, pool_size=SYMBOL_POOL_SIZE):
    """Builds a shuffled deck of face-up cards holding pair_count pairs.

    Symbols are drawn from range(pool_size) without replacement, duplicated,
    and the resulting sequence is shuffled uniformly. Card ids are positions
    in the shuffled deck.

    Raises:
        ValueError: if pair_count is not between 1 and pool_size.
    """
    if pair_count < 1 or pair_count > pool_size:
        logger.error(f"Cannot build a deck of {pair_count} pairs from a pool of {pool_size} symbols")
        raise ValueError(f"pair_count must be between 1 and {pool_size}, got {pair_count}")

    rng = rng or random.Random()

    # Take required number of symbols, one copy per card of each pair
    symbols_for_game = rng.sample(range(pool_size), pair_count) * 2
    rng.shuffle(symbols_for_game)

    cards = [
        Card(id=index, symbol_id=symbol_id, is_flipped=True, is_selected=False)
        for index, symbol_id in enumerate(symbols_for_game)
    ]
    logger.debug(f"Built deck with {pair_count} pairs ({len(cards)} cards)")
    return cards
