"""
Tests for the hint subsystem.
"""
import asyncio
import random

import pytest

from games.game_1001_pairs.deck_1001 import Difficulty
from games.game_1001_pairs.game_1001 import FlipOutcome
from conftest import pairs_of


class PickingRandom(random.Random):
    """Chooses the hint pair holding target_id when there is one."""
    target_id = None

    def choice(self, seq):
        for item in seq:
            if isinstance(item, list) and any(card.id == self.target_id for card in item):
                return item
        return super().choice(seq)


async def start_playing(game, difficulty=Difficulty.EASY):
    game.select_difficulty(difficulty)
    await asyncio.wait_for(game.wait_until_playing(), timeout=2)


def card(game, card_id):
    return next(c for c in game.cards if c.id == card_id)


class TestShowHint:
    """Revealing a pair."""

    @pytest.mark.asyncio
    async def test_hint_reveals_one_unmatched_pair(self, make_game):
        game = make_game()
        await start_playing(game)

        assert game.show_hint() is True

        hint_ids = game.hint_card_ids
        assert len(hint_ids) == 2
        first, second = (card(game, card_id) for card_id in hint_ids)
        assert first.symbol_id == second.symbol_id
        assert first.is_flipped and second.is_flipped
        assert game.is_hint_used
        assert game.hint_counter == 1
        assert game.next_hint_available_time == game.game_time_seconds + 15

    @pytest.mark.asyncio
    async def test_hint_skips_matched_pairs(self, make_game):
        game = make_game(hint_cooldown=0)
        await start_playing(game)
        pairs = pairs_of(game)
        for a, b in pairs[:-1]:
            game.flip(a)
            game.flip(b)

        assert game.show_hint() is True
        assert sorted(game.hint_card_ids) == sorted(pairs[-1])

    @pytest.mark.asyncio
    async def test_hint_ignored_during_preview(self, make_game):
        game = make_game()
        game.select_difficulty(Difficulty.EASY)
        before = game.cards

        assert game.show_hint() is False
        assert game.cards == before
        assert game.hint_counter == 0

    @pytest.mark.asyncio
    async def test_hint_ignored_without_a_deck(self, make_game):
        game = make_game()
        assert game.show_hint() is False

    @pytest.mark.asyncio
    async def test_second_hint_in_a_row_is_ignored(self, make_game):
        game = make_game()
        await start_playing(game)

        assert game.show_hint() is True
        first_ids = game.hint_card_ids
        assert game.show_hint() is False

        assert game.hint_card_ids == first_ids
        assert game.hint_counter == 1

    @pytest.mark.asyncio
    async def test_hint_ignored_after_win(self, make_game):
        game = make_game()
        await start_playing(game)
        for a, b in pairs_of(game):
            game.flip(a)
            game.flip(b)

        assert game.is_game_won
        assert game.show_hint() is False


class TestHintTiming:
    """Auto-hide and cooldown."""

    @pytest.mark.asyncio
    async def test_hint_cards_flip_back(self, make_game):
        game = make_game()
        await start_playing(game)
        game.show_hint()
        hint_ids = game.hint_card_ids

        await asyncio.sleep(game.hint_duration_seconds + 0.05)

        assert not any(card(game, card_id).is_flipped for card_id in hint_ids)
        assert game.hint_card_ids == []
        assert not game.is_hint_used

    @pytest.mark.asyncio
    async def test_hint_duration_is_tenth_of_cooldown(self, make_game):
        game = make_game(tick_seconds=1.0)
        assert game.hint_duration_seconds == pytest.approx(1.5)

    @pytest.mark.asyncio
    async def test_hint_during_cooldown_is_ignored(self, make_game):
        game = make_game()
        await start_playing(game)
        game.show_hint()
        await asyncio.sleep(game.hint_duration_seconds + 0.05)
        assert not game.is_hint_used

        # Push the cooldown far out so the timer cannot catch up mid-test
        game.state.next_hint_available_time = game.game_time_seconds + 1000
        assert game.hint_cooldown_remaining > 0
        assert game.show_hint() is False
        assert game.hint_counter == 1

        game.state.game_time_seconds = game.state.next_hint_available_time
        assert game.hint_cooldown_remaining == 0
        assert game.show_hint() is True
        assert game.hint_counter == 2

    @pytest.mark.asyncio
    async def test_matched_hint_cards_stay_face_up(self, make_game):
        game = make_game()
        await start_playing(game)
        game.show_hint()
        hint_ids = game.hint_card_ids
        game.state.matched_card_ids.update(hint_ids)

        await asyncio.sleep(game.hint_duration_seconds + 0.05)

        assert all(card(game, card_id).is_flipped for card_id in hint_ids)
        assert not game.is_hint_used

    @pytest.mark.asyncio
    async def test_selected_card_stays_up_after_hint(self, make_game):
        rng = PickingRandom(5)
        game = make_game(rng=rng)
        await start_playing(game)
        a, b = pairs_of(game)[0]
        game.flip(a)
        rng.target_id = a

        assert game.show_hint() is True
        assert sorted(game.hint_card_ids) == sorted((a, b))
        # The partner is face up, so it cannot be flipped during the hint
        assert game.flip(b) is FlipOutcome.IGNORED

        await asyncio.sleep(game.hint_duration_seconds + 0.05)

        assert card(game, a).is_flipped and card(game, a).is_selected
        assert not card(game, b).is_flipped
        assert game.flip(b) is FlipOutcome.MATCH

    @pytest.mark.asyncio
    async def test_reset_cancels_hint(self, make_game):
        game = make_game(tick_seconds=0.05)
        await start_playing(game)
        game.show_hint()

        game.reset_game()
        fresh = game.cards
        await asyncio.sleep(game.hint_duration_seconds + 0.05)

        assert game.is_in_preview_mode
        assert game.cards == fresh
        assert game.hint_card_ids == []

    @pytest.mark.asyncio
    async def test_hint_skips_pairs_in_a_wrong_guess(self, make_game):
        rng = PickingRandom(5)
        game = make_game(rng=rng)
        await start_playing(game)
        first, second = pairs_of(game)[:2]
        assert game.flip(first[0]) is FlipOutcome.SELECTED
        assert game.flip(second[0]) is FlipOutcome.MISMATCH
        rng.target_id = first[0]

        assert game.show_hint() is True

        hint_ids = set(game.hint_card_ids)
        assert not hint_ids & set(first)
        assert not hint_ids & set(second)
