"""
Tests for how cards are drawn as Discord buttons.
"""
import discord

from common.config import CARD_BACK, FLOWER_EMOJIS
from games.game_1001_pairs.ui_1001 import render_card_face
from utils.card import Card


class TestRenderCardFace:
    """Button emoji, colour and enabled state per card state."""

    def test_face_down_card_is_clickable(self):
        emoji, style, disabled = render_card_face(Card(id=0, symbol_id=3))
        assert emoji == CARD_BACK
        assert style is discord.ButtonStyle.secondary
        assert disabled is False

    def test_face_up_card_is_locked(self):
        emoji, style, disabled = render_card_face(Card(id=0, symbol_id=3, is_flipped=True))
        assert emoji == FLOWER_EMOJIS[3]
        assert disabled is True

    def test_selected_card(self):
        card = Card(id=0, symbol_id=3, is_flipped=True, is_selected=True)
        _, style, disabled = render_card_face(card)
        assert style is discord.ButtonStyle.primary
        assert disabled is True

    def test_wrong_guess_wins_over_selection(self):
        card = Card(id=0, symbol_id=3, is_flipped=True, is_selected=True, is_wrong_guess=True)
        _, style, _ = render_card_face(card)
        assert style is discord.ButtonStyle.danger

    def test_matched_card(self):
        card = Card(id=0, symbol_id=3, is_flipped=True)
        emoji, style, disabled = render_card_face(card, is_matched=True)
        assert emoji == FLOWER_EMOJIS[3]
        assert style is discord.ButtonStyle.success
        assert disabled is True

    def test_highlighted_card_during_win_sweep(self):
        card = Card(id=0, symbol_id=3, is_flipped=True)
        emoji, style, _ = render_card_face(card, is_matched=True, is_highlighted=True)
        assert emoji == FLOWER_EMOJIS[3]
        assert style is discord.ButtonStyle.primary
