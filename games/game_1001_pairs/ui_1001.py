"""
UI components for the Discord Pairs Game (ID: 1001).
"""
import discord
import logging
import traceback
import time
import asyncio

from common.config import BOARD_REFRESH_SECONDS, CARD_BACK, FLOWER_EMOJIS
from common.utils.game_utils import format_game_time
from games.game_1001_pairs.deck_1001 import Difficulty
from games.game_1001_pairs.game_1001 import PairsGame, GamePhase, FlipOutcome

logger = logging.getLogger("discord_bot")

def render_card_face(card, is_matched=False, is_highlighted=False):
    """Works out how a card button looks.

    Returns:
        Tuple of (emoji: str, style: discord.ButtonStyle, disabled: bool)
    """
    emoji = FLOWER_EMOJIS[card.symbol_id] if card.is_flipped else CARD_BACK

    if is_highlighted:
        return FLOWER_EMOJIS[card.symbol_id], discord.ButtonStyle.primary, True
    if card.is_wrong_guess:
        return emoji, discord.ButtonStyle.danger, True
    if is_matched:
        return emoji, discord.ButtonStyle.success, True
    if card.is_selected:
        return emoji, discord.ButtonStyle.primary, True
    # Face-up cards (preview, hint) cannot be flipped
    return emoji, discord.ButtonStyle.secondary, card.is_flipped

class CardButton(discord.ui.Button):
    """A button representing a card in the pairs game."""
    def __init__(self, card, row, is_matched=False, is_highlighted=False, force_disabled=False):
        emoji, style, disabled = render_card_face(card, is_matched, is_highlighted)
        super().__init__(
            style=style,
            emoji=emoji,
            disabled=disabled or force_disabled,
            row=row
        )
        self.card_id = card.id

    async def callback(self, interaction):
        view = self.view
        try:
            await view.table.select_card(interaction, self.card_id)
        except discord.errors.NotFound:
            logger.warning(f"Interaction or message not found during CardButton callback. User: {interaction.user.id}")
        except Exception as e:
            logger.error(f"Error in button callback: {e}\n{traceback.format_exc()}")
            if not interaction.response.is_done():
                await interaction.response.send_message(
                    f"Error processing button: {type(e).__name__}. Please try again.",
                    ephemeral=True
                )

class GameView(discord.ui.View):
    """View that displays one button per card."""
    def __init__(self, table):
        super().__init__(timeout=None)
        self.table = table
        self._add_buttons()

    def _add_buttons(self):
        game = self.table.game
        difficulty = game.selected_difficulty
        columns = difficulty.grid_columns if difficulty else 5
        matched = game.matched_card_ids
        highlighted = game.currently_animating_card_id
        locked = game.phase is not GamePhase.PLAY

        for index, card in enumerate(game.cards):
            self.add_item(CardButton(
                card,
                row=index // columns,
                is_matched=card.id in matched,
                is_highlighted=card.id == highlighted,
                force_disabled=locked
            ))

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item):
        logger.error(f"Error in GameView item {item}: {error}\n{traceback.format_exc()}")
        if interaction.response.is_done():
            await interaction.followup.send(f"An error occurred with the interface: {type(error).__name__}", ephemeral=True)
        else:
            await interaction.response.send_message(f"An error occurred with the interface: {type(error).__name__}", ephemeral=True)

class ControlsView(discord.ui.View):
    """Hint / new game / difficulty / end controls attached to the board message."""
    def __init__(self, table):
        super().__init__(timeout=None)
        self.table = table

        game = table.game
        can_hint = (game.phase is GamePhase.PLAY and not game.is_hint_used
                    and game.hint_cooldown_remaining == 0)
        self.hint_button.disabled = not can_hint
        if game.phase is GamePhase.PLAY and game.hint_cooldown_remaining:
            self.hint_button.label = f"Hint ({game.hint_cooldown_remaining}s)"

    async def interaction_check(self, interaction):
        if interaction.user.id != self.table.player.id:
            await interaction.response.send_message("Only the player can use these controls.", ephemeral=True)
            return False
        return True

    @discord.ui.button(label="Hint", emoji="💡", style=discord.ButtonStyle.primary)
    async def hint_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        self.table.touch()
        if self.table.game.show_hint():
            await interaction.response.defer()
        else:
            await interaction.response.send_message("No hint available right now.", ephemeral=True)

    @discord.ui.button(label="New Game", emoji="🔄", style=discord.ButtonStyle.success)
    async def new_game_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        self.table.touch()
        await interaction.response.defer()
        self.table.new_game()

    @discord.ui.button(label="Change Difficulty", emoji="🎚️", style=discord.ButtonStyle.secondary)
    async def difficulty_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        self.table.touch()
        await interaction.response.defer()
        await self.table.choose_difficulty()

    @discord.ui.button(label="End", emoji="🛑", style=discord.ButtonStyle.danger)
    async def end_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        # Import here to avoid circular imports
        from games.game_1001_pairs.commands_1001 import end_pairs_game_internal

        await interaction.response.defer()
        await end_pairs_game_internal(self.table.channel, self.table, interaction.user, "Ended by the player.")

class DifficultySelectView(discord.ui.View):
    """Lets the player pick a difficulty before the deck is dealt."""
    def __init__(self, table):
        super().__init__(timeout=None)
        self.table = table

    async def interaction_check(self, interaction):
        if interaction.user.id != self.table.player.id:
            await interaction.response.send_message("Only the player can pick the difficulty.", ephemeral=True)
            return False
        return True

    async def _pick(self, interaction, difficulty):
        self.table.touch()
        await interaction.response.defer()
        self.stop()
        await self.table.start(difficulty)

    @discord.ui.button(label="Easy (4 pairs)", style=discord.ButtonStyle.success)
    async def easy_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._pick(interaction, Difficulty.EASY)

    @discord.ui.button(label="Medium (8 pairs)", style=discord.ButtonStyle.primary)
    async def medium_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._pick(interaction, Difficulty.MEDIUM)

    @discord.ui.button(label="Hard (12 pairs)", style=discord.ButtonStyle.danger)
    async def hard_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._pick(interaction, Difficulty.HARD)

class PairsTable:
    """One player's pairs game in one channel, and the messages that show it.

    The board message carries the embed and the controls; the cards message
    carries one button per card. Both are refreshed from engine change
    notifications, at most once per BOARD_REFRESH_SECONDS.
    """
    def __init__(self, player, channel, game=None):
        self.player = player
        self.channel = channel
        self.game = game or PairsGame()
        self.board_message = None
        self.buttons_message = None
        self.last_activity_time = time.time()  # For AFK tracking
        self.closed = False

        self._dirty = False
        self._refresh_task = None
        self._board_key = None
        self._cards_key = None
        self._announced_win = False
        self._show_lock = asyncio.Lock()  # One send/edit round at a time

        self.game.add_listener(self._on_game_changed)

    def touch(self):
        self.last_activity_time = time.time()

    async def start(self, difficulty):
        """Deals a deck for the difficulty and shows it."""
        self._announced_win = False
        self.game.select_difficulty(difficulty)
        await self.show()
        logger.info(f"Pairs game on {difficulty.name} started for {self.player.display_name} in channel {self.channel.id}")

    def new_game(self):
        """Deals a new deck with the same difficulty."""
        self._announced_win = False
        self.game.reset_game()
        logger.info(f"New pairs deck dealt in channel {self.channel.id}")

    async def choose_difficulty(self):
        """Clears the game and asks the player for a difficulty."""
        self.game.reset_game_and_difficulty()

        embed = discord.Embed(
            title="Pairs - Choose a difficulty",
            description="Pick how many pairs you want to find.",
            color=discord.Color.blue()
        )
        embed.set_footer(text=f"Player: {self.player.display_name}")
        view = DifficultySelectView(self)
        async with self._show_lock:
            await self._delete_buttons_message()
            if self.board_message is None:
                self.board_message = await self.channel.send(embed=embed, view=view)
            else:
                await self.board_message.edit(embed=embed, view=view)
            self._board_key = None

    def get_board_embed(self):
        """Get an embed describing the current game state."""
        game = self.game
        difficulty = game.selected_difficulty
        title = f"Pairs - {difficulty.label}" if difficulty else "Pairs"

        if game.phase is GamePhase.PREVIEW:
            description = f"👀 Memorize the cards! They flip in **{game.countdown_seconds}s**."
            color = discord.Color.orange()
        elif game.phase is GamePhase.WON:
            description = f"🏆 **All pairs found!** {self.player.display_name} wins."
            color = discord.Color.gold()
        else:
            description = "Flip two cards at a time and find every pair."
            color = discord.Color.blue()

        embed = discord.Embed(title=title, description=description, color=color)
        embed.add_field(name="Time", value=format_game_time(game.game_time_seconds), inline=True)
        embed.add_field(name="Attempts", value=str(game.guess_attempts), inline=True)
        embed.add_field(name="Pairs", value=f"{len(game.matched_card_ids) // 2}/{game.total_cards // 2}", inline=True)
        embed.add_field(name="Hints used", value=str(game.hint_counter), inline=True)
        if game.phase is GamePhase.PLAY:
            if game.is_hint_used:
                next_hint = "Showing"
            elif game.hint_cooldown_remaining:
                next_hint = f"in {game.hint_cooldown_remaining}s"
            else:
                next_hint = "Ready"
            embed.add_field(name="Next hint", value=next_hint, inline=True)
        embed.set_footer(text=f"Player: {self.player.display_name}")
        return embed

    def _current_board_key(self):
        game = self.game
        return (game.phase, game.countdown_seconds, game.game_time_seconds, game.guess_attempts,
                len(game.matched_card_ids), game.hint_counter, game.is_hint_used, game.hint_cooldown_remaining)

    def _current_cards_key(self):
        game = self.game
        return (game.phase, tuple(game.cards), game.matched_card_ids, game.currently_animating_card_id)

    async def show(self):
        """Creates or updates the board and cards messages."""
        async with self._show_lock:
            await self._show()

    async def _show(self):
        if self.closed:
            return
        if self.game.selected_difficulty is None:
            # The board message is showing the difficulty picker
            return

        board_key = self._current_board_key()
        if self.board_message is None:
            self.board_message = await self.channel.send(embed=self.get_board_embed(), view=ControlsView(self))
        elif board_key != self._board_key:
            await self.board_message.edit(embed=self.get_board_embed(), view=ControlsView(self))
        self._board_key = board_key

        if not self.game.total_cards:
            return
        cards_key = self._current_cards_key()
        if self.buttons_message is None:
            content = f"{self.player.mention}'s cards:"
            self.buttons_message = await self.channel.send(content=content, view=GameView(self))
        elif cards_key != self._cards_key:
            await self.buttons_message.edit(view=GameView(self))
        self._cards_key = cards_key

    async def select_card(self, interaction, card_id):
        """Handle a card button press."""
        if interaction.user.id != self.player.id:
            await interaction.response.send_message("This isn't your game! Start your own with `/pairs`.", ephemeral=True)
            return

        self.touch()
        outcome = self.game.flip(card_id)
        if outcome is FlipOutcome.IGNORED:
            await interaction.response.defer()
            return

        # Answer with the updated cards straight away; the board follows on the next refresh
        self._cards_key = self._current_cards_key()
        await interaction.response.edit_message(view=GameView(self))

        if outcome is FlipOutcome.WON and not self._announced_win:
            self._announced_win = True
            game = self.game
            await self.channel.send(
                f"🏆 **{self.player.display_name} found all {game.total_cards // 2} pairs!** "
                f"Attempts: {game.guess_attempts}, time: {format_game_time(game.game_time_seconds)}, "
                f"hints: {game.hint_counter}"
            )

    def _on_game_changed(self, game):
        if self.closed or self.board_message is None:
            return
        self._dirty = True
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.create_task(self._refresh_loop())

    async def _refresh_loop(self):
        while self._dirty and not self.closed:
            await asyncio.sleep(BOARD_REFRESH_SECONDS)
            self._dirty = False
            try:
                await self.show()
            except discord.NotFound:
                logger.warning(f"Pairs messages in channel {self.channel.id} were deleted")
                return
            except Exception as e:
                logger.error(f"Error refreshing pairs board: {e}\n{traceback.format_exc()}")

    async def _delete_buttons_message(self):
        if self.buttons_message is None:
            return
        try:
            await self.buttons_message.delete()
        except Exception as e:
            logger.error(f"Error deleting pairs buttons message: {e}")
        self.buttons_message = None
        self._cards_key = None

    async def close(self):
        """Stops the engine and the refresh loop, and removes the card buttons."""
        self.closed = True
        if self._refresh_task is not None and not self._refresh_task.done():
            self._refresh_task.cancel()
        await self.game.close()
        async with self._show_lock:
            await self._delete_buttons_message()
            if self.board_message is not None:
                try:
                    await self.board_message.edit(view=None)
                except Exception as e:
                    logger.error(f"Error removing pairs controls: {e}")
