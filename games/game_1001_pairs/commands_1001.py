"""
Command handlers for the Pairs Game (ID: 1001).
"""
import discord
import logging
import traceback
from discord import app_commands

from common.config import EPHEMERAL_MESSAGE_DURATION
from common.utils.game_utils import (
    active_games, get_active_game, register_game, remove_game, format_game_time
)
from games.game_1001_pairs.deck_1001 import Difficulty
from games.game_1001_pairs.ui_1001 import PairsTable

logger = logging.getLogger("discord_bot")

GAME_ID = "1001"  # Unique identifier for the Pairs Game

DIFFICULTY_CHOICES = [
    app_commands.Choice(name=f"{difficulty.label} ({difficulty.pair_count} pairs)", value=difficulty.name.lower())
    for difficulty in Difficulty
]

async def setup_pairs_commands(bot):
    """Set up the Pairs commands."""
    @bot.hybrid_command(
        name="pairs",
        description="Start a game of Pairs in this channel"
    )
    @app_commands.describe(difficulty="Optional: easy (4 pairs), medium (8 pairs) or hard (12 pairs)")
    @app_commands.choices(difficulty=DIFFICULTY_CHOICES)
    async def pairs(ctx, difficulty: str = None):
        """Start a game of Pairs."""
        try:
            if get_active_game(GAME_ID, ctx.channel.id):
                await ctx.send("There's already an active game in this channel. Finish or end that game first.",
                               delete_after=EPHEMERAL_MESSAGE_DURATION * 3)
                return

            chosen = None
            if difficulty:
                chosen = Difficulty.from_name(difficulty)
                if chosen is None:
                    available = ", ".join(d.name.lower() for d in Difficulty)
                    await ctx.send(f"Invalid difficulty. Available difficulties: {available}")
                    return

            table = PairsTable(ctx.author, ctx.channel)
            register_game(GAME_ID, ctx.channel.id, table)

            await ctx.send(f"🌸 **Pairs** started for {ctx.author.mention}!")
            if chosen is None:
                await table.choose_difficulty()
            else:
                await table.start(chosen)

        except Exception as e:
            logger.error(f"Error in pairs command: {e}\n{traceback.format_exc()}")
            removed = remove_game(GAME_ID, ctx.channel.id)
            if removed is not None:
                await removed.close()
            await ctx.send(f"Error starting the game: {type(e).__name__}. Please try again.")

    @bot.hybrid_command(name="pairs_hint", description="Reveal one pair for a moment")
    async def pairs_hint(ctx):
        """Show a hint in the current Pairs game."""
        table = get_active_game(GAME_ID, ctx.channel.id)
        if not table or ctx.author.id != table.player.id:
            await ctx.send("You don't have a Pairs game in this channel.", delete_after=EPHEMERAL_MESSAGE_DURATION)
            return
        table.touch()
        if table.game.show_hint():
            await ctx.send("💡 Look closely!", delete_after=EPHEMERAL_MESSAGE_DURATION)
        elif table.game.hint_cooldown_remaining:
            await ctx.send(f"Next hint in {table.game.hint_cooldown_remaining}s.", delete_after=EPHEMERAL_MESSAGE_DURATION)
        else:
            await ctx.send("No hint available right now.", delete_after=EPHEMERAL_MESSAGE_DURATION)

    @bot.hybrid_command(name="pairs_new", description="Deal a new deck with the same difficulty")
    async def pairs_new(ctx):
        """Deal a new deck in the current Pairs game."""
        table = get_active_game(GAME_ID, ctx.channel.id)
        if not table or ctx.author.id != table.player.id:
            await ctx.send("You don't have a Pairs game in this channel.", delete_after=EPHEMERAL_MESSAGE_DURATION)
            return
        table.touch()
        table.new_game()
        await ctx.send("🔄 New deck dealt!", delete_after=EPHEMERAL_MESSAGE_DURATION)

    @bot.hybrid_command(name="pairs_end", description="End the current Pairs game")
    async def pairs_end(ctx):
        """End the current Pairs game."""
        table = get_active_game(GAME_ID, ctx.channel.id)
        if not table:
            await ctx.send("There's no active Pairs game in this channel.", delete_after=EPHEMERAL_MESSAGE_DURATION)
            return
        if ctx.author.id != table.player.id:
            await ctx.send("Only the player can end this game.", delete_after=EPHEMERAL_MESSAGE_DURATION)
            return
        await end_pairs_game_internal(ctx.channel, table, ctx.author, "Ended by the player.")

    # Return commands for reference
    return {
        "pairs": pairs,
        "pairs_hint": pairs_hint,
        "pairs_new": pairs_new,
        "pairs_end": pairs_end
    }

async def end_pairs_game_internal(channel, table, ended_by=None, reason="Game ended."):
    """End a Pairs game and clean up resources.

    Args:
        channel: Discord channel where the game is taking place
        table: The PairsTable instance
        ended_by: The user who ended the game
        reason: The reason the game ended
    """
    try:
        # Check if game exists and isn't already closed
        if get_active_game(GAME_ID, channel.id) is not table or table.closed:
            return

        remove_game(GAME_ID, channel.id)
        game = table.game

        embed = discord.Embed(
            title="Pairs Game Ended",
            description=f"{table.player.mention}'s game has ended.",
            color=discord.Color.gold()
        )
        embed.add_field(name="Reason", value=f"• {reason}", inline=True)
        if game.selected_difficulty is not None:
            embed.add_field(
                name="Progress",
                value=(f"Pairs: {len(game.matched_card_ids) // 2}/{game.total_cards // 2}\n"
                       f"Attempts: {game.guess_attempts}\n"
                       f"Time: {format_game_time(game.game_time_seconds)}"),
                inline=True
            )
        if ended_by:
            embed.set_footer(text=f"Game ended by {ended_by.display_name}")

        await table.close()
        await channel.send(embed=embed)

        logger.info(f"Pairs game ended in channel {channel.id}: {reason}")

    except Exception as e:
        logger.error(f"Error ending Pairs game: {e}\n{traceback.format_exc()}")
        # Try to remove the game from active games
        if GAME_ID in active_games:
            active_games[GAME_ID].pop(channel.id, None)

# Alias to match bot.py import
end_game_internal = end_pairs_game_internal
