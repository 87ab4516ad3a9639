"""
Utility functions shared by the bot and the Pairs game.
"""
import logging
import time

logger = logging.getLogger("discord_bot")

# Active games tracking - dictionary of dictionaries: {game_id: {channel_id: game_instance}}
active_games = {}

def get_active_game(game_id, channel_id):
    """Returns the game running in a channel, or None."""
    return active_games.get(game_id, {}).get(channel_id)

def register_game(game_id, channel_id, game):
    """Stores a game as the active one for its channel."""
    active_games.setdefault(game_id, {})[channel_id] = game

def remove_game(game_id, channel_id):
    """Forgets the game running in a channel. Returns the removed game, or None."""
    return active_games.get(game_id, {}).pop(channel_id, None)

async def check_afk(bot, game_id, channel_id, game, end_game_func, afk_timeout, now=None):
    """
    Check if a game is AFK and end it if necessary.

    Args:
        bot: The Discord bot instance
        game_id: The unique game identifier
        channel_id: The channel ID where the game is taking place
        game: The game instance (anything with a last_activity_time)
        end_game_func: Coroutine function (channel, game, ended_by, reason) to end the game
        afk_timeout: Timeout in seconds
        now: Current time, defaults to time.time()

    Returns:
        bool: True if game was ended due to AFK, False otherwise
    """
    try:
        current_time = now if now is not None else time.time()

        # Check if the game has been inactive for too long
        if current_time - game.last_activity_time <= afk_timeout:
            return False

        # Get the channel
        channel = bot.get_channel(channel_id)
        if not channel:
            # Channel no longer exists, remove the game
            removed = remove_game(game_id, channel_id)
            if removed is not None and hasattr(removed, "close"):
                await removed.close()
            return True

        # End the game due to AFK
        await end_game_func(
            channel,
            game,
            None,
            f"Game ended due to inactivity (no moves for {int(afk_timeout/60)} minutes)."
        )
        return True

    except Exception as e:
        logger.error(f"Error in AFK check: {e}")
        return False

def format_game_time(total_seconds):
    """Formats a number of seconds as mm:ss."""
    minutes, seconds = divmod(max(0, int(total_seconds)), 60)
    return f"{minutes:02d}:{seconds:02d}"
