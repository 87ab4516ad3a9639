"""
Discord Game Bot hosting the Pairs memory game.
"""
import os
import asyncio
import discord
import logging
import traceback
import sys
from discord.ext import commands
from dotenv import load_dotenv

# Custom log formatter that safely handles emojis
class SafeFormatter(logging.Formatter):
    def format(self, record):
        try:
            return super().format(record)
        except UnicodeEncodeError:
            record.msg = str(record.msg).encode('utf-8', 'replace').decode('utf-8')
            if hasattr(record, 'args') and record.args:
                record.args = tuple(
                    str(arg).encode('utf-8', 'replace').decode('utf-8')
                    if isinstance(arg, str) else arg
                    for arg in record.args
                )
            return super().format(record)

# Import from common modules
from common.config import COMMAND_PREFIX, AFK_TIMEOUT_SECONDS, AFK_CHECK_INTERVAL_SECONDS, GAME_IDS
from common.utils.game_utils import active_games, check_afk
from common.commands.help import setup_help_command

# Import game modules
# Pairs Game (ID: 1001)
from games.game_1001_pairs.commands_1001 import setup_pairs_commands, end_game_internal

# Load environment variables
load_dotenv()
TOKEN = os.getenv("DISCORD_BOT_TOKEN")
LOG_LEVEL = os.getenv("LOG_LEVEL", "ERROR").upper()  # Only show errors by default

# Setup logging
file_handler = logging.FileHandler("discord_bot.log", encoding='utf-8')
console_handler = logging.StreamHandler(sys.stdout)

# Apply the safe formatter to both handlers
formatter = SafeFormatter('%(asctime)s [%(levelname)s] %(message)s')
file_handler.setFormatter(formatter)
console_handler.setFormatter(formatter)

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.ERROR),
    handlers=[
        file_handler,
        console_handler
    ]
)
logger = logging.getLogger("discord_bot")

# Setup intents
intents = discord.Intents.default()
intents.message_content = True

# Create bot
bot = commands.Bot(command_prefix=COMMAND_PREFIX, intents=intents, help_command=None)

# Error handler
@bot.event
async def on_error(event, *args, **kwargs):
    error_type, error_value, error_traceback = sys.exc_info()

    error_msg = f"Error in {event}: {error_type.__name__}: {error_value}\n"
    error_msg += "".join(traceback.format_tb(error_traceback))

    logger.error(error_msg)

@bot.event
async def on_command_error(ctx, error):
    error_msg = f"Command '{ctx.command}' error for {ctx.author} in {ctx.channel}: {error}"
    logger.error(error_msg)

    # Send a message to the user
    try:
        if isinstance(error, commands.CommandInvokeError):
            await ctx.send(f"Error executing command: {error.original.__class__.__name__}. Check logs for details.", delete_after=5.0)
        else:
            await ctx.send(f"Command error: {error.__class__.__name__}. Check logs for details.", delete_after=5.0)
    except discord.HTTPException as e:
        logger.error(f"Could not report command error: {e}")

@bot.event
async def on_ready():
    """When the bot is ready."""
    # Start background tasks
    if not getattr(bot, "afk_task", None):
        bot.afk_task = asyncio.create_task(check_afk_games())

    # Log bot info
    logger.info(f"Logged in as {bot.user.name} (ID: {bot.user.id})")
    logger.info(f"Discord.py version: {discord.__version__}")

    # Set bot status
    status_text = " & ".join(GAME_IDS.values())
    await bot.change_presence(activity=discord.Game(name=status_text))

    print(f"{bot.user.name} is ready!")

async def check_afk_games():
    """Background task to end inactive games."""
    while not bot.is_closed():
        try:
            for game_id in GAME_IDS:
                channels_to_check = list(active_games.get(game_id, {}).keys())
                for channel_id in channels_to_check:
                    game = active_games[game_id].get(channel_id)
                    if not game:
                        continue
                    await check_afk(bot, game_id, channel_id, game, end_game_internal, AFK_TIMEOUT_SECONDS)

            await asyncio.sleep(AFK_CHECK_INTERVAL_SECONDS)

        except Exception as e:
            logger.error(f"Error in AFK checker: {e}")
            await asyncio.sleep(AFK_CHECK_INTERVAL_SECONDS * 3)  # Sleep longer on error

@bot.command(name="sync", description="Sync slash commands with Discord")
@commands.is_owner()
async def sync(ctx):
    """Sync slash commands with Discord."""
    try:
        logger.info("Syncing slash commands...")
        await bot.tree.sync()
        await ctx.send("Slash commands synced successfully!", delete_after=1.0)
        await ctx.message.delete(delay=1.0)
        logger.info("Slash commands synced successfully")
    except Exception as e:
        logger.error(f"Error syncing slash commands: {e}")
        await ctx.send(f"Error syncing slash commands: {e}", delete_after=1.0)

async def setup_all_games():
    """Set up all game modules."""
    # Register the common commands
    help_commands = await setup_help_command(bot)

    # Set up pairs commands (ID: 1001)
    pairs_commands = await setup_pairs_commands(bot)

    logger.info(f"Registered commands: {', '.join(list(help_commands.keys()) + list(pairs_commands.keys()))}")

async def close_all_games():
    """Stop every running game so no timer outlives the bot."""
    for games in active_games.values():
        for table in list(games.values()):
            await table.close()
        games.clear()

# Run the bot
async def main():
    """Main entry point."""
    try:
        # Initialize active_games dictionary
        for game_id in GAME_IDS:
            active_games[game_id] = {}

        # Setup all games
        await setup_all_games()

        # Start the bot
        await bot.start(TOKEN)
    except KeyboardInterrupt:
        logger.info("Bot shutdown initiated via keyboard interrupt")
        await bot.close()
    finally:
        await close_all_games()
        logger.info("Bot has been shutdown")

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("Bot shutdown initiated by user (KeyboardInterrupt)")
    except Exception as e:
        logger.error(f"Unhandled exception: {e}")
