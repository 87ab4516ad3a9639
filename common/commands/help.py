"""
Help command for the game bot.
"""
import discord
import logging

from common.config import (
    GAME_IDS, PREVIEW_COUNTDOWN_SECONDS, HINT_COOLDOWN_SECONDS, AFK_TIMEOUT_SECONDS
)

logger = logging.getLogger("discord_bot")

class HelpView(discord.ui.View):
    def __init__(self, ctx, command_prefix):
        super().__init__(timeout=60)
        self.ctx = ctx
        self.command_prefix = command_prefix
        self.message = None

    @discord.ui.select(
        placeholder="Select game or category",
        options=[
            discord.SelectOption(label="Overview", value="overview", description="General bot overview", default=True),
            discord.SelectOption(label="Pairs", value="1001", description="Pairs memory game"),
            discord.SelectOption(label="General Commands", value="general", description="General commands")
        ]
    )
    async def help_select(self, interaction: discord.Interaction, select: discord.ui.Select):
        """Handle selection of help category."""
        selection = select.values[0]

        if selection == "overview":
            embed = create_overview_embed(self.command_prefix)
        elif selection == "general":
            embed = create_general_commands_embed(self.command_prefix)
        else:
            embed = create_game_help_embed(selection, self.command_prefix)

        await interaction.response.edit_message(embed=embed, view=self)

    async def on_timeout(self):
        """Disable the view when it times out."""
        for item in self.children:
            item.disabled = True

        if self.message is None:
            return
        try:
            await self.message.edit(view=self)
        except discord.HTTPException as e:
            logger.debug(f"Could not disable help menu: {e}")

def create_overview_embed(command_prefix):
    """Create an overview embed for the bot."""
    embed = discord.Embed(
        title="Game Bot Help",
        description="Welcome to the Game Bot! Train your memory with a game of Pairs.",
        color=discord.Color.blue()
    )

    embed.add_field(
        name="Available Games",
        value="• **Pairs** - Flip cards two at a time and find every matching pair",
        inline=False
    )

    embed.add_field(
        name="Quick Start",
        value=(
            f"Use `{command_prefix}help` and select a game from the dropdown menu for detailed instructions.\n"
            f"Start a game with `{command_prefix}pairs` or `{command_prefix}pairs hard`"
        ),
        inline=False
    )

    embed.set_footer(text="Select a specific game or 'General Commands' from the dropdown for more information")

    return embed

def create_general_commands_embed(command_prefix):
    """Create an embed for general commands."""
    embed = discord.Embed(
        title="General Commands",
        description="These commands work across all games",
        color=discord.Color.blue()
    )

    embed.add_field(
        name="Help",
        value=(
            f"`{command_prefix}help` - Show this help menu\n"
            f"• Select a game from the dropdown for specific help"
        ),
        inline=False
    )

    return embed

def create_game_help_embed(game_id, command_prefix):
    """Create a help embed for a specific game."""
    game_name = GAME_IDS.get(game_id, "Unknown Game")

    embed = discord.Embed(
        title=f"{game_name} Help",
        color=discord.Color.blue()
    )

    if game_id == "1001":  # Pairs
        embed.description = "Find every pair of flowers in as few attempts as you can."

        embed.add_field(
            name="How to Play",
            value=(
                "1. Pick a difficulty: Easy (4 pairs), Medium (8 pairs) or Hard (12 pairs)\n"
                f"2. All cards are shown for {PREVIEW_COUNTDOWN_SECONDS} seconds, then flipped face down\n"
                "3. Flip two cards per attempt\n"
                "4. Matching cards stay face up, other cards flip back after a moment\n"
                "5. Find all pairs to win!"
            ),
            inline=False
        )

        embed.add_field(
            name="Hints",
            value=(
                "Press 💡 **Hint** to reveal one pair for a moment.\n"
                f"After a hint you have to wait {HINT_COOLDOWN_SECONDS} seconds of play for the next one."
            ),
            inline=False
        )

        embed.add_field(
            name="Commands",
            value=(
                f"`{command_prefix}pairs [difficulty]` - Start a game in this channel\n"
                f"`{command_prefix}pairs_hint` - Show a hint\n"
                f"`{command_prefix}pairs_new` - Deal a new deck with the same difficulty\n"
                f"`{command_prefix}pairs_end` - End your game"
            ),
            inline=False
        )

    embed.add_field(
        name="Notes",
        value=(
            f"• Games end after {int(AFK_TIMEOUT_SECONDS / 60)} minutes of inactivity\n"
            "• Only the player who started a game can press its buttons"
        ),
        inline=False
    )

    return embed

async def setup_help_command(bot):
    """Set up the help command."""

    @bot.hybrid_command(name="help", description="Show information about available games")
    async def help_cmd(ctx):
        """Show help information about the available games."""
        try:
            view = HelpView(ctx, bot.command_prefix)
            embed = create_overview_embed(bot.command_prefix)
            msg = await ctx.send(embed=embed, view=view)

            # Store the message for later reference
            view.message = msg

        except Exception as e:
            logger.error(f"Error showing help: {e}")
            await ctx.send("Error showing help. Please try again.")

    return {
        "help": help_cmd
    }
