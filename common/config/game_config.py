"""
Configuration settings for the Discord Pairs Game.
"""

# --- Bot Configuration ---
COMMAND_PREFIX = '!'

# Game ID -> display name
GAME_IDS = {
    "1001": "Pairs"
}

# --- Deck Configuration ---
CARD_BACK = "❓"  # The emoji shown for face-down cards

# The fixed symbol pool; a card's symbol_id is an index into this list
FLOWER_EMOJIS = [
    "🌸", "🌺", "🌻", "🌼", "🌷", "🌹", "🥀",
    "💐", "🪷", "🪻", "🏵️", "💮", "🌱", "🌿",
    "🍀", "🍁", "🍂", "🌾", "🌵", "🌴", "🍄",
]
SYMBOL_POOL_SIZE = len(FLOWER_EMOJIS)

# --- Engine Timing ---
# Seconds the whole deck is shown face-up before play begins
PREVIEW_COUNTDOWN_SECONDS = 8

# Length of one countdown / game-timer tick, in seconds
TICK_SECONDS = 1.0

# Time (in seconds) a wrong guess stays visible before flipping back
WRONG_GUESS_DELAY_SECONDS = 1.0

# Game-seconds between two hints
HINT_COOLDOWN_SECONDS = 15

# A hint stays visible for HINT_COOLDOWN_SECONDS / HINT_DURATION_DIVISOR ticks
HINT_DURATION_DIVISOR = 10

# Time (in seconds) each card stays highlighted during the win sweep
WIN_SWEEP_DWELL_SECONDS = 0.2

# --- Haptics ---
MISMATCH_VIBRATION_MS = 20
WIN_VIBRATION_MS = 10

# --- Discord Presentation ---
# Minimum time (in seconds) between two edits of the same board message
BOARD_REFRESH_SECONDS = 1.0

# Time (in seconds) to auto-dismiss ephemeral messages
EPHEMERAL_MESSAGE_DURATION = 2.0

# AFK timeout (in seconds) - 5 minutes
AFK_TIMEOUT_SECONDS = 300.0

# How often the AFK sweeper runs
AFK_CHECK_INTERVAL_SECONDS = 10.0
