"""
Configuration package for the Discord Pairs Game.
"""
from common.config.game_config import *
