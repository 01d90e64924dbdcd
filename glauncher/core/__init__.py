"""Core launch pipeline."""

from .game_launcher import GameLauncher, substitute
from .launcher import Launcher

__all__ = ["GameLauncher", "Launcher", "substitute"]
