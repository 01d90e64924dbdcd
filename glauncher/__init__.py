"""GLauncher - offline Minecraft launcher core."""

__version__ = "1.2.0"
