"""AI Devs challenge task runner."""

__version__ = "0.1.0"
