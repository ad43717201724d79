"""Version information for harbourmaster."""

__version__ = "0.4.0"
