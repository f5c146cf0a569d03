"""Discord ban-sync and Roblox badge-report bots."""

__version__ = "0.1.0"
