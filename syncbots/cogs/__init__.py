"""Cog extensions for the two bots."""

BAN_SYNC_EXTENSIONS = [
    "syncbots.cogs.bansync",
    "syncbots.cogs.admin",
]

BADGE_REPORT_EXTENSIONS = [
    "syncbots.cogs.badges",
]
