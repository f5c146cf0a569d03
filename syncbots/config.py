"""Configuration and constants for the ban-sync and badge-report bots."""

import os
from dotenv import load_dotenv

load_dotenv()

# Directory holding the log files and the persisted ban counter
DATA_DIR = os.getenv("DATA_DIR", "data")


def _get_id(name):
    value = os.getenv(name)
    if not value:
        return None
    return int(value)


# Ban-sync bot
def get_ban_bot_token():
    return os.getenv("BAN_SYNC_BOT_TOKEN")


def get_main_server_id():
    return _get_id("MAIN_SERVER_ID")


def get_owner_id():
    return _get_id("OWNER_ID")


def get_bans_file():
    return os.getenv("BANS_FILE", os.path.join(DATA_DIR, "bans.json"))


# Badge-report bot
def get_badge_bot_token():
    return os.getenv("BADGE_REPORT_BOT_TOKEN")


def get_monitored_channel_id():
    return _get_id("MONITORED_CHANNEL_ID")


def get_loading_emoji():
    return os.getenv("LOADING_EMOJI", "⏳")


# Constants
SYNC_INTERVAL_SECONDS = 10

BADGE_CHECK_WORKERS = 5
BADGE_PAGE_LIMIT = 100

INVALID_MESSAGE_DELETE_DELAY = 1
INVALID_EMOJI = "❌"
SUCCESS_EMOJI = "✅"

SERVERS_PER_PAGE = 10
STATUS_COLOR = 0x00AE86
NOTICE_COLOR = 0xFF0000
