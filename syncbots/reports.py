"""Badge request parsing and report formatting."""

import re
from typing import NamedTuple, Optional

USER_LINE = re.compile(r"^User\s*:\s*(.+)$", re.IGNORECASE)
GAME_LINE = re.compile(r"^Game\s*:\s*(.+)$", re.IGNORECASE)

NOTICE_TEXT = (
    "Please use this format:\n```\nUser: <username or user ID>\nGame: <game ID>\n```\n"
    "- Make sure DMs are enabled."
)


class BadgeRequest(NamedTuple):
    user: str
    game: str


def parse_badge_request(content) -> Optional[BadgeRequest]:
    """Parse the two leading ``User:`` / ``Game:`` lines of a message.

    Lines after the second one are ignored.
    """
    lines = [line.strip() for line in content.splitlines() if line.strip()]
    if len(lines) < 2:
        return None

    user_match = USER_LINE.match(lines[0])
    game_match = GAME_LINE.match(lines[1])
    if not user_match or not game_match:
        return None

    user = user_match.group(1).strip()
    game = game_match.group(1).strip()
    if not user or not game:
        return None
    return BadgeRequest(user, game)


def _badge_lines(badges):
    if not badges:
        return ["(none)"]
    return [f"- {badge.name} ({badge.id})" for badge in badges]


def compose_report(roblox_user, discord_tag, discord_id, classification):
    lines = [
        "===== Common Info =====",
        "--- Roblox ---",
        f"Display Name: {roblox_user.display_name}",
        f"Username: {roblox_user.username}",
        f"UID: {roblox_user.user_id}",
        "--- Discord ---",
        f"UID: {discord_id}",
        f"Username: {discord_tag}",
        "",
        "===== Obtained Badges =====",
        *_badge_lines(classification.obtained),
        "",
        "===== Missing Badges =====",
        *_badge_lines(classification.missing),
    ]
    return "\n".join(lines)


def report_filename(username, discord_id):
    return f"{username}_{discord_id}.txt"
