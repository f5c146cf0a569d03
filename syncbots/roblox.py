"""Roblox public API lookups: users, place universes and badges.

Every lookup is best effort. A non-200 response, a malformed body or a
network error means "not found" and is never retried.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

import aiohttp

from syncbots.config import BADGE_CHECK_WORKERS, BADGE_PAGE_LIMIT

USERS_API = "https://users.roblox.com/v1"
UNIVERSES_API = "https://apis.roblox.com/universes/v1"
BADGES_API = "https://badges.roblox.com/v1"

NUMERIC_ID = re.compile(r"[0-9]+")

LOOKUP_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, ValueError, KeyError, TypeError)


class RobloxUser(NamedTuple):
    user_id: int
    username: str
    display_name: str


class Badge(NamedTuple):
    id: int
    name: str


@dataclass
class BadgeClassification:
    obtained: List[Badge] = field(default_factory=list)
    missing: List[Badge] = field(default_factory=list)


async def resolve_user(session, query) -> Optional[RobloxUser]:
    """Resolve a Roblox user ID or username to its profile."""
    try:
        if NUMERIC_ID.fullmatch(query):
            async with session.get(f"{USERS_API}/users/{query}") as response:
                if response.status != 200:
                    return None
                data = await response.json()
            if not isinstance(data, dict):
                return None
            return RobloxUser(int(data["id"]), data["name"], data["displayName"])

        payload = {"usernames": [query], "excludeBannedUsers": False}
        async with session.post(f"{USERS_API}/usernames/users", json=payload) as response:
            if response.status != 200:
                return None
            data = await response.json()
        if not isinstance(data, dict):
            return None
        entries = data.get("data") or []
        if not entries:
            return None
        entry = entries[0]
        return RobloxUser(
            int(entry["id"]),
            entry.get("name") or entry["requestedUsername"],
            entry["displayName"],
        )
    except LOOKUP_ERRORS as e:
        logging.error(f"Failed to resolve Roblox user {query}: {e}")
        return None


async def resolve_universe(session, place_id) -> Optional[int]:
    try:
        async with session.get(f"{UNIVERSES_API}/places/{place_id}/universe") as response:
            if response.status != 200:
                return None
            data = await response.json()
        if not isinstance(data, dict):
            return None
        universe_id = data.get("universeId")
        return int(universe_id) if universe_id is not None else None
    except LOOKUP_ERRORS as e:
        logging.error(f"Failed to convert place {place_id} to a universe: {e}")
        return None


async def fetch_badges(session, universe_id) -> List[Badge]:
    """Fetch the whole badge catalog of a universe, following page cursors."""
    badges = []
    cursor = ""
    try:
        while True:
            params = {"limit": BADGE_PAGE_LIMIT}
            if cursor:
                params["cursor"] = cursor
            async with session.get(
                f"{BADGES_API}/universes/{universe_id}/badges", params=params
            ) as response:
                if response.status != 200:
                    break
                data = await response.json()
            # An empty body ends the catalog like an error response
            if not isinstance(data, dict):
                break
            page = data.get("data")
            if isinstance(page, list):
                badges.extend(Badge(badge["id"], badge["name"]) for badge in page)
            cursor = data.get("nextPageCursor")
            if not cursor:
                break
    except LOOKUP_ERRORS as e:
        logging.error(f"Failed to fetch badges for universe {universe_id}: {e}")
    logging.info(f"Fetched {len(badges)} badges for universe {universe_id}")
    return badges


async def has_badge(session, user_id, badge) -> bool:
    url = f"{BADGES_API}/users/{user_id}/badges/{badge.id}/awarded-date"
    try:
        async with session.get(url) as response:
            return response.status == 200
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logging.debug(f"Badge check failed for {badge.name} ({badge.id}): {e}")
        return False


async def classify_badges(
    session, user_id, badges, workers=BADGE_CHECK_WORKERS
) -> BadgeClassification:
    """Split ``badges`` into the ones ``user_id`` owns and the ones it lacks.

    ``workers`` coroutines share one claim index, so each badge is checked
    exactly once and at most ``workers`` requests are in flight.
    """
    awarded = [False] * len(badges)
    next_index = 0

    async def worker():
        nonlocal next_index
        while next_index < len(badges):
            index = next_index
            next_index += 1
            awarded[index] = await has_badge(session, user_id, badges[index])

    await asyncio.gather(*(worker() for _ in range(max(workers, 1))))

    classification = BadgeClassification()
    for badge, owned in zip(badges, awarded):
        if owned:
            classification.obtained.append(badge)
        else:
            classification.missing.append(badge)
    return classification
