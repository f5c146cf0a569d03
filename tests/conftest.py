import asyncio
from types import SimpleNamespace

import aiohttp
import discord
import pytest

from syncbots.storage import BanCounter


def http_error(cls, status, reason):
    return cls(SimpleNamespace(status=status, reason=reason), reason)


class FakeGuild:
    def __init__(self, guild_id, name=None, banned=(), forbidden=False, member_count=10):
        self.id = guild_id
        self.name = name or f"guild-{guild_id}"
        self.member_count = member_count
        self.banned = {user_id: f"user-{user_id}" for user_id in banned}
        self.forbidden = forbidden
        self.ban_calls = []
        self.unban_calls = []
        self.ban_options = []

    async def bans(self, limit=1000):
        for user_id, name in list(self.banned.items()):
            yield SimpleNamespace(user=SimpleNamespace(id=user_id, name=name))

    async def fetch_ban(self, user):
        if user.id not in self.banned:
            raise http_error(discord.NotFound, 404, "Unknown Ban")
        return SimpleNamespace(user=user)

    async def ban(self, user, reason=None, **options):
        self.ban_calls.append((user.id, reason))
        self.ban_options.append(options)
        if self.forbidden:
            raise http_error(discord.Forbidden, 403, "Missing Permissions")
        self.banned[user.id] = f"user-{user.id}"

    async def unban(self, user, reason=None):
        self.unban_calls.append((user.id, reason))
        if self.forbidden:
            raise http_error(discord.Forbidden, 403, "Missing Permissions")
        self.banned.pop(user.id, None)


class FakeBot:
    def __init__(self, *guilds):
        self.guilds = list(guilds)

    def get_guild(self, guild_id):
        return next((guild for guild in self.guilds if guild.id == guild_id), None)

    async def fetch_guild(self, guild_id):
        guild = self.get_guild(guild_id)
        if guild is None:
            raise http_error(discord.NotFound, 404, "Unknown Guild")
        return guild


class FakeResponse:
    def __init__(self, status=200, payload=None, error=None):
        self.status = status
        self.payload = payload
        self.error = error

    async def __aenter__(self):
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Routes requests to ``handler(method, url, params, json)``."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def _request(self, method, url, params=None, json=None):
        self.requests.append((method, url, dict(params or {}), json))
        return self.handler(method, url, params or {}, json)

    def get(self, url, params=None, **kwargs):
        return self._request("GET", url, params=params)

    def post(self, url, json=None, **kwargs):
        return self._request("POST", url, json=json)


def network_error():
    return FakeResponse(error=aiohttp.ClientConnectionError("connection reset"))


@pytest.fixture
def counter(tmp_path):
    return BanCounter(str(tmp_path / "bans.json"))
