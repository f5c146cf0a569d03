"""Mirror bans and unbans from the main server to every other joined server."""

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import discord

from syncbots.state import BanSyncState


class SyncAction(enum.Enum):
    BAN = "ban"
    UNBAN = "unban"


class SyncOutcome(enum.Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class SyncResult:
    guild_id: int
    user_id: int
    action: SyncAction
    outcome: SyncOutcome
    error: Optional[Exception] = None


@dataclass
class SyncReport:
    force: bool = False
    scope: Optional[int] = None
    results: List[SyncResult] = field(default_factory=list)

    def count(self, action, outcome):
        return sum(
            1
            for result in self.results
            if result.action is action and result.outcome is outcome
        )

    @property
    def failures(self):
        return [r for r in self.results if r.outcome is SyncOutcome.FAILED]

    def summary(self):
        return (
            f"{self.count(SyncAction.BAN, SyncOutcome.APPLIED)} banned, "
            f"{self.count(SyncAction.UNBAN, SyncOutcome.APPLIED)} unbanned, "
            f"{sum(1 for r in self.results if r.outcome is SyncOutcome.SKIPPED)} skipped, "
            f"{len(self.failures)} failed"
        )


class BanReconciler:
    """Diffs the main server's ban list against the last observed one.

    ``previous_bans`` is only replaced once the main server's bans were
    fetched, so a failed fetch is retried in full on the next cycle.
    """

    def __init__(self, bot, main_server_id, counter, state=None):
        self.bot = bot
        self.main_server_id = main_server_id
        self.counter = counter
        self.state = state or BanSyncState()

    async def run_cycle(self) -> Optional[SyncReport]:
        force, scope = self.state.force_sync.consume()
        try:
            return await self.reconcile(force, scope)
        except Exception:
            logging.exception("Top-level sync error")
            return None

    async def fetch_main_bans(self) -> Dict[int, discord.abc.User]:
        guild = self.bot.get_guild(self.main_server_id)
        if guild is None:
            guild = await self.bot.fetch_guild(self.main_server_id)
        return {entry.user.id: entry.user async for entry in guild.bans(limit=None)}

    def target_guilds(self, scope=None):
        if scope is not None:
            guild = self.bot.get_guild(scope)
            return [guild] if guild is not None else []
        return [guild for guild in self.bot.guilds if guild.id != self.main_server_id]

    async def reconcile(self, force=False, scope=None) -> SyncReport:
        logging.info(f"Starting sync (force: {force}, server: {scope or 'ALL'})")
        current = await self.fetch_main_bans()
        current_ids = set(current)

        if self.state.previous_bans is None:
            self.state.previous_bans = current_ids
        previous_ids = self.state.previous_bans

        unbanned = previous_ids - current_ids
        newly_banned = current_ids - previous_ids
        guilds = self.target_guilds(scope)
        report = SyncReport(force=force, scope=scope)

        if force:
            for guild in guilds:
                logging.info(f"Force syncing {guild.name} ({guild.id})")
                await self.ban_all(
                    guild, current, f"Force sync from {self.main_server_id}", report
                )
        else:
            for user_id in sorted(newly_banned):
                for guild in guilds:
                    report.results.append(
                        await self.ban(
                            guild,
                            user_id,
                            f"Banned in main {self.main_server_id}",
                            current.get(user_id),
                        )
                    )

            for user_id in sorted(unbanned):
                for guild in guilds:
                    report.results.append(
                        await self.unban(
                            guild, user_id, f"Unbanned in main {self.main_server_id}"
                        )
                    )

            if scope is None and self.state.newly_joined_guilds:
                for guild_id in sorted(self.state.drain_newly_joined()):
                    guild = self.bot.get_guild(guild_id)
                    if guild is None:
                        continue
                    logging.info(f"Syncing bans in new guild {guild.name}")
                    await self.ban_all(
                        guild, current, f"Banned in main {self.main_server_id}", report
                    )

        self.state.previous_bans = current_ids
        logging.info(f"Sync completed: {report.summary()}")
        return report

    async def ban_all(self, guild, bans, reason, report):
        for user_id, user in bans.items():
            report.results.append(await self.ban(guild, user_id, reason, user))

    async def is_banned(self, guild, user_id):
        try:
            await guild.fetch_ban(discord.Object(id=user_id))
        except discord.NotFound:
            return False
        return True

    async def ban(self, guild, user_id, reason, user=None) -> SyncResult:
        display = f"{user_id} | {user.name if user is not None else 'Unknown'}"
        try:
            if await self.is_banned(guild, user_id):
                return SyncResult(guild.id, user_id, SyncAction.BAN, SyncOutcome.SKIPPED)
            await guild.ban(
                discord.Object(id=user_id), reason=reason, delete_message_seconds=0
            )
        except Exception as e:
            logging.error(f"Error banning {display} in {guild.name}: {e}")
            return SyncResult(
                guild.id, user_id, SyncAction.BAN, SyncOutcome.FAILED, error=e
            )
        logging.info(f"Banned {display} in {guild.name}")
        self.counter.increment()
        return SyncResult(guild.id, user_id, SyncAction.BAN, SyncOutcome.APPLIED)

    async def unban(self, guild, user_id, reason) -> SyncResult:
        try:
            if not await self.is_banned(guild, user_id):
                return SyncResult(
                    guild.id, user_id, SyncAction.UNBAN, SyncOutcome.SKIPPED
                )
            await guild.unban(discord.Object(id=user_id), reason=reason)
        except Exception as e:
            logging.error(f"Error unbanning {user_id} in {guild.name}: {e}")
            return SyncResult(
                guild.id, user_id, SyncAction.UNBAN, SyncOutcome.FAILED, error=e
            )
        logging.info(f"Unbanned {user_id} in {guild.name}")
        return SyncResult(guild.id, user_id, SyncAction.UNBAN, SyncOutcome.APPLIED)
