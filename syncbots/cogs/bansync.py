"""Ban sync: poll the main server's bans and mirror them every few seconds."""

import logging

import discord
from discord.ext import commands, tasks

from syncbots.config import SYNC_INTERVAL_SECONDS, get_bans_file, get_main_server_id
from syncbots.reconciler import BanReconciler
from syncbots.state import BanSyncState
from syncbots.storage import BanCounter


class BanSync(commands.Cog):
    def __init__(self, bot, counter=None):
        self.bot = bot
        self.state = BanSyncState()
        self.counter = counter or BanCounter.load(get_bans_file())
        self.reconciler = BanReconciler(
            bot, get_main_server_id(), self.counter, self.state
        )

    def cog_load(self):
        self.sync_bans.start()

    def cog_unload(self):
        self.sync_bans.cancel()

    @tasks.loop(seconds=SYNC_INTERVAL_SECONDS)
    async def sync_bans(self):
        await self.reconciler.run_cycle()

    @sync_bans.before_loop
    async def before_sync_bans(self):
        await self.bot.wait_until_ready()

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild):
        logging.info(f"Joined {guild.name} ({guild.id})")
        self.state.newly_joined_guilds.add(guild.id)

    def request_force_sync(self, server_id=None):
        self.state.force_sync.request(server_id)


async def setup(bot):
    await bot.add_cog(BanSync(bot))
