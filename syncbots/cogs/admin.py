"""Admin commands: status, force-sync, server."""

import logging
import typing
from datetime import datetime

import discord
from discord import ButtonStyle, Embed, Interaction, SelectOption, app_commands, ui
from discord.ext import commands

from syncbots.config import (
    SERVERS_PER_PAGE,
    STATUS_COLOR,
    get_main_server_id,
)
from syncbots.utils.checks import is_owner, is_owner_id


def format_uptime(seconds):
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    return f"{seconds // 3600}h"


async def server_autocompletion(
    interaction: discord.Interaction, current: str
) -> typing.List[app_commands.Choice[str]]:
    if not is_owner_id(interaction.user.id):
        return []
    main_server_id = get_main_server_id()
    guilds = [
        guild
        for guild in interaction.client.guilds
        if guild.id != main_server_id
        and (current.lower() in guild.name.lower() or current in str(guild.id))
    ]
    return [
        app_commands.Choice(name=f"{guild.name} ({guild.id})", value=str(guild.id))
        for guild in guilds[:25]
    ]


class ServerListView(ui.View):
    def __init__(self, guilds, owner_id):
        super().__init__()
        self.guilds = guilds
        self.owner_id = owner_id
        self.current_page = 0
        self.total_pages = max((len(guilds) + SERVERS_PER_PAGE - 1) // SERVERS_PER_PAGE, 1)
        self.add_page_selector()

    async def interaction_check(self, interaction: Interaction) -> bool:
        if interaction.user.id != self.owner_id:
            await interaction.response.send_message("❌ Not authorized.", ephemeral=True)
            return False
        return True

    @ui.button(label="Previous", style=ButtonStyle.primary)
    async def previous_button(self, interaction: Interaction, button: ui.Button):
        if self.current_page > 0:
            self.current_page -= 1
            await interaction.response.edit_message(embed=self.get_embed(), view=self)
        else:
            await interaction.response.send_message(
                "No earlier servers to show.", ephemeral=True
            )

    @ui.button(label="Next", style=ButtonStyle.primary)
    async def next_button(self, interaction: Interaction, button: ui.Button):
        if self.current_page < self.total_pages - 1:
            self.current_page += 1
            await interaction.response.edit_message(embed=self.get_embed(), view=self)
        else:
            await interaction.response.send_message(
                "That was the last page of servers.", ephemeral=True
            )

    @ui.select(placeholder="Jump to a server page...", options=[])
    async def select_page(self, interaction: Interaction, select: ui.Select):
        self.current_page = int(select.values[0])
        await interaction.response.edit_message(embed=self.get_embed(), view=self)

    def add_page_selector(self):
        # Discord caps a select menu at 25 options
        self.select_page.options = [
            SelectOption(label=str(i + 1), value=str(i))
            for i in range(min(self.total_pages, 25))
        ]

    def get_embed(self):
        start = self.current_page * SERVERS_PER_PAGE
        embed = Embed(
            title=f"🖥️ Servers Page {self.current_page + 1}/{self.total_pages}",
            color=STATUS_COLOR,
        )
        embed.timestamp = datetime.now()
        embed.set_footer(text=f"{len(self.guilds)} servers")
        if not self.guilds:
            embed.description = "The bot is not in any server."
        for guild in self.guilds[start:start + SERVERS_PER_PAGE]:
            embed.add_field(
                name=guild.name,
                value=f"ID: {guild.id}\nMembers: {guild.member_count or 'Unknown'}",
                inline=False,
            )
        return embed


class Admin(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    @property
    def ban_sync(self):
        return self.bot.get_cog("BanSync")

    @app_commands.command(name="status", description="Show bot status")
    async def status_slash(self, interaction: discord.Interaction):
        start_time = getattr(self.bot, "start_time", datetime.now())
        uptime = format_uptime((datetime.now() - start_time).total_seconds())
        total_bans = self.ban_sync.counter.total_bans if self.ban_sync else 0

        embed = discord.Embed(title="📊 Bot Status", color=STATUS_COLOR)
        embed.add_field(name="⚡ Uptime", value=uptime, inline=True)
        embed.add_field(name="🔨 Total Users Banned", value=str(total_bans), inline=True)
        embed.add_field(
            name="🏓 Ping Latency",
            value=f"{round(self.bot.latency * 1000)}ms",
            inline=True,
        )
        embed.add_field(name="🖥️ Servers", value=str(len(self.bot.guilds)), inline=True)
        embed.timestamp = datetime.now()

        await interaction.response.send_message(embed=embed, ephemeral=True)

    @app_commands.command(
        name="force-sync",
        description="Force sync bans for all or a specific server",
    )
    @app_commands.describe(server="Server ID to sync specifically")
    @app_commands.autocomplete(server=server_autocompletion)
    @is_owner()
    async def force_sync_slash(
        self, interaction: discord.Interaction, server: typing.Optional[str] = None
    ):
        server_id = None
        if server is not None:
            server = server.strip()
            if not server.isdigit():
                await interaction.response.send_message(
                    "Please provide a valid server ID (numbers only).", ephemeral=True
                )
                return
            server_id = int(server)

        self.ban_sync.request_force_sync(server_id)
        await interaction.response.send_message(
            f"🔄 Force sync started for server {server_id}."
            if server_id
            else "🔄 Force sync started for all servers.",
            ephemeral=True,
        )
        logging.info(
            f"Force sync triggered by {interaction.user.name} ({interaction.user.id}) "
            f"for {server_id or 'ALL'}"
        )

    @app_commands.command(
        name="server",
        description="View servers the bot is in (paginated, owner only)",
    )
    @is_owner()
    async def server_slash(self, interaction: discord.Interaction):
        guilds = sorted(self.bot.guilds, key=lambda guild: guild.name.lower())
        view = ServerListView(guilds, interaction.user.id)
        await interaction.response.send_message(
            embed=view.get_embed(), view=view, ephemeral=True
        )


async def setup(bot):
    await bot.add_cog(Admin(bot))
