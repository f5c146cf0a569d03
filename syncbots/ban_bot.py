"""Ban-sync bot: mirrors the main server's bans to every other joined server."""

import asyncio
import logging
from datetime import datetime

import discord
from discord import app_commands
from discord.ext import commands

from syncbots.cogs import BAN_SYNC_EXTENSIONS
from syncbots.config import get_ban_bot_token, get_main_server_id, get_owner_id
from syncbots.utils.log import log_unhandled_exceptions, setup_logging


async def on_app_command_error(
    interaction: discord.Interaction, error: app_commands.AppCommandError
):
    if isinstance(error, app_commands.CheckFailure):
        message = "❌ Not authorized."
    else:
        command = interaction.command.name if interaction.command else "unknown"
        logging.error(f"Error in /{command}: {error}")
        message = "❌ An error occurred."
    if not interaction.response.is_done():
        await interaction.response.send_message(message, ephemeral=True)


def create_bot():
    intents = discord.Intents.default()
    bot = commands.Bot(command_prefix="!", intents=intents)
    bot.start_time = datetime.now()
    bot.tree.error(on_app_command_error)

    @bot.event
    async def on_ready():
        logging.info(f"Logged in as {bot.user.name} - {bot.user.id}")
        try:
            synced = await bot.tree.sync()
            logging.info(f"Synced {len(synced)} commands")
        except Exception as e:
            logging.error(f"Failed to sync commands: {e}")

    return bot


async def main():
    setup_logging("ban_sync.log")
    log_unhandled_exceptions(asyncio.get_running_loop())

    bot_token = get_ban_bot_token()
    if bot_token is None or get_main_server_id() is None or get_owner_id() is None:
        logging.error(
            "BAN_SYNC_BOT_TOKEN, MAIN_SERVER_ID or OWNER_ID is not set in the environment variables."
        )
        return

    bot = create_bot()
    async with bot:
        for extension in BAN_SYNC_EXTENSIONS:
            await bot.load_extension(extension)
        await bot.start(bot_token)


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
