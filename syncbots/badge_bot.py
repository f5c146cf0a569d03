"""Badge-report bot: DMs Roblox badge reports requested in one channel."""

import asyncio
import logging

import discord
from discord.ext import commands

from syncbots.cogs import BADGE_REPORT_EXTENSIONS
from syncbots.config import get_badge_bot_token, get_monitored_channel_id
from syncbots.utils.log import log_unhandled_exceptions, setup_logging


def create_bot():
    intents = discord.Intents.default()
    intents.message_content = True
    intents.dm_messages = True
    bot = commands.Bot(command_prefix="!", intents=intents)

    @bot.event
    async def on_ready():
        logging.info(f"Logged in as {bot.user.name} - {bot.user.id}")

    return bot


async def main():
    setup_logging("badge_report.log")
    log_unhandled_exceptions(asyncio.get_running_loop())

    bot_token = get_badge_bot_token()
    if bot_token is None or get_monitored_channel_id() is None:
        logging.error(
            "BADGE_REPORT_BOT_TOKEN or MONITORED_CHANNEL_ID is not set in the environment variables."
        )
        return

    bot = create_bot()
    async with bot:
        for extension in BADGE_REPORT_EXTENSIONS:
            await bot.load_extension(extension)
        await bot.start(bot_token)


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
