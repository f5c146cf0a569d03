"""Badge reports: answer `User:` / `Game:` messages with a DM'd badge report."""

import io
import logging

import aiohttp
import discord
from discord.ext import commands

from syncbots.config import (
    INVALID_EMOJI,
    INVALID_MESSAGE_DELETE_DELAY,
    NOTICE_COLOR,
    SUCCESS_EMOJI,
    get_loading_emoji,
    get_monitored_channel_id,
)
from syncbots.reports import (
    NOTICE_TEXT,
    compose_report,
    parse_badge_request,
    report_filename,
)
from syncbots.roblox import (
    classify_badges,
    fetch_badges,
    resolve_universe,
    resolve_user,
)


class BadgeReports(commands.Cog):
    def __init__(self, bot):
        self.bot = bot
        self.channel_id = get_monitored_channel_id()
        self.loading_emoji = discord.PartialEmoji.from_str(get_loading_emoji())

    @commands.Cog.listener()
    async def on_ready(self):
        try:
            channel = self.bot.get_channel(self.channel_id) or await self.bot.fetch_channel(
                self.channel_id
            )
            if not isinstance(channel, discord.TextChannel):
                logging.error(f"Channel {self.channel_id} is not a text channel.")
                return

            pinned = await channel.pins()
            if any(m.embeds and m.embeds[0].title == "Notice!" for m in pinned):
                return

            embed = discord.Embed(title="Notice!", description=NOTICE_TEXT, color=NOTICE_COLOR)
            embed.set_footer(text="Have a great day!")
            notice = await channel.send(embed=embed)
            try:
                await notice.pin()
            except discord.HTTPException as e:
                logging.error(f"Failed to pin notice embed: {e}")
            logging.info("Notice pinned.")
        except Exception as e:
            logging.error(f"Error in ready event: {e}")

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.author.bot or message.channel.id != self.channel_id:
            return

        try:
            await message.add_reaction(self.loading_emoji)
        except discord.HTTPException as e:
            logging.error(f"Failed to react with loading emoji: {e}")

        request = parse_badge_request(message.content)
        if request is None:
            await self.reject(message)
            return

        async with aiohttp.ClientSession() as session:
            roblox_user = await resolve_user(session, request.user)
            if roblox_user is None:
                logging.info(f"Could not resolve Roblox user {request.user}")
                await self.reject(message)
                return

            universe_id = await resolve_universe(session, request.game)
            if universe_id is None:
                logging.info(f"Universe not found for place {request.game}")
                await self.reject(message)
                return

            badges = await fetch_badges(session, universe_id)
            classification = await classify_badges(session, roblox_user.user_id, badges)

        report = compose_report(
            roblox_user, str(message.author), message.author.id, classification
        )
        if await self.send_report(message.author, request.game, report):
            await self.clear_loading(message)
            try:
                await message.add_reaction(SUCCESS_EMOJI)
            except discord.HTTPException as e:
                logging.error(f"Failed to react with success emoji: {e}")

    async def send_report(self, user, place_id, report):
        file = discord.File(
            io.BytesIO(report.encode("utf-8")),
            filename=report_filename(user.name, user.id),
        )
        try:
            await user.send(f"Here is your badge report for game {place_id}.", file=file)
        except discord.HTTPException as e:
            logging.error(f"Failed to send badge report to {user.name}: {e}")
            return False
        logging.info(f"Sent badge report for game {place_id} to {user.name}")
        return True

    async def clear_loading(self, message):
        try:
            await message.remove_reaction(self.loading_emoji, self.bot.user)
        except discord.HTTPException as e:
            logging.error(f"Failed to remove loading emoji: {e}")

    async def reject(self, message):
        await self.clear_loading(message)
        try:
            await message.add_reaction(INVALID_EMOJI)
        except discord.HTTPException as e:
            logging.error(f"Failed to react with invalid emoji: {e}")
        # Errors during the delayed delete are ignored by discord.py
        await message.delete(delay=INVALID_MESSAGE_DELETE_DELAY)


async def setup(bot):
    await bot.add_cog(BadgeReports(bot))
