"""Custom checks for Discord commands."""

import discord
from discord import app_commands

from syncbots.config import get_owner_id


def is_owner_id(user_id):
    owner_id = get_owner_id()
    return owner_id is not None and user_id == owner_id


def is_owner():
    async def predicate(interaction: discord.Interaction):
        return is_owner_id(interaction.user.id)

    return app_commands.check(predicate)
