"""Административные команды."""

from __future__ import annotations

import logging
from typing import Any, Dict

import discord
from discord import app_commands
from discord.ext import commands

from ..storage import all_activities, all_careers, all_life_events, get_config

log = logging.getLogger("lifesim")


def load_cfg() -> dict:
    """Раздел ``discord`` из config.json."""

    section = (get_config() or {}).get("discord")
    return section if isinstance(section, dict) else {}


async def sync_command_tree(
    tree: app_commands.CommandTree, raw_guild: Any, report_changes: bool = False
) -> Dict[str, Any]:
    """Синхронизировать команды с гильдией или глобально, если ``guild_id`` некорректен."""

    report: Dict[str, Any] = {"scope": "global", "guild_id": None, "fallback_reason": None}
    guild_id = None
    if raw_guild not in (None, ""):
        try:
            guild_id = int(raw_guild)
        except (TypeError, ValueError):
            report["fallback_reason"] = "invalid_guild_id"
            report["invalid_value"] = raw_guild
            log.warning("Invalid discord.guild_id %r, syncing globally", raw_guild)

    if guild_id is not None:
        guild = discord.Object(id=guild_id)
        tree.copy_global_to(guild=guild)
        synced = await tree.sync(guild=guild)
        report["scope"] = "guild"
        report["guild_id"] = guild_id
    else:
        synced = await tree.sync()

    report["synced_count"] = len(synced)
    if report_changes:
        report["commands"] = [getattr(command, "name", str(command)) for command in synced]
    return report


class Admin(commands.Cog):
    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    async def _is_owner(self, interaction: discord.Interaction) -> bool:
        app_info = await self.bot.application_info()
        owner = getattr(app_info, "owner", None)
        return owner is not None and owner.id == interaction.user.id

    async def _sync_commands(self, report_changes: bool = False) -> Dict[str, Any]:
        return await sync_command_tree(self.bot.tree, load_cfg().get("guild_id"), report_changes)

    @app_commands.command(name="sync", description="Перерегистрировать slash-команды")
    async def sync(self, interaction: discord.Interaction) -> None:
        if not await self._is_owner(interaction):
            await interaction.response.send_message(
                "Only the bot application owner can sync commands.", ephemeral=True
            )
            return
        try:
            report = await self._sync_commands(report_changes=True)
        except discord.HTTPException as exc:
            await interaction.response.send_message(f"Ошибка синхронизации: {exc}", ephemeral=True)
            return
        if report["scope"] == "guild":
            message = f"Synced {report['synced_count']} commands to guild {report['guild_id']}"
        else:
            message = f"Globally synced {report['synced_count']} commands"
        if report.get("fallback_reason"):
            message += f" (fallback: {report['fallback_reason']})"
        await interaction.response.send_message(message, ephemeral=True)

    @app_commands.command(name="invite", description="Получить ссылку-приглашение")
    async def invite(self, interaction: discord.Interaction) -> None:
        if self.bot.user is None:
            await interaction.response.send_message("The bot is not initialized yet.", ephemeral=True)
            return
        perms = discord.Permissions.none()
        perms.update(send_messages=True, embed_links=True)
        url = discord.utils.oauth_url(self.bot.user.id, permissions=perms, scopes=("bot", "applications.commands"))
        await interaction.response.send_message(url, ephemeral=True)

    @app_commands.command(name="catalog", description="Справочники событий, профессий и занятий")
    async def catalog(self, interaction: discord.Interaction) -> None:
        events = all_life_events()
        careers = all_careers()
        activities = all_activities()
        lines = [
            f"События: **{len(events)}** (суммарный вес {sum(e.probability for e in events)})",
            f"Профессии: **{len(careers)}**",
            f"Занятия: **{len(activities)}**",
        ]
        await interaction.response.send_message("\n".join(lines), ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(Admin(bot))


__all__ = ["Admin", "load_cfg", "setup", "sync_command_tree"]
