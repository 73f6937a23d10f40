"""Точка входа для Discord-бота."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

import discord
from discord.ext import commands

from .cogs.admin import load_cfg, sync_command_tree
from .storage import get_config

log = logging.getLogger("lifesim")


class LifeSimBot(commands.Bot):
    def __init__(self) -> None:
        intents = discord.Intents.default()
        intents.message_content = False
        super().__init__(command_prefix="!", intents=intents)

    async def setup_hook(self) -> None:
        await self.load_extension("lifesim.cogs.core")
        await self.load_extension("lifesim.cogs.admin")
        report = await sync_command_tree(self.tree, load_cfg().get("guild_id"))
        if report["scope"] == "guild":
            log.info("Slash-команды синхронизированы с гильдией %s", report["guild_id"])
        else:
            log.info("Slash-команды синхронизированы глобально")

    async def on_ready(self) -> None:
        log.info("Бот авторизован как %s", self.user)


def load_token(config: dict[str, Any]) -> str:
    token = ((config.get("discord") or {}).get("token"))
    if not token:
        raise RuntimeError("В config.json не указан discord.token")
    return token


def resolve_log_level(config: dict[str, Any]) -> int:
    raw = ((config.get("logging") or {}).get("level")) or "INFO"
    level = logging.getLevelName(str(raw).upper())
    return level if isinstance(level, int) else logging.INFO


async def run_bot(bot: LifeSimBot, token: str) -> None:
    try:
        await bot.start(token)
    finally:
        if not bot.is_closed():
            await bot.close()


def main() -> None:
    config = get_config()
    logging.basicConfig(level=resolve_log_level(config), format="[%(asctime)s] %(levelname)s: %(message)s")
    token = load_token(config)
    bot = LifeSimBot()
    try:
        asyncio.run(run_bot(bot, token))
    except discord.LoginFailure as exc:
        log.error("Не удалось авторизоваться: %s. Проверьте discord.token в config.json.", exc)
        sys.exit(1)
    except discord.HTTPException as exc:
        log.error("API Discord вернул ошибку при запуске бота: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
