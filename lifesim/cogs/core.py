"""Основной ког с игровыми командами."""

from __future__ import annotations

import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from ..game.constants import EMOJI_ACTIVITY
from ..game.embeds import (
    build_age_up_embed,
    build_careers_embed,
    build_character_embed,
    build_family_embed,
    change_lines,
)
from ..game.errors import GameError
from ..game.utils import choice_value
from ..game.views import CareerBoardView, Paginator, history_pages
from ..models import Character
from ..storage import (
    active_character,
    age_up,
    all_activities,
    all_careers,
    careers_by_category,
    characters_by_code,
    create_character,
    create_save_code,
    delete_character,
    get_save_code,
    get_service,
    link_session,
    list_relationships,
    load_session,
    perform_activity,
    spend_time,
)

log = logging.getLogger("lifesim")

SAVECODE_ALLOWED_ACTIONS = {"create", "load"}
FAMILY_ALLOWED_ACTIONS = {"view", "spend_time"}

GENDER_CHOICES = [
    app_commands.Choice(name="Мужской", value="male"),
    app_commands.Choice(name="Женский", value="female"),
]
TALENT_CHOICES = [
    app_commands.Choice(name="Обычный", value="normal"),
    app_commands.Choice(name="Знаменитый", value="famous"),
]
ACTIVITY_CHOICES = [
    app_commands.Choice(name=activity.name, value=activity.id) for activity in all_activities()
]


def normalize_action(choice: app_commands.Choice[str] | None, allowed: set[str], default: str) -> str:
    raw = (choice_value(choice, default=default) or default).lower()
    if raw not in allowed:
        return default
    return raw


class Core(commands.Cog):
    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    async def _send_response(
        self,
        interaction: discord.Interaction,
        *,
        content: Optional[str] = None,
        embed: Optional[discord.Embed] = None,
        view: Optional[discord.ui.View] = None,
        ephemeral: bool = True,
    ) -> None:
        sender = interaction.response.send_message
        if interaction.response.is_done():
            sender = interaction.followup.send
        payload = {"ephemeral": ephemeral}
        if content is not None:
            payload["content"] = content
        if embed is not None:
            payload["embed"] = embed
        if view is not None:
            payload["view"] = view
        await sender(**payload)

    async def _require_character(self, interaction: discord.Interaction) -> Optional[Character]:
        character = active_character(interaction.user.id)
        if character is None:
            await self._send_response(
                interaction,
                content="Нет активной жизни. Используйте /savecode, затем /newlife.",
            )
        return character

    # ------------------------------------------------------------------
    @app_commands.command(name="savecode", description="Создать или загрузить код сохранения")
    @app_commands.choices(
        action=[
            app_commands.Choice(name="Создать", value="create"),
            app_commands.Choice(name="Загрузить", value="load"),
        ]
    )
    async def savecode(
        self,
        interaction: discord.Interaction,
        code: str,
        action: Optional[app_commands.Choice[str]] = None,
    ) -> None:
        action_name = normalize_action(action, SAVECODE_ALLOWED_ACTIONS, "load")
        if action_name == "create":
            result = create_save_code(code)
            if not result["ok"]:
                await self._send_response(interaction, content=result["reason"])
                return
            link_session(interaction.user.id, result["save_code"].code)
            await self._send_response(
                interaction,
                content=f"Код **{result['save_code'].code}** создан. Начните жизнь через /newlife.",
            )
            return

        if get_save_code(code) is None:
            await self._send_response(interaction, content="Код сохранения не найден.")
            return
        characters = characters_by_code(code)
        latest = characters[-1].id if characters else None
        session = link_session(interaction.user.id, code, latest)
        if not characters:
            await self._send_response(interaction, content=f"Код **{session.save_code}** пуст. Используйте /newlife.")
            return
        lines = [f"`{c.id}` {c.name}, {c.age} лет{'' if c.is_alive else ' ✝'}" for c in characters]
        await self._send_response(
            interaction,
            content="Персонажи:\n" + "\n".join(lines) + "\nПереключиться: /life character_id",
            embed=build_character_embed(characters[-1]),
        )

    @app_commands.command(name="newlife", description="Начать новую жизнь")
    @app_commands.choices(gender=GENDER_CHOICES, talent=TALENT_CHOICES)
    async def newlife(
        self,
        interaction: discord.Interaction,
        name: str,
        country: str,
        gender: Optional[app_commands.Choice[str]] = None,
        talent: Optional[app_commands.Choice[str]] = None,
    ) -> None:
        session = load_session(interaction.user.id)
        if session is None:
            await self._send_response(interaction, content="Сначала создайте или загрузите код: /savecode.")
            return
        payload = {
            "name": name,
            "country": country,
            "gender": choice_value(gender, "male"),
            "talent": choice_value(talent, "normal"),
        }
        result = create_character(session.save_code, payload)
        if not result["ok"]:
            await self._send_response(interaction, content=result["reason"])
            return
        character = result["character"]
        link_session(interaction.user.id, session.save_code, character.id)
        await self._send_response(
            interaction,
            content=f"Родился {character.name}!",
            embed=build_character_embed(character),
        )

    @app_commands.command(name="life", description="Текущая жизнь")
    async def life(self, interaction: discord.Interaction, character_id: Optional[int] = None) -> None:
        if character_id is not None:
            session = load_session(interaction.user.id)
            if session is None:
                await self._send_response(interaction, content="Сначала загрузите код: /savecode.")
                return
            try:
                link_session(interaction.user.id, session.save_code, character_id)
            except GameError as exc:
                await self._send_response(interaction, content=exc.message)
                return
        character = await self._require_character(interaction)
        if character is None:
            return
        await self._send_response(interaction, embed=build_character_embed(character))

    @app_commands.command(name="ageup", description="Прожить ещё год")
    async def ageup(self, interaction: discord.Interaction) -> None:
        character = await self._require_character(interaction)
        if character is None:
            return
        result = age_up(character.id)
        if not result["ok"]:
            await self._send_response(interaction, content=result["reason"])
            return
        embed = build_age_up_embed(result["character"], result.get("event"), result.get("changes"))
        await self._send_response(interaction, embed=embed)

    @app_commands.command(name="job", description="Карьера: работа, повышение, поиск вакансий")
    async def job(self, interaction: discord.Interaction) -> None:
        character = await self._require_character(interaction)
        if character is None:
            return
        view = CareerBoardView(
            service=get_service(),
            invoker_id=interaction.user.id,
            character=character,
            careers=all_careers(),
        )
        await self._send_response(interaction, embed=build_character_embed(character), view=view)

    @app_commands.command(name="careers", description="Список профессий")
    async def careers(self, interaction: discord.Interaction, category: Optional[str] = None) -> None:
        if category:
            listing = careers_by_category(category)
            title = f"Вакансии: {category}"
        else:
            listing = all_careers()
            title = "Вакансии"
        await self._send_response(interaction, embed=build_careers_embed(listing, title))

    @app_commands.command(name="activity", description="Занятия и покупки")
    @app_commands.choices(activity=ACTIVITY_CHOICES)
    async def activity(self, interaction: discord.Interaction, activity: app_commands.Choice[str]) -> None:
        character = await self._require_character(interaction)
        if character is None:
            return
        activity_id = choice_value(activity)
        result = perform_activity(character.id, activity_id or "")
        if not result["ok"]:
            await self._send_response(interaction, content=result["reason"])
            return
        lines = change_lines(result.get("changes") or {}) or ["Без изменений"]
        name = result["activity"].name
        await self._send_response(
            interaction,
            content=f"{EMOJI_ACTIVITY} **{name}**\n" + "\n".join(lines),
            embed=build_character_embed(result["character"]),
        )

    @app_commands.command(name="family", description="Семья и отношения")
    @app_commands.choices(
        action=[
            app_commands.Choice(name="Показать", value="view"),
            app_commands.Choice(name="Провести время", value="spend_time"),
        ]
    )
    async def family(
        self,
        interaction: discord.Interaction,
        action: Optional[app_commands.Choice[str]] = None,
        relative_id: Optional[int] = None,
    ) -> None:
        character = await self._require_character(interaction)
        if character is None:
            return
        action_name = normalize_action(action, FAMILY_ALLOWED_ACTIONS, "view")
        if action_name == "view":
            relationships = list_relationships(character.id)
            await self._send_response(interaction, embed=build_family_embed(character, relationships))
            return
        result = spend_time(character.id, relative_id)
        if not result["ok"]:
            await self._send_response(interaction, content=result["reason"])
            return
        await self._send_response(
            interaction,
            content="Вы провели время с семьёй.",
            embed=build_family_embed(result["character"], result["relationships"]),
        )

    @app_commands.command(name="history", description="Хроника жизни")
    async def history(self, interaction: discord.Interaction) -> None:
        character = await self._require_character(interaction)
        if character is None:
            return
        pages = history_pages(character)
        view = Paginator(embeds=pages)
        await self._send_response(interaction, embed=view.current(), view=view)

    @app_commands.command(name="deletelife", description="Удалить текущую жизнь")
    async def deletelife(self, interaction: discord.Interaction, confirm: bool = False) -> None:
        character = await self._require_character(interaction)
        if character is None:
            return
        if not confirm:
            await self._send_response(
                interaction,
                content=f"Удалить {character.name}? Повторите с confirm: True.",
            )
            return
        if delete_character(character.id):
            log.info("User %s deleted character %s", interaction.user.id, character.id)
            await self._send_response(interaction, content=f"{character.name} удалён.")
        else:
            await self._send_response(interaction, content="Персонаж не найден.")


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(Core(bot))


__all__ = ["Core", "normalize_action", "setup"]
