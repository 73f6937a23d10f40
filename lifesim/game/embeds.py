"""Формирование Discord Embed."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

import discord

from ..models import PERCENTILE_STATS, CareerDefinition, Character, LifeEventDefinition, Relationship, make_bar
from .constants import (
    EMBED_SPACER,
    EMOJI_AGE,
    EMOJI_ASSET,
    EMOJI_COIN,
    EMOJI_EVENT,
    EMOJI_FAMILY,
    EMOJI_JOB,
    EMOJI_PROFILE,
    EMOJI_REPUTATION,
    EMOJI_TIKTOK,
    EMOJI_YOUTUBE,
    RELATIONSHIP_LABELS,
    STAT_LABELS,
)


def stat_lines(character: Character) -> list[str]:
    lines = []
    for name in PERCENTILE_STATS:
        emoji, label = STAT_LABELS[name]
        value = character.stat(name)
        lines.append(f"{emoji} {label}: `{make_bar(value, 100)}` **{value}%**")
    return lines


def money(value: int) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(int(value)):,}"


def career_lines(character: Character) -> list[str]:
    if not character.current_job:
        return [f"{EMOJI_JOB} Без работы"]
    return [
        f"{EMOJI_JOB} **{character.current_job}**",
        f"{EMOJI_COIN} Зарплата: **{money(character.salary)}** в год",
        f"{EMOJI_REPUTATION} Репутация: `{make_bar(character.job_reputation, 100)}` {character.job_reputation}",
        f"Стаж: {character.work_experience}",
    ]


def change_lines(changes: Mapping[str, int]) -> list[str]:
    lines = []
    for name, diff in changes.items():
        emoji, label = STAT_LABELS.get(name, ("•", name))
        shown = money(diff) if name in ("bank_balance", "salary") else str(diff)
        if diff > 0:
            shown = "+" + shown
        lines.append(f"{emoji} {label}: **{shown}**")
    return lines


def build_character_embed(character: Character, notes: list[str] | None = None) -> discord.Embed:
    status = "" if character.is_alive else " ✝"
    embed = discord.Embed(
        title=f"{EMOJI_PROFILE} {character.name}{status}",
        description=(
            f"{EMOJI_AGE} {character.age} лет • {character.gender} • {character.country}"
            f"\n{EMOJI_COIN} Баланс: **{money(character.bank_balance)}**"
        ),
    )
    embed.add_field(name="Характеристики", value="\n".join(stat_lines(character)), inline=False)
    embed.add_field(name="Карьера", value="\n".join(career_lines(character)), inline=False)
    social = (
        f"{EMOJI_YOUTUBE} {character.youtube_followers:,}{EMBED_SPACER}"
        f"{EMOJI_TIKTOK} {character.tiktok_followers:,}"
    )
    embed.add_field(name="Соцсети", value=social, inline=True)
    if character.assets:
        owned = ", ".join(f"{name} ×{count}" for name, count in sorted(character.assets.items()))
        embed.add_field(name=f"{EMOJI_ASSET} Имущество", value=owned, inline=True)
    if notes:
        embed.add_field(name="Заметки", value="\n".join(notes), inline=False)
    embed.set_footer(text=f"ID {character.id} • код {character.save_code or '—'}")
    return embed


def build_age_up_embed(
    character: Character,
    event: Optional[LifeEventDefinition],
    changes: Mapping[str, int] | None = None,
) -> discord.Embed:
    embed = discord.Embed(title=f"{EMOJI_AGE} Вам {character.age}!")
    if event is not None:
        embed.add_field(name=f"{EMOJI_EVENT} {event.title}", value=event.description, inline=False)
    else:
        embed.add_field(name=f"{EMOJI_EVENT} Спокойный год", value="Ничего особенного не произошло.", inline=False)
    lines = change_lines(changes or {})
    if lines:
        embed.add_field(name="Изменения", value="\n".join(lines), inline=False)
    return embed


def relationship_lines(relationships: Iterable[Relationship]) -> list[str]:
    lines = []
    for rel in relationships:
        label = RELATIONSHIP_LABELS.get(rel.type, rel.type)
        age = f", {rel.age} лет" if rel.age is not None else ""
        alive = "" if rel.is_alive else " ✝"
        lines.append(
            f"**{rel.name}**{alive} ({label}{age}) `{make_bar(rel.relationship, 100)}` {rel.relationship}%"
        )
    return lines or ["Никого нет"]


def build_family_embed(character: Character, relationships: Iterable[Relationship]) -> discord.Embed:
    embed = discord.Embed(title=f"{EMOJI_FAMILY} Семья {character.name}")
    embed.description = "\n".join(relationship_lines(relationships))
    return embed


def career_listing_line(career: CareerDefinition) -> str:
    needs = ", ".join(f"{STAT_LABELS.get(k, ('', k))[1]} {v}+" for k, v in career.requirements.items())
    parts = [f"**{career.name}** ({career.category})", f"от {career.min_age} лет", money(career.base_salary)]
    if career.min_education:
        parts.append(career.min_education)
    if needs:
        parts.append(needs)
    return " • ".join(parts)


def build_careers_embed(careers: Iterable[CareerDefinition], title: str = "Вакансии") -> discord.Embed:
    lines = [career_listing_line(career) for career in careers]
    embed = discord.Embed(title=f"{EMOJI_JOB} {title}", description="\n".join(lines) or "Пусто")
    return embed


__all__ = [
    "build_character_embed",
    "build_age_up_embed",
    "build_family_embed",
    "build_careers_embed",
    "career_listing_line",
    "career_lines",
    "change_lines",
    "relationship_lines",
    "stat_lines",
    "money",
]
