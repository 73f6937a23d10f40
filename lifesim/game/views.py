"""UI-компоненты Discord."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import discord

from ..models import CareerDefinition, Character
from . import careers as career_rules
from .embeds import build_character_embed, money

__all__ = ["Paginator", "CareerBoardView", "history_pages", "ACTION_LABELS"]

ACTION_LABELS: Dict[str, str] = {
    "work": "Работать",
    "work_hard": "Работать усерднее",
    "promotion": "Попросить повышение",
    "quit": "Уволиться",
    "apply": "Устроиться",
    "military": "Пойти в армию",
    "part_time": "Подработка",
    "recruiter": "Рекрутер",
    "gig": "Фриланс",
}


def history_pages(character: Character, per_page: int = 10) -> List[discord.Embed]:
    """Хроника жизни по страницам, новые события в конце."""

    entries = list(character.life_events)
    if not entries:
        return [discord.Embed(title=f"📜 {character.name}", description="Пока ничего не произошло")]
    pages = []
    total = (len(entries) + per_page - 1) // per_page
    for page in range(total):
        chunk = entries[page * per_page:(page + 1) * per_page]
        start = page * per_page + 1
        lines = [f"`{start + offset}.` {text}" for offset, text in enumerate(chunk)]
        embed = discord.Embed(title=f"📜 {character.name}", description="\n".join(lines))
        embed.set_footer(text=f"Страница {page + 1}/{total}")
        pages.append(embed)
    return pages


class Paginator(discord.ui.View):
    """Простейший пагинатор по списку Embed."""

    def __init__(self, *, embeds: List[discord.Embed], timeout: Optional[float] = 120.0) -> None:
        super().__init__(timeout=timeout)
        if not embeds:
            raise ValueError("Paginator requires at least one embed")
        self.embeds = embeds
        self.index = 0
        self.prev_button = discord.ui.Button(label="←", style=discord.ButtonStyle.secondary)
        self.next_button = discord.ui.Button(label="→", style=discord.ButtonStyle.secondary)
        self.prev_button.disabled = True
        self.next_button.disabled = len(embeds) <= 1
        self.prev_button.callback = self._on_prev
        self.next_button.callback = self._on_next
        self.add_item(self.prev_button)
        self.add_item(self.next_button)

    def current(self) -> discord.Embed:
        return self.embeds[self.index]

    def turn_page(self, delta: int) -> discord.Embed:
        self.index = max(0, min(len(self.embeds) - 1, self.index + delta))
        self.prev_button.disabled = self.index == 0
        self.next_button.disabled = self.index >= len(self.embeds) - 1
        return self.current()

    async def _on_prev(self, interaction: discord.Interaction) -> None:
        await interaction.response.edit_message(embed=self.turn_page(-1), view=self)

    async def _on_next(self, interaction: discord.Interaction) -> None:
        await interaction.response.edit_message(embed=self.turn_page(1), view=self)


class CareerBoardView(discord.ui.View):
    """Карьерные действия, доступные персонажу прямо сейчас."""

    def __init__(
        self,
        *,
        service: Any,
        invoker_id: int,
        character: Character,
        careers: Sequence[CareerDefinition],
        timeout: Optional[float] = 180.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.service = service
        self.invoker_id = invoker_id
        self.character = character
        self.careers = list(careers)
        self.selected_action: Optional[str] = None
        self.selected_career: Optional[str] = None

        self.action_select = discord.ui.Select(custom_id="career_action", min_values=1, max_values=1)
        self.career_select = discord.ui.Select(custom_id="career_pick", min_values=1, max_values=1)
        self.run_button = discord.ui.Button(label="Выполнить", style=discord.ButtonStyle.primary)
        self.action_select.callback = self._on_action
        self.career_select.callback = self._on_career
        self.run_button.callback = self._on_run

        self.add_item(self.action_select)
        self.add_item(self.career_select)
        self.add_item(self.run_button)
        self._build_options()

    # ------------------------------------------------------------------
    def _build_options(self) -> None:
        allowed = career_rules.allowed_actions(self.character)
        self.action_select.options = [
            discord.SelectOption(label=ACTION_LABELS.get(name, name), value=name) for name in allowed
        ]
        self.action_select.placeholder = "Действие"

        career_options = []
        for career in self.careers[:25]:
            eligible = career_rules.is_eligible(self.character, career)
            description = f"{money(career.base_salary)} • от {career.min_age} лет"
            if not eligible:
                description += " • не подходит"
            career_options.append(
                discord.SelectOption(
                    label=career.name[:100],
                    value=str(career.id),
                    description=description[:100],
                )
            )
        if not career_options:
            career_options = [discord.SelectOption(label="Нет вакансий", value="none")]
        self.career_select.options = career_options
        self.career_select.placeholder = "Профессия (для «Устроиться»)"
        self._apply_state()

    def _apply_state(self) -> None:
        self.career_select.disabled = self.selected_action != "apply"
        needs_career = self.selected_action == "apply" and not self.selected_career
        self.run_button.disabled = self.selected_action is None or needs_career

    def _format_result_lines(self, result: Dict[str, object]) -> List[str]:
        if not result.get("ok"):
            reason = result.get("reason", "Действие отклонено")
            return [str(reason), "Ничего не изменилось"]
        details = result.get("details") or {}
        action = result.get("action")
        if action == "work":
            return [f"Рабочий год позади, премия {money(int(details.get('bonus', 0)))}"]
        if action == "work_hard":
            return [f"Репутация +{details.get('reputation_gain', 0)}"]
        if action == "promotion":
            if details.get("promoted"):
                return [f"Повышение! Зарплата +{money(int(details.get('raise', 0)))}"]
            return ["В повышении отказали"]
        if action == "quit":
            return [f"Вы уволились с должности {details.get('left')}"]
        if action == "gig":
            return [f"Заработано {money(int(details.get('pay', 0)))}"]
        return [f"Новая работа: **{details.get('job')}**"]

    # ------------------------------------------------------------------
    async def _guard(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.invoker_id:
            await interaction.response.send_message("Это не ваша панель.", ephemeral=True)
            return False
        return True

    async def _on_action(self, interaction: discord.Interaction) -> None:
        if not await self._guard(interaction):
            return
        self.selected_action = self.action_select.values[0]
        self._apply_state()
        await interaction.response.edit_message(view=self)

    async def _on_career(self, interaction: discord.Interaction) -> None:
        if not await self._guard(interaction):
            return
        value = self.career_select.values[0]
        self.selected_career = None if value == "none" else value
        self._apply_state()
        await interaction.response.edit_message(view=self)

    async def _on_run(self, interaction: discord.Interaction) -> None:
        if not await self._guard(interaction) or self.selected_action is None:
            return
        params = {"career": self.selected_career} if self.selected_action == "apply" else None
        result = self.service.perform_career_action(self.character.id, self.selected_action, params)
        character = result.get("character") or self.character
        self.character = character
        self.selected_action = None
        self.selected_career = None
        self._build_options()
        embed = build_character_embed(character, notes=self._format_result_lines(result))
        await interaction.response.edit_message(embed=embed, view=self)
