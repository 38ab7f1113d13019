"""
Outbound cards: a title line, optional body, labeled fields and a footer,
rendered as Telegram HTML.

The title is always the first line of the rendered text. Telegram hands the
plain text (markup stripped) back in ``reply_to_message.text``, which is
where the reply correlator reads the exercise id from.
"""
from dataclasses import dataclass, field

from aiogram.utils.text_decorations import html_decoration

from core import texts

FIELD_VALUE_LIMIT = 1024


@dataclass
class CardField:
    name: str
    value: str
    inline: bool = False


@dataclass
class Card:
    title: str
    body: str = ""
    fields: list[CardField] = field(default_factory=list)
    footer: str = ""

    def add_field(self, name: str, value, inline: bool = False) -> "Card":
        self.fields.append(CardField(name=name, value=str(value), inline=inline))
        return self

    def render(self) -> str:
        return render_card(self)


def _escape(value) -> str:
    return html_decoration.quote(str(value if value is not None else ""))


def _truncate(value: str, limit: int = FIELD_VALUE_LIMIT) -> str:
    if len(value) <= limit:
        return value
    return value[: limit - 1] + "…"


def render_card(card: Card) -> str:
    parts = [f"<b>{_escape(card.title)}</b>"]
    if card.body:
        parts.append(_escape(card.body))

    inline_line: list[str] = []
    blocks: list[str] = []
    for item in card.fields:
        value = _escape(_truncate(item.value)) or "-"
        if item.inline:
            inline_line.append(f"<b>{_escape(item.name)}</b>: {value}")
            continue
        if inline_line:
            blocks.append(" | ".join(inline_line))
            inline_line = []
        blocks.append(f"<b>{_escape(item.name)}</b>\n{value}")
    if inline_line:
        blocks.append(" | ".join(inline_line))

    text = "\n".join(parts)
    if blocks:
        text += "\n\n" + "\n\n".join(blocks)
    if card.footer:
        text += f"\n\n<i>{_escape(card.footer)}</i>"
    return text


def difficulty_label(difficulty: str) -> str:
    return texts.DIFFICULTY_LABELS.get(difficulty, difficulty)


def exercise_title(exercise_id: int) -> str:
    return texts.EXERCISE_TITLE.format(exercise_id=exercise_id)


def build_exercise_card(exercise_id: int, prompt_text: str, theme: str, difficulty: str) -> Card:
    card = Card(
        title=exercise_title(exercise_id),
        body=f"「{prompt_text}」",
        footer=texts.EXERCISE_FOOTER,
    )
    card.add_field(texts.EXERCISE_FIELD_THEME, theme, inline=True)
    card.add_field(texts.EXERCISE_FIELD_DIFFICULTY, difficulty_label(difficulty), inline=True)
    return card


def score_emoji(score: int) -> str:
    if score >= 90:
        return "🎉"
    if score >= 70:
        return "👍"
    if score >= 50:
        return "📝"
    return "💪"


def _score_bar(score: int, width: int = 10) -> str:
    filled = max(0, min(width, round(score * width / 100)))
    return "▰" * filled + "▱" * (width - filled)


def build_evaluation_card(answer: str, score: int, feedback: str, model_answer: str) -> Card:
    card = Card(title=texts.EVALUATION_TITLE.format(emoji=score_emoji(score)))
    card.add_field(texts.EVALUATION_FIELD_ANSWER, answer)
    card.add_field(texts.EVALUATION_FIELD_SCORE, f"{score} / 100  {_score_bar(score)}", inline=True)
    card.add_field(texts.EVALUATION_FIELD_MODEL_ANSWER, model_answer)
    card.add_field(texts.EVALUATION_FIELD_FEEDBACK, feedback)
    return card


def build_stats_card(stats) -> Card:
    card = Card(title=texts.STATS_TITLE)
    card.add_field(texts.STATS_FIELD_TOTAL, f"{stats.total_answers} 問", inline=True)
    card.add_field(texts.STATS_FIELD_AVERAGE, f"{stats.average_score:.1f} 点", inline=True)
    card.add_field(texts.STATS_FIELD_HIGHEST, f"{stats.highest_score} 点", inline=True)
    card.add_field(texts.STATS_FIELD_TODAY, f"{stats.answers_today} 問", inline=True)
    return card


def build_settings_card(prefs) -> Card:
    body = "\n".join(
        f"{difficulty_label(level)}: {texts.DIFFICULTY_DESCRIPTIONS[level]}" for level in texts.DIFFICULTIES
    )
    card = Card(title=texts.SETTINGS_TITLE, body=body, footer=texts.SETTINGS_DIFFICULTY_PROMPT)
    card.add_field(texts.SETTINGS_FIELD_DIFFICULTY, difficulty_label(prefs.difficulty), inline=True)
    card.add_field(texts.SETTINGS_FIELD_THEME, prefs.theme, inline=True)
    card.add_field(texts.SETTINGS_FIELD_SCHEDULE, "ON" if prefs.schedule_enabled else "OFF", inline=True)
    return card
