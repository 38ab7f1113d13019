import pytest

from core.config import _join_webhook_url, _parse_interval_minutes
from database.models import Preferences, UserStats
from handlers.settings import validate_theme
from services.cards import (
    Card,
    build_evaluation_card,
    build_exercise_card,
    build_settings_card,
    build_stats_card,
    score_emoji,
)


def test_exercise_card_title_is_first_line():
    text = build_exercise_card(12, "私は学生です。", "学校", "beginner").render()
    lines = text.splitlines()
    assert lines[0] == "<b>📝 英作文問題 #12</b>"
    assert lines[1] == "「私は学生です。」"
    assert "初級" in text


def test_render_escapes_html():
    card = Card(title="a <b> & c", body="<script> \"quoted\"")
    card.add_field("x", "1 < 2")
    text = card.render()
    assert text.startswith("<b>a &lt;b&gt; &amp; c</b>")
    assert "&lt;script&gt; \"quoted\"" in text
    assert "1 &lt; 2" in text


def test_long_field_values_are_truncated():
    card = Card(title="title").add_field("long", "a" * 3000)
    assert "a" * 1023 + "…" in card.render()
    assert "a" * 1024 not in card.render()


def test_inline_fields_share_a_line():
    text = build_stats_card(UserStats(total_answers=3, average_score=90.0, highest_score=100, answers_today=1)).render()
    assert "3 問" in text
    assert "90.0 点" in text
    assert text.count(" | ") == 3


@pytest.mark.parametrize("score, emoji", [
    (100, "🎉"), (90, "🎉"), (89, "👍"), (70, "👍"), (69, "📝"), (50, "📝"), (49, "💪"), (0, "💪"),
])
def test_score_emoji_bands(score, emoji):
    assert score_emoji(score) == emoji


def test_evaluation_card_fields():
    card = build_evaluation_card("I am a student.", 92, "よくできました", "I'm a student.")
    assert card.title == "🎉 回答評価"
    names = [f.name for f in card.fields]
    assert names == ["あなたの回答", "📊 スコア", "📖 模範解答", "💬 フィードバック"]
    assert card.fields[1].value.startswith("92 / 100")


def test_settings_card_shows_schedule_flag():
    text = build_settings_card(Preferences(account_id="1", schedule_enabled=False)).render()
    assert "OFF" in text
    assert "日常会話" in text


@pytest.mark.parametrize("raw, expected", [
    ("  料理  ", ("料理", None)),
    ("x" * 50, ("x" * 50, None)),
])
def test_validate_theme_accepts(raw, expected):
    assert validate_theme(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", None, "x" * 51])
def test_validate_theme_rejects(raw):
    theme, error = validate_theme(raw)
    assert theme is None
    assert error


@pytest.mark.parametrize("raw, expected", [
    ("30", 30), ("0", 60), ("-5", 60), ("abc", 60), (None, 60),
])
def test_parse_interval_minutes(raw, expected):
    assert _parse_interval_minutes(raw) == expected


def test_join_webhook_url():
    assert _join_webhook_url("https://example.com/", "hook") == "https://example.com/hook"
    assert _join_webhook_url("", "/hook") == ""
