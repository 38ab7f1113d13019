# Global UI Strings and Constants
APP_VERSION = "v1.0.0"

DIFFICULTIES = ("beginner", "intermediate", "advanced")
DEFAULT_DIFFICULTY = "intermediate"
DEFAULT_THEME = "日常会話"

DIFFICULTY_LABELS = {
    "beginner": "初級",
    "intermediate": "中級",
    "advanced": "上級",
}

DIFFICULTY_DESCRIPTIONS = {
    "beginner": "シンプルな文法、基本語彙",
    "intermediate": "複文、一般的な表現",
    "advanced": "複雑な文法、慣用句",
}

WELCOME_TEXT = (
    "👋 <b>英作文練習ボットへようこそ！</b>\n\n"
    "日本語の文が出題されるので、英語に翻訳して問題メッセージに<b>返信</b>してください。\n"
    "AIが採点して模範解答とフィードバックを返します。\n\n"
    "/quiz: 新しい問題\n"
    "/theme テーマ: テーマを設定\n"
    "/settings: 設定\n"
    "/stats: 学習統計"
)

# Buttons
BTN_NEXT_QUIZ = "📝 次の問題"
BTN_SETTINGS = "⚙️ 設定"
BTN_STATS = "📊 統計"
BTN_THEME = "🎯 テーマ変更"
BTN_SCHEDULE_TOGGLE = "⏰ スケジュール切替"

# Exercise card
EXERCISE_TITLE = "📝 英作文問題 #{exercise_id}"
EXERCISE_FIELD_THEME = "🎯 テーマ"
EXERCISE_FIELD_DIFFICULTY = "📊 難易度"
EXERCISE_FOOTER = "💡 このメッセージに返信して回答してください！"

# Evaluation card
EVALUATION_TITLE = "{emoji} 回答評価"
EVALUATION_FIELD_ANSWER = "あなたの回答"
EVALUATION_FIELD_SCORE = "📊 スコア"
EVALUATION_FIELD_MODEL_ANSWER = "📖 模範解答"
EVALUATION_FIELD_FEEDBACK = "💬 フィードバック"

# Stats card
STATS_TITLE = "📊 あなたの学習統計"
STATS_FIELD_TOTAL = "総回答数"
STATS_FIELD_AVERAGE = "平均スコア"
STATS_FIELD_HIGHEST = "最高スコア"
STATS_FIELD_TODAY = "今日の回答"

# Settings card
SETTINGS_TITLE = "⚙️ 現在の設定"
SETTINGS_FIELD_DIFFICULTY = "難易度"
SETTINGS_FIELD_THEME = "テーマ"
SETTINGS_FIELD_SCHEDULE = "定期出題"
SETTINGS_DIFFICULTY_PROMPT = "難易度を選択"

THEME_FORM_PROMPT = (
    "🎯 <b>テーマを設定</b>\n\n"
    "新しいテーマを送信してください（{min_len}〜{max_len}文字）。\n"
    "例: プログラミング、料理、旅行"
)

# Confirmations
MSG_THEME_SET = "✅ テーマを「{theme}」に設定しました！"
MSG_DIFFICULTY_SET = "✅ 難易度を「{label}」に設定しました！"
MSG_SCHEDULE_SET = "✅ 定期出題を {status} にしました！"
MSG_THEME_USAGE = "使い方: /theme テーマ（例: /theme プログラミング）"

# Errors
ERR_GENERIC = "エラーが発生しました"
ERR_GENERATION_FAILED = "問題の生成に失敗しました"
ERR_EVALUATION_FAILED = "❌ 回答の評価に失敗しました"
ERR_SETTINGS_UPDATE_FAILED = "設定の更新に失敗しました"
ERR_SETTINGS_FETCH_FAILED = "設定の取得に失敗しました"
ERR_STATS_FETCH_FAILED = "統計の取得に失敗しました"
ERR_THEME_REQUIRED = "テーマを入力してください"
ERR_THEME_TOO_LONG = "テーマは{max_len}文字以内で入力してください"
ERR_UNKNOWN_DIFFICULTY = "不明な難易度です"
ERR_UNEXPECTED = "⚠️ 予期しないエラーが発生しました。もう一度お試しください。"
