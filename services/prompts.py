GENERATE_EXERCISE_PROMPT = """あなたは英語学習アシスタントです。英作文練習用の日本語の文を生成してください。

テーマ: {theme}
難易度: {difficulty}

ルール:
- 日本語の文のみを出力してください（それ以外は何も出力しないでください）
- 自然でよく使われる表現にしてください
- 難易度に合わせてください
  - beginner（初級）: シンプルな文法、基本的な語彙
  - intermediate（中級）: 複文、一般的な表現
  - advanced（上級）: 複雑な文法、慣用句、ニュアンスのある表現

日本語の文を出力してください:"""

EVALUATE_ANSWER_PROMPT = """あなたは英語学習アシスタントです。ユーザーの英訳を評価してください。

日本語の文: {source_text}
ユーザーの回答: {answer}

以下の形式で評価してください:
SCORE: [0-100の数値]
MODEL_ANSWER: [あなたの理想的な英訳]
FEEDBACK: [日本語での詳細なフィードバック。文法の訂正、語彙の提案、コメントを含めてください]

正確に評価してください。間違いがあれば指摘し、改善方法を説明してください。"""


def build_generation_prompt(theme: str, difficulty: str) -> str:
    return GENERATE_EXERCISE_PROMPT.format(theme=theme, difficulty=difficulty)


def build_evaluation_prompt(source_text: str, answer: str) -> str:
    return EVALUATE_ANSWER_PROMPT.format(source_text=source_text, answer=answer)
