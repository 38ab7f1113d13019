"""
Parser for the line-oriented evaluation replies produced by the AI service.

The reply is expected, not required, to look like:

    SCORE: 85
    MODEL_ANSWER: This is a test.
    FEEDBACK: Great job!
    (more feedback lines...)

Anything the parser does not recognize falls back to defaults, so parsing
never fails.
"""
import re
from dataclasses import dataclass

DEFAULT_SCORE = 70
MIN_SCORE = 0
MAX_SCORE = 100

SCORE_MARKER = "SCORE:"
MODEL_ANSWER_MARKER = "MODEL_ANSWER:"
FEEDBACK_MARKER = "FEEDBACK:"

_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)")


@dataclass
class EvaluationResult:
    score: int = DEFAULT_SCORE
    model_answer: str = ""
    feedback: str = ""


def split_lines(text: str) -> list[str]:
    """Splits on "\n" only; a single trailing empty line is dropped."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _clamp_score(value: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def _is_marker_line(line: str, marker: str) -> bool:
    # Marker, separator and at least one character of payload.
    return len(line) > len(marker) + 1 and line.startswith(marker)


def _marker_payload(line: str, marker: str) -> str:
    return line[len(marker) + 1:]


def _parse_score(line: str, current: int) -> int:
    match = _LEADING_INT_RE.match(line[len(SCORE_MARKER):])
    if not match:
        return current
    return _clamp_score(int(match.group(1)))


def parse_evaluation_response(raw_text: str) -> EvaluationResult:
    result = EvaluationResult(feedback=raw_text)

    lines = split_lines(raw_text)
    for i, line in enumerate(lines):
        if _is_marker_line(line, SCORE_MARKER):
            result.score = _parse_score(line, result.score)
        elif _is_marker_line(line, MODEL_ANSWER_MARKER):
            result.model_answer = _marker_payload(line, MODEL_ANSWER_MARKER)
        elif _is_marker_line(line, FEEDBACK_MARKER):
            feedback_lines = [_marker_payload(line, FEEDBACK_MARKER)] + lines[i + 1:]
            result.feedback = "\n".join(feedback_lines)
            break

    return result
