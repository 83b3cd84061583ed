import re
import logging
from typing import Dict, List

from openai import OpenAI, OpenAIError

from app.services.errors import ScoringError

logger = logging.getLogger(__name__)

MODEL_NAME = "gpt-4o-mini"

MIN_SCORE = 1
MAX_SCORE = 5


SYSTEM_PROMPT = "You are an interview evaluator. Score answers from 1 to 5. Return only the number."


USER_PROMPT_TEMPLATE = """Evaluate the following interview answer transcript for quality, relevance, structure, and clarity.
Return only an integer score between 1 and 5.

Transcript:
{transcript}
"""

_FIRST_INT_RE = re.compile(r"\d+")


def build_messages(transcript: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": USER_PROMPT_TEMPLATE.format(transcript=transcript)},
    ]


def parse_score(text: str | None) -> int:
    """
    응답 텍스트의 첫 정수를 점수로 사용하고 [1, 5]로 clamp.
    숫자가 없으면 0으로 보고 clamp → 1 (실패로 처리하지 않음).
    """
    match = _FIRST_INT_RE.search(text or "")
    value = int(match.group()) if match else 0
    return max(MIN_SCORE, min(MAX_SCORE, value))


class AnswerScoringService:

    def __init__(self, api_key: str | None = None, model: str = MODEL_NAME,
                 timeout: float | None = None, client: OpenAI | None = None):
        self.client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model

    def score(self, transcript: str) -> int:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                temperature=0,
                messages=build_messages(transcript),
            )
        except OpenAIError as e:
            raise ScoringError(f"scoring request failed: {e}") from e

        try:
            content = completion.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ScoringError(f"malformed scoring response: {e}") from e

        if content is not None and not isinstance(content, str):
            raise ScoringError(f"malformed scoring content: {type(content).__name__}")

        content = (content or "").strip()
        score = parse_score(content)
        if not _FIRST_INT_RE.search(content):
            logger.warning("[SCORE] no digit in response %r, falling back to %s", content[:50], score)
        return score


def build_scoring_service(settings) -> AnswerScoringService:
    return AnswerScoringService(
        api_key=settings.openai_api_key,
        model=settings.openai_scoring_model,
        timeout=settings.scoring_timeout_sec,
    )
