from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any

from app.ai.gemini import GenerationClient
from app.shared.errors import ValidationError

if TYPE_CHECKING:
    from app.memos.service import MemoBoard

logger = logging.getLogger("SummaryService")

CONTENT_REQUIRED = "메모 내용이 필요합니다."
CONTENT_EMPTY = "요약할 내용이 없습니다."


def require_content(content: Any) -> str:
    if not content or not isinstance(content, str):
        raise ValidationError(CONTENT_REQUIRED)
    if not content.strip():
        raise ValidationError(CONTENT_EMPTY)
    return content


def generate(client: GenerationClient, content: str, generate_tags: bool = False) -> dict:
    """{"summary"} or {"summary", "tags"}; GenerationError propagates."""
    if generate_tags:
        return client.generate_summary_and_tags(content).as_dict()
    return {"summary": client.generate_summary(content)}


def summarize_memo(
    board: MemoBoard,
    client: GenerationClient,
    memo_id: str,
    content: str,
    generate_tags: bool = False,
) -> dict:
    """Generate for one memo and save the result onto it through the board.

    A failed save is logged by the board only; the payload is still returned.
    """
    payload = generate(client, content, generate_tags)
    board.save_generated(memo_id, payload)
    return payload
