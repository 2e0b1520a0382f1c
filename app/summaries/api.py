# app/summaries/api.py
import logging
from typing import Any
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.ai.gemini import GenerationClient, get_generation_client, SUMMARY_ERROR
from app.memos.service import MemoBoard, get_memo_board
from app.shared.errors import GenerationError, ValidationError
from app.shared.http import ok, err
from app.summaries.service import generate, require_content, summarize_memo

router = APIRouter(prefix="/memos", tags=["Summaries"])
logger = logging.getLogger("SummaryAPI")

class SummaryIn(BaseModel):
    # content is checked by hand so bad input gets the same 400 shape as empty input
    content: Any = None

class MemoSummaryIn(SummaryIn):
    model_config = ConfigDict(populate_by_name=True)
    generate_tags: bool = Field(default=False, alias="generateTags")

@router.post("/summary")
def api_summary(inb: SummaryIn, client: GenerationClient = Depends(get_generation_client)):
    try:
        content = require_content(inb.content)
        return ok(generate(client, content))
    except (ValidationError, GenerationError) as e:
        return err(e.message, status=e.status_code)
    except Exception as e:
        logger.exception("Summary generation error")
        return err(str(e) or SUMMARY_ERROR, status=500)

@router.post("/{memo_id}/summary")
def api_memo_summary(
    memo_id: str,
    inb: MemoSummaryIn,
    client: GenerationClient = Depends(get_generation_client),
    board: MemoBoard = Depends(get_memo_board),
):
    try:
        content = require_content(inb.content)
        return ok(summarize_memo(board, client, memo_id, content, generate_tags=inb.generate_tags))
    except (ValidationError, GenerationError) as e:
        return err(e.message, status=e.status_code)
    except Exception as e:
        logger.exception("Summary generation error")
        return err(str(e) or SUMMARY_ERROR, status=500)
