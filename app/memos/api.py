# app/memos/api.py
from fastapi import APIRouter, Depends, Query

from app.memos.schemas import EnrichmentOut, Memo, MemoFormData, MemoList, MemoStats
from app.memos.service import MemoBoard, get_memo_board
from app.shared.errors import MemoNotFoundError

router = APIRouter(prefix="/memos", tags=["Memos"])

@router.get("", response_model=MemoList)
def list_memos(
    q: str | None = Query(None, description="Case-insensitive match over title, content and tags"),
    category: str | None = Query(None, description="personal|work|study|idea|other|all"),
    board: MemoBoard = Depends(get_memo_board),
):
    if q is not None:
        board.search(q)
    if category is not None:
        board.filter_by_category(category)
    return {"items": board.filtered(), "stats": board.stats()}

@router.get("/stats", response_model=MemoStats)
def memo_stats(board: MemoBoard = Depends(get_memo_board)):
    return board.stats()

@router.post("", response_model=Memo, status_code=201)
def create_memo(payload: MemoFormData, board: MemoBoard = Depends(get_memo_board)):
    return board.create(payload)

@router.delete("")
def clear_memos(board: MemoBoard = Depends(get_memo_board)):
    board.clear_all()
    return {"cleared": True}

@router.get("/{memo_id}", response_model=Memo)
def get_memo(memo_id: str, board: MemoBoard = Depends(get_memo_board)):
    memo = board.get_by_id(memo_id)
    if not memo:
        raise MemoNotFoundError(memo_id)
    return memo

@router.get("/{memo_id}/enrichment", response_model=EnrichmentOut)
def memo_enrichment(memo_id: str, board: MemoBoard = Depends(get_memo_board)):
    status = board.enrichment_status(memo_id)
    if not status:
        raise MemoNotFoundError(memo_id)
    return status

@router.put("/{memo_id}", response_model=Memo)
def update_memo(memo_id: str, payload: MemoFormData, board: MemoBoard = Depends(get_memo_board)):
    return board.update(memo_id, payload)

@router.delete("/{memo_id}")
def delete_memo(memo_id: str, board: MemoBoard = Depends(get_memo_board)):
    board.delete(memo_id)
    return {"deleted": True}
