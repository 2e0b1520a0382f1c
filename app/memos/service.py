"""Memo orchestration: the in-memory memo collection and everything that mutates it.

``MemoBoard`` is the single writer of the collection. Store writes for one memo
id are serialized with a per-memo lock, and tag enrichment after create/update
runs as a background job whose outcome can be polled or awaited.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from app.ai.gemini import GenerationClient, build_generation_client
from app.ai.parser import merge_tags
from app.memos.repository import MemoRepository
from app.memos.schemas import ALL_CATEGORIES, Memo, MemoFormData, MemoStats
from app.shared.config import settings
from app.shared.db import SessionLocal
from app.shared.errors import PersistenceError
from app.summaries.cache import SummaryCache, get_summary_cache
from app.summaries.service import generate

logger = logging.getLogger("MemoBoard")


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class EnrichmentStatus:
    memo_id: str
    state: str = "pending"  # pending|done|failed|superseded
    tags: Optional[List[str]] = None
    summary: Optional[str] = None
    error: Optional[str] = None


@dataclass
class _BoardState:
    memos: List[Memo] = field(default_factory=list)
    search_query: str = ""
    selected_category: str = ALL_CATEGORIES


class MemoBoard:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        client_factory: Callable[[], GenerationClient] = build_generation_client,
        cache: SummaryCache | None = None,
        workers: int | None = None,
    ):
        self._session = session_factory
        self._client_factory = client_factory
        self.cache = cache if cache is not None else SummaryCache(None)
        self._state = _BoardState()
        self._lock = threading.RLock()
        self._memo_locks: Dict[str, threading.Lock] = {}
        # bumped whenever a memo's content changes; stale enrichment results are dropped
        self._revisions: Dict[str, int] = {}
        self._status: Dict[str, EnrichmentStatus] = {}
        self._jobs: Dict[str, Future] = {}
        self._pool = ThreadPoolExecutor(
            max_workers=workers or settings.ENRICH_WORKERS,
            thread_name_prefix="memo-enrich",
        )

    # ---- locking ----
    def _memo_lock(self, memo_id: str) -> threading.Lock:
        with self._lock:
            if memo_id not in self._memo_locks:
                self._memo_locks[memo_id] = threading.Lock()
            return self._memo_locks[memo_id]

    def _replace(self, memo: Memo) -> None:
        with self._lock:
            self._state.memos = [memo if m.id == memo.id else m for m in self._state.memos]

    # ---- state ----
    @property
    def search_query(self) -> str:
        return self._state.search_query

    @property
    def selected_category(self) -> str:
        return self._state.selected_category

    def all(self) -> List[Memo]:
        with self._lock:
            return list(self._state.memos)

    def load(self) -> List[Memo]:
        with self._session() as db:
            memos = MemoRepository(db).list()
        with self._lock:
            self._state.memos = memos
        logger.info(f"Loaded {len(memos)} memos")
        return list(memos)

    def get_by_id(self, memo_id: str) -> Optional[Memo]:
        with self._lock:
            return next((m for m in self._state.memos if m.id == memo_id), None)

    def search(self, query: str | None) -> None:
        with self._lock:
            self._state.search_query = query or ""

    def filter_by_category(self, category: str | None) -> None:
        with self._lock:
            self._state.selected_category = category or ALL_CATEGORIES

    def filtered(self) -> List[Memo]:
        with self._lock:
            memos = list(self._state.memos)
            category = self._state.selected_category
            query = self._state.search_query

        if category != ALL_CATEGORIES:
            memos = [m for m in memos if m.category == category]
        if query.strip():
            q = query.lower()
            memos = [
                m for m in memos
                if q in m.title.lower()
                or q in m.content.lower()
                or any(q in t.lower() for t in m.tags)
            ]
        return memos

    def stats(self) -> MemoStats:
        memos = self.all()
        by_category: Dict[str, int] = {}
        for m in memos:
            by_category[m.category] = by_category.get(m.category, 0) + 1
        return MemoStats(total=len(memos), by_category=by_category, filtered=len(self.filtered()))

    # ---- CRUD ----
    def create(self, form: MemoFormData) -> Memo:
        now = _now()
        with self._session() as db:
            memo = MemoRepository(db).insert({**form.model_dump(), "createdAt": now, "updatedAt": now})
        with self._lock:
            self._state.memos.insert(0, memo)
        self._schedule_enrichment(memo, form.tags)
        return memo

    def update(self, memo_id: str, form: MemoFormData) -> Memo:
        with self._memo_lock(memo_id):
            with self._session() as db:
                memo = MemoRepository(db).update(memo_id, {**form.model_dump(), "updatedAt": _now()})
            with self._lock:
                self._replace(memo)
                self.cache.delete(memo_id)
            self._schedule_enrichment(memo, form.tags)
        return memo

    def delete(self, memo_id: str) -> None:
        with self._memo_lock(memo_id):
            with self._session() as db:
                MemoRepository(db).delete(memo_id)
            with self._lock:
                self._state.memos = [m for m in self._state.memos if m.id != memo_id]
                # a missing revision marks any in-flight enrichment as stale
                for registry in (self._revisions, self._status, self._jobs, self._memo_locks):
                    registry.pop(memo_id, None)
                self.cache.delete(memo_id)

    def clear_all(self) -> None:
        with self._session() as db:
            MemoRepository(db).delete_all()
        with self._lock:
            self._state = _BoardState()
            self._revisions.clear()
            self._status.clear()
            self._jobs.clear()
            self._memo_locks.clear()
            self.cache.clear_all()

    def save_generated(self, memo_id: str, payload: dict) -> Optional[Memo]:
        """Save a generated {summary[, tags]} onto a memo; None when the save failed."""
        with self._memo_lock(memo_id):
            try:
                with self._session() as db:
                    memo = MemoRepository(db).update(memo_id, payload)
            except PersistenceError as e:
                logger.error(f"Failed to save generated summary for memo {memo_id}: {e}")
                return None
            with self._lock:
                self._replace(memo)
                self.cache.set(memo_id, payload["summary"])
        return memo

    # ---- tag enrichment ----
    def _schedule_enrichment(self, memo: Memo, user_tags: List[str]) -> None:
        with self._lock:
            rev = self._revisions.get(memo.id, 0) + 1
            self._revisions[memo.id] = rev
            status = EnrichmentStatus(memo_id=memo.id)
            self._status[memo.id] = status
            self._jobs[memo.id] = self._pool.submit(
                self._enrich, memo.id, memo.content, list(user_tags or []), rev, status
            )

    def _is_current(self, memo_id: str, rev: int) -> bool:
        with self._lock:
            return self._revisions.get(memo_id) == rev

    def _enrich(self, memo_id: str, content: str, user_tags: List[str], rev: int,
                status: EnrichmentStatus) -> EnrichmentStatus:
        try:
            generated = generate(self._client_factory(), content, generate_tags=True)
            merged = merge_tags(user_tags, generated["tags"])
            with self._memo_lock(memo_id):
                if not self._is_current(memo_id, rev):
                    logger.info(f"Dropping stale tag enrichment for memo {memo_id}")
                    with self._lock:
                        status.state = "superseded"
                    return status
                with self._session() as db:
                    memo = MemoRepository(db).update(memo_id, {"summary": generated["summary"], "tags": merged})
                with self._lock:
                    # clear_all does not take memo locks; check again before touching memory or cache
                    if self._revisions.get(memo_id) != rev:
                        status.state = "superseded"
                        return status
                    self._replace(memo)
                    self.cache.set(memo_id, generated["summary"])
                    status.state, status.tags, status.summary = "done", merged, generated["summary"]
        except Exception as e:
            # enrichment never fails the create/update that scheduled it
            logger.error(f"Failed to generate tags for memo {memo_id}: {e}")
            with self._lock:
                status.state, status.error = "failed", str(e)
        return status

    def enrichment_status(self, memo_id: str) -> Optional[EnrichmentStatus]:
        with self._lock:
            status = self._status.get(memo_id)
            return replace(status) if status else None

    def wait_for_enrichment(self, memo_id: str, timeout: float | None = None) -> Optional[EnrichmentStatus]:
        with self._lock:
            job = self._jobs.get(memo_id)
        if job is None:
            return None
        return replace(job.result(timeout=timeout))

    def shutdown(self) -> None:
        self._pool.shutdown(wait=False, cancel_futures=True)


_board: MemoBoard | None = None

# FastAPI dep
def get_memo_board() -> MemoBoard:
    global _board
    if _board is None:
        _board = MemoBoard(cache=get_summary_cache())
        _board.load()
    return _board

def shutdown_memo_board() -> None:
    if _board is not None:
        _board.shutdown()
