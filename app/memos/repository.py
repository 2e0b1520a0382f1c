"""Persistence adapter between the in-memory ``Memo`` and the ``memos`` table.

The in-memory shape is camelCase (``createdAt``), rows are snake_case
(``created_at``). Every store failure surfaces as ``PersistenceError``.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.memos.models import Memo as MemoRow
from app.memos.schemas import Memo
from app.shared.errors import MemoNotFoundError, PersistenceError

logger = logging.getLogger("MemoRepository")

_ROW_FIELDS = {
    "title": "title",
    "content": "content",
    "category": "category",
    "tags": "tags",
    "summary": "summary",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
}


def _aware(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we write is UTC
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


def to_memo(row: MemoRow) -> Memo:
    return Memo(
        id=row.id,
        title=row.title or "",
        content=row.content or "",
        category=row.category,
        tags=row.tags or [],
        summary=row.summary or None,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def to_row(fields: dict[str, Any]) -> dict[str, Any]:
    """Map camelCase (or already snake_case) memo fields to row attributes; unknown keys are dropped."""
    out: dict[str, Any] = {}
    for key, value in fields.items():
        attr = _ROW_FIELDS.get(key)
        if attr is None:
            continue
        if attr == "summary":
            value = value or None
        elif attr == "tags":
            value = list(value or [])
        out[attr] = value
    return out


class MemoRepository:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _store_op(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Failed to {action}: {exc}")
            raise PersistenceError() from exc

    def list(self) -> list[Memo]:
        with self._store_op("load memos"):
            rows = self.db.scalars(select(MemoRow).order_by(desc(MemoRow.created_at))).all()
        return [to_memo(r) for r in rows]

    def get(self, memo_id: str) -> Memo | None:
        with self._store_op("load memo"):
            row = self.db.get(MemoRow, memo_id)
        return to_memo(row) if row else None

    def insert(self, fields: dict[str, Any]) -> Memo:
        with self._store_op("create memo"):
            row = MemoRow()
            for attr, value in to_row(fields).items():
                setattr(row, attr, value)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return to_memo(row)

    def update(self, memo_id: str, fields: dict[str, Any]) -> Memo:
        with self._store_op("update memo"):
            row = self.db.get(MemoRow, memo_id)
            if row is None:
                raise MemoNotFoundError(memo_id)
            for attr, value in to_row(fields).items():
                setattr(row, attr, value)
            self.db.commit()
            self.db.refresh(row)
        return to_memo(row)

    def delete(self, memo_id: str) -> None:
        with self._store_op("delete memo"):
            row = self.db.get(MemoRow, memo_id)
            if row is None:
                raise MemoNotFoundError(memo_id)
            self.db.delete(row)
            self.db.commit()

    def delete_all(self) -> None:
        with self._store_op("clear memos"):
            self.db.execute(delete(MemoRow).where(MemoRow.id != ""))
            self.db.commit()
