from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from app.shared.db import Base
import uuid, json

def _id32() -> str:
    return uuid.uuid4().hex  # 32 chars

def _now() -> datetime:
    return datetime.now(timezone.utc)

class Memo(Base):
    __tablename__ = "memos"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_id32)
    title: Mapped[str] = mapped_column(String(200), default="")
    content: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(String(16), default="other")  # personal|work|study|idea|other
    # text array stored as JSON text so SQLite works too; see the `tags` property
    tags_json: Mapped[str] = mapped_column("tags", Text, default="[]")
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)

    @property
    def tags(self) -> list[str]:
        try:
            return json.loads(self.tags_json or "[]")
        except Exception:
            return []

    @tags.setter
    def tags(self, val: list[str]):
        self.tags_json = json.dumps(list(val or []), ensure_ascii=False)
