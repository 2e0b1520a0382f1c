from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional

MEMO_CATEGORIES = ("personal", "work", "study", "idea", "other")
ALL_CATEGORIES = "all"

def _coerce_category(value: Any) -> str:
    value = (value or "").strip().lower() if isinstance(value, str) else ""
    return value if value in MEMO_CATEGORIES else "other"

class MemoFormData(BaseModel):
    title: str = Field(default="", max_length=200)
    content: str = ""
    category: str = "other"
    tags: List[str] = Field(default_factory=list)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return _coerce_category(v)

    @field_validator("tags")
    @classmethod
    def _tags(cls, v: List[str]) -> List[str]:
        # user-entered tags: trimmed, blanks dropped, duplicates removed
        out: List[str] = []
        for t in v:
            t = t.strip()
            if t and t not in out:
                out.append(t)
        return out

class Memo(BaseModel):
    """In-memory memo: camelCase on the wire, snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    id: str
    title: str
    content: str
    category: str = "other"
    tags: List[str] = Field(default_factory=list)
    summary: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return _coerce_category(v)

    @field_validator("summary", mode="before")
    @classmethod
    def _summary(cls, v):
        # absent, never empty
        return v or None

class MemoStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    total: int
    by_category: Dict[str, int]
    filtered: int

class MemoList(BaseModel):
    items: List[Memo]
    stats: MemoStats

class EnrichmentOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    memo_id: str
    state: str          # pending|done|failed|superseded
    tags: Optional[List[str]] = None
    summary: Optional[str] = None
    error: Optional[str] = None
