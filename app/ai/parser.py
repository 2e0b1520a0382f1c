"""Turn raw model output into a summary plus a tag list.

Two paths, tried in order:

* ``json``      -- the text (or a fenced ```json block inside it) decodes to an object
* ``heuristic`` -- regex extraction of ``"summary": "..."`` and ``"tags": [...]``

Neither path raises; a bad response only degrades the result.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Optional

from app.shared.config import settings

logger = logging.getLogger("SummaryParser")

_SUMMARY_RE = re.compile(r'summary["\s]*:["\s]*"([^"]+)"', re.IGNORECASE)
_TAGS_RE = re.compile(r'tags["\s]*:["\s]*\[([^\]]+)\]', re.IGNORECASE)
_FENCED_RE = re.compile(r"```(?:json)?\s*\n(.*?)\n```", re.DOTALL)


@dataclass
class SummaryAndTags:
    summary: str
    tags: list[str] = field(default_factory=list)
    source: Literal["json", "heuristic"] = "json"

    def as_dict(self) -> dict:
        return {"summary": self.summary, "tags": list(self.tags)}


def _decode_strict(raw: str) -> Optional[dict]:
    candidates = [raw]
    fenced = _FENCED_RE.search(raw)
    if fenced:
        candidates.append(fenced.group(1).strip())
    for text in candidates:
        try:
            value = json.loads(text)
        except (json.JSONDecodeError, TypeError):
            continue
        if isinstance(value, dict):
            return value
    return None


def _extract_heuristic(raw: str, max_tags: int) -> dict:
    summary_match = _SUMMARY_RE.search(raw)
    tags_match = _TAGS_RE.search(raw)

    tags: list[str] = []
    if tags_match:
        for part in tags_match.group(1).split(","):
            tag = part.strip().strip("\"'").strip()
            if tag:
                tags.append(tag)
    return {
        "summary": summary_match.group(1) if summary_match else None,
        "tags": tags[:max_tags],
    }


def _clean_tags(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    out = []
    for t in value:
        if t is None:
            continue
        t = str(t).strip()
        if t:
            out.append(t)
    return out


def _first_line(raw: str) -> str:
    return raw.split("\n", 1)[0].strip()


def parse_summary_and_tags(
    raw: str | None,
    max_tags: int | None = None,
    default_tag: str | None = None,
    fallback_summary: str | None = None,
) -> SummaryAndTags:
    """Parse a model response into ``SummaryAndTags``; never raises."""
    max_tags = settings.MAX_TAGS if max_tags is None else max_tags
    default_tag = default_tag or settings.DEFAULT_TAG
    fallback_summary = fallback_summary or settings.FALLBACK_SUMMARY
    raw = raw or ""

    decoded = _decode_strict(raw)
    if decoded is not None:
        source = "json"
        summary = decoded.get("summary")
        summary = str(summary).strip() if summary is not None else ""
        tags = _clean_tags(decoded.get("tags"))
    else:
        logger.warning("Failed to parse JSON response, attempting text extraction")
        source = "heuristic"
        extracted = _extract_heuristic(raw, max_tags)
        summary = (extracted["summary"] or "").strip() or _first_line(raw)
        tags = extracted["tags"]

    if not tags:
        tags = [default_tag]

    return SummaryAndTags(
        summary=summary or fallback_summary,
        tags=tags[:max_tags],
        source=source,
    )


def merge_tags(user_tags: Iterable[str] | None, generated: Iterable[str] | None) -> list[str]:
    """User tags first, then generated ones; first occurrence wins."""
    merged: list[str] = []
    for tag in [*(user_tags or []), *(generated or [])]:
        if tag not in merged:
            merged.append(tag)
    return merged
