"""Local summary cache: memo id -> last generated summary.

Everything lives under one storage key inside a JSON file, the same way a
browser keeps it under one localStorage key. With no path configured the
store is unavailable and every call is a no-op.
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Optional

from app.shared.config import settings

logger = logging.getLogger("SummaryCache")

STORAGE_KEY = "memo-app-summaries"


class SummaryCache:
    def __init__(self, path: str | Path | None):
        self.path = Path(path) if path else None
        self._lock = threading.Lock()

    @property
    def available(self) -> bool:
        return self.path is not None

    def _load_store(self) -> dict:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        return data if isinstance(data, dict) else {}

    def _save_store(self, store: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(store, ensure_ascii=False, indent=2), encoding="utf-8")

    def get(self, memo_id: str) -> Optional[str]:
        if not self.available:
            return None
        with self._lock:
            try:
                cache = self._load_store().get(STORAGE_KEY) or {}
            except (OSError, ValueError) as e:
                logger.error(f"Error loading summary from cache: {e}")
                return None
        return cache.get(memo_id) or None

    def set(self, memo_id: str, summary: str) -> None:
        if not self.available:
            return
        with self._lock:
            try:
                store = self._load_store()
                cache = store.get(STORAGE_KEY) or {}
                cache[memo_id] = summary
                store[STORAGE_KEY] = cache
                self._save_store(store)
            except (OSError, ValueError) as e:
                logger.error(f"Error saving summary to cache: {e}")

    def delete(self, memo_id: str) -> None:
        if not self.available:
            return
        with self._lock:
            try:
                store = self._load_store()
                cache = store.get(STORAGE_KEY)
                if not cache or memo_id not in cache:
                    return
                del cache[memo_id]
                self._save_store(store)
            except (OSError, ValueError) as e:
                logger.error(f"Error deleting summary from cache: {e}")

    def clear_all(self) -> None:
        if not self.available:
            return
        with self._lock:
            try:
                store = self._load_store()
                if store.pop(STORAGE_KEY, None) is not None:
                    self._save_store(store)
            except (OSError, ValueError) as e:
                logger.error(f"Error clearing summary cache: {e}")


_cache: SummaryCache | None = None

# FastAPI dep
def get_summary_cache() -> SummaryCache:
    global _cache
    if _cache is None:
        _cache = SummaryCache(settings.SUMMARY_CACHE_PATH or None)
    return _cache
