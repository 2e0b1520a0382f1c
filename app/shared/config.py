# app/shared/config.py
from pathlib import Path
from pydantic import BaseModel
import os

ROOT = Path(__file__).resolve().parents[2]   # project root
STORAGE_DIR = ROOT / "storage"

class Settings(BaseModel):
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{(STORAGE_DIR / 'memos.db').as_posix()}")

    # server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Gemini
    GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-001")
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_TIMEOUT_SECONDS: float | None = float(os.getenv("GEMINI_TIMEOUT_SECONDS")) if os.getenv("GEMINI_TIMEOUT_SECONDS") else None
    GENERATION_TEMPERATURE: float = float(os.getenv("GENERATION_TEMPERATURE", "0.7"))
    SUMMARY_MAX_TOKENS: int = int(os.getenv("SUMMARY_MAX_TOKENS", "200"))
    SUMMARY_TAGS_MAX_TOKENS: int = int(os.getenv("SUMMARY_TAGS_MAX_TOKENS", "500"))

    # summary / tag policy
    MAX_TAGS: int = int(os.getenv("MAX_TAGS", "5"))
    DEFAULT_TAG: str = os.getenv("DEFAULT_TAG", "일반")
    FALLBACK_SUMMARY: str = os.getenv("FALLBACK_SUMMARY", "요약을 생성할 수 없습니다.")

    # local summary cache; empty string disables it
    SUMMARY_CACHE_PATH: str = os.getenv("SUMMARY_CACHE_PATH", (STORAGE_DIR / "summary_cache.json").as_posix())

    ENRICH_WORKERS: int = int(os.getenv("ENRICH_WORKERS", "2"))

settings = Settings()
