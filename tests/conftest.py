"""
Shared fixtures: a throwaway SQLite database per test, a fake Gemini client,
a file-backed summary cache under tmp_path, and a TestClient wired to a board over them.
"""
import threading

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.ai.gemini import get_generation_client
from app.ai.parser import SummaryAndTags
from app.memos.service import MemoBoard, get_memo_board
from app.shared.db import Base
from app.shared.errors import GenerationError
from app.summaries.cache import SummaryCache


class FakeGenerationClient:
    """Stands in for GeminiClient; records every call."""

    def __init__(self, summary="S", tags=("x", "y")):
        self.summary = summary
        self.tags = list(tags)
        self.fail = False
        self.calls = []
        self._lock = threading.Lock()

    def _record(self, kind, content):
        with self._lock:
            self.calls.append((kind, content))

    def generate_summary(self, content):
        self._record("summary", content)
        if self.fail:
            raise GenerationError("메모 요약 생성 중 오류가 발생했습니다.")
        return self.summary

    def generate_summary_and_tags(self, content):
        self._record("summary_and_tags", content)
        if self.fail:
            raise GenerationError("메모 요약 및 태그 생성 중 오류가 발생했습니다.")
        return SummaryAndTags(summary=self.summary, tags=list(self.tags))


class FlakySessions:
    """Session factory whose sessions fail on commit while ``broken`` is set."""

    def __init__(self, factory):
        self.factory = factory
        self.broken = False

    def __call__(self):
        db = self.factory()
        if self.broken:
            def _fail():
                raise OperationalError("UPDATE memos", {}, Exception("database is locked"))

            db.commit = _fail
        return db


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(
        f"sqlite:///{(tmp_path / 'memos.db').as_posix()}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def fake_client():
    return FakeGenerationClient()


@pytest.fixture
def cache(tmp_path):
    return SummaryCache(tmp_path / "summary_cache.json")


@pytest.fixture
def board(session_factory, fake_client, cache):
    b = MemoBoard(
        session_factory=session_factory,
        client_factory=lambda: fake_client,
        cache=cache,
        workers=2,
    )
    yield b
    b.shutdown()


@pytest.fixture
def client(fake_client, board):
    app.dependency_overrides[get_generation_client] = lambda: fake_client
    app.dependency_overrides[get_memo_board] = lambda: board
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def flaky_sessions(session_factory):
    return FlakySessions(session_factory)
