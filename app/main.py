import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from app.shared.config import settings
from app.shared.db import Base, engine
from app.shared.errors import MemoAppError
from app.shared.http import err
from app.shared.logging import setup_logging

# import models so they register with Base.metadata
from app.memos import models as memos_models  # noqa: F401

# Routers Import
from app.memos.api import router as memos_router
from app.summaries.api import router as summaries_router

from app.ai.gemini import build_generation_client
from app.memos.service import get_memo_board, shutdown_memo_board

logger = logging.getLogger("App")

TAGS_METADATA = [
    {"name": "Memos", "description": "Create, list, search, edit and delete memos"},
    {"name": "Summaries", "description": "AI summaries and tags for memo content"},
    {"name": "Health", "description": "Service health"},
]

app = FastAPI(
    title="Memo Notes",
    version="0.1.0",
    description="Memos with Gemini-generated summaries and tags.",
    openapi_tags=TAGS_METADATA,
)


@app.exception_handler(MemoAppError)
async def _domain_error(request: Request, exc: MemoAppError):
    return err(exc.message, status=exc.status_code)

@app.exception_handler(RequestValidationError)
async def _bad_request(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "invalid request")
    return err(f"{where}: {msg}" if where else msg, status=400)

# real error text only in dev; elsewhere a generic message
@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception):
    logger.exception("Unhandled error")
    message = str(exc) if settings.ENV == "dev" and str(exc) else MemoAppError.default_message
    return err(message, status=500)


@app.on_event("startup")
def _startup():
    setup_logging(settings.LOG_LEVEL)
    # no credential, no service
    build_generation_client()
    Base.metadata.create_all(bind=engine)
    get_memo_board()

@app.on_event("shutdown")
def _shutdown():
    shutdown_memo_board()

@app.get("/healthz", tags=["Health"])
def healthz():
    return {"ok": True}

# Routers
app.include_router(summaries_router)
app.include_router(memos_router)
