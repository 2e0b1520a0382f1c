from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from app.shared.config import settings, STORAGE_DIR

# Local SQLite DB under ./storage/ unless DATABASE_URL says otherwise
if settings.DATABASE_URL.startswith("sqlite"):
    STORAGE_DIR.mkdir(parents=True, exist_ok=True)
    engine = create_engine(settings.DATABASE_URL, connect_args={"check_same_thread": False})
else:
    engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

class Base(DeclarativeBase):
    pass
