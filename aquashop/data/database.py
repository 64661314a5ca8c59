# aquashop/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from aquashop.utils.settings import DATABASE_URL, REMOTE_TIMEOUT_SECONDS

Base = declarative_base()


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"timeout": REMOTE_TIMEOUT_SECONDS, "check_same_thread": False}
    if url.startswith("postgresql"):
        #statement_timeout w ms, kazde zapytanie do order store ma limit czasu
        timeout_ms = int(REMOTE_TIMEOUT_SECONDS * 1000)
        return {
            "connect_timeout": max(1, int(REMOTE_TIMEOUT_SECONDS)),
            "options": f"-c statement_timeout={timeout_ms}",
        }
    return {}


def build_engine(url: str = DATABASE_URL):
    kwargs = {"connect_args": _connect_args(url), "future": True}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared in-memory database across threads
        kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
