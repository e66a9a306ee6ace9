from threading import Lock

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from portal.core import config


def _build_engine(url: str):
    if url == 'sqlite://' or (url.startswith('sqlite') and ':memory:' in url):
        # One shared connection so every request thread sees the same in-memory database.
        return create_engine(
            url,
            connect_args={'check_same_thread': False},
            poolclass=StaticPool,
        )
    return create_engine(url)


engine = _build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_schema_ready = False


def ensure_schema() -> None:
    global _schema_ready

    if _schema_ready:
        return

    with _schema_lock:
        if _schema_ready:
            return

        Base.metadata.create_all(bind=engine)
        _schema_ready = True


def drop_schema() -> None:
    global _schema_ready

    with _schema_lock:
        Base.metadata.drop_all(bind=engine)
        _schema_ready = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
