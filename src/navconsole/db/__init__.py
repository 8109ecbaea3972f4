import os

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Build DATABASE_URL from env or use DATABASE_URL if provided
DB_NAME = os.environ.get("DB_NAME", os.environ.get("DB", "navconsole"))
DATABASE_URL = os.environ.get(
    "DATABASE_URL",
    f"postgresql+psycopg://{os.environ.get('DB_USER', 'postgres')}:{os.environ.get('DB_PASS', 'postgres')}@{os.environ.get('DB_HOST', 'localhost')}:{os.environ.get('DB_PORT', '5432')}/{DB_NAME}",
)

# Lazy engine creation so tests can set DATABASE_URL before the first import
_engine = None


def _build_engine(url: str):
    # SQLite connections are shared with the threadpool that runs sync endpoints
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


def get_engine():
    global _engine
    if _engine is None:
        _engine = _build_engine(DATABASE_URL)
    return _engine


engine = get_engine()

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
