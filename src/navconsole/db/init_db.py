"""
Database initialization helper.
"""

import navconsole.models  # noqa: F401  (registers models with Base)
from navconsole.db import Base, get_engine


def init_db() -> None:
    """
    Create database tables for all registered models.
    """
    Base.metadata.create_all(bind=get_engine())


def drop_db() -> None:
    """Drop every table known to the metadata (used by tests and reset scripts)."""
    Base.metadata.drop_all(bind=get_engine())
