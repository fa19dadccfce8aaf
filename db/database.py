"""
CardBox – Database location & session factories
================================================
The durable slots live in one SQLite file under ``data/``.  The default
engine is built on first use, so importing this module touches nothing
on disk; tests build their own factory with ``create_session_factory``.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base

DB_FILENAME = "cardbox.db"


def app_data_dir() -> Path:
    """Folder holding the database: beside the executable when frozen, else the project root."""
    if getattr(sys, "frozen", False):
        root = Path(sys.executable).parent
    else:
        root = Path(__file__).resolve().parent.parent
    return root / "data"


def database_url(path: Optional[Path] = None) -> str:
    return f"sqlite:///{path or app_data_dir() / DB_FILENAME}"


def create_session_factory(url: str) -> sessionmaker:
    """Engine + session factory for *url*, with the slot table created."""
    engine = create_engine(url, echo=False, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, expire_on_commit=False)


_default_factory: Optional[sessionmaker] = None


def init_db() -> sessionmaker:
    """Create the data folder and tables for the application database."""
    global _default_factory
    if _default_factory is None:
        app_data_dir().mkdir(parents=True, exist_ok=True)
        _default_factory = create_session_factory(database_url())
    return _default_factory


def get_session() -> Session:
    """Return a new session on the application database."""
    return init_db()()
