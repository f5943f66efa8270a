"""Session forge. The engine is only built when DATABASE_URL is set."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings

logger = logging.getLogger("db.session")


def build_engine(url: str, *, echo: bool = False) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, future=True)
    # Tunables (clamped to expose issues faster)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "5")),
        pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "5")),
        pool_recycle=300,
        echo=echo,
    )


@lru_cache()
def get_engine() -> Optional[Engine]:
    settings = get_settings()
    url = settings.get_database_url()
    if not url:
        logger.info("DATABASE_URL not configured; project bookkeeping disabled")
        return None
    return build_engine(url, echo=settings.debug)


@lru_cache()
def get_session_factory() -> Optional[sessionmaker]:
    engine = get_engine()
    if engine is None:
        return None
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

