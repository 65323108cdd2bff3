import contextlib
import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from core.config_loader import get_config

logger = logging.getLogger(__name__)

SessionLocal = sessionmaker(autocommit=False, autoflush=False)

_engine: Optional[Engine] = None


def configure_engine(engine: Engine) -> None:
    """Bind SessionLocal to an engine (tests bind an in-memory SQLite engine)."""
    global _engine
    _engine = engine
    SessionLocal.configure(bind=engine)


def get_engine() -> Engine:
    """Create the engine from config on first use."""
    if _engine is None:
        configure_engine(create_engine(get_config().database.url, pool_pre_ping=True))
    return _engine


def get_session_factory() -> sessionmaker:
    get_engine()
    return SessionLocal


def get_db():
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


@contextlib.contextmanager
def db_session_scope(session_factory: Optional[sessionmaker] = None):
    """Provide a transactional scope around a series of operations."""
    session: Session = (session_factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
