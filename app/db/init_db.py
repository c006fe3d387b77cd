import logging

from sqlalchemy.engine import Engine

from app.db.base import Base

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """Create missing tables (and, on Postgres, the no-overlap constraint)."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready on %s", engine.url.get_backend_name())
