from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.core.config import settings


def _engine_options(uri: str) -> dict:
    if uri.startswith("sqlite"):
        # one shared connection so an in-memory database survives across sessions
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    **_engine_options(settings.SQLALCHEMY_DATABASE_URI),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
