from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.core.config import settings


class Base(DeclarativeBase):
    pass


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "connect_args": {"sslmode": settings.database_sslmode},
        "pool_pre_ping": True,
        "pool_recycle": 1800,
    }


engine = create_engine(settings.database_url, echo=settings.sql_echo, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    except Exception:
        # routes own the transaction; anything left pending is discarded
        db.rollback()
        raise
    finally:
        db.close()
