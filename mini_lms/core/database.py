from contextlib import contextmanager
from typing import Iterator
import logging

from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker, Session

from mini_lms.core.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """
    Dependency to get a database session.
    Ensures the database session is always closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Commits everything written inside the block, or rolls all of it back.
    One block is one logical operation: callers never commit halfway.
    """
    try:
        yield db
        db.commit()
    except Exception:
        logger.warning("Rolling back transaction after error.", exc_info=True)
        db.rollback()
        raise


def create_db_and_tables():
    # Models must be imported so they are registered on Base.metadata
    import mini_lms.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
