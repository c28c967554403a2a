import os

# Settings are read at import time; keep the app off any real database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mini_lms.core.database import Base
from mini_lms.models.enums import UserRole
from mini_lms.services import email_service

from tests.factories import make_course, make_user


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite needs these for SAVEPOINT (begin_nested) to behave
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Captures outgoing mail instead of talking to SMTP."""
    outbox = []

    def fake_send_email(to_email, subject, html_content):
        outbox.append({"to": to_email, "subject": subject, "html": html_content})
        return True

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return outbox


@pytest.fixture
def admin(db):
    return make_user(db, "admin", UserRole.ADMIN)

@pytest.fixture
def trainer(db):
    return make_user(db, "trainer", UserRole.TRAINER)

@pytest.fixture
def other_trainer(db):
    return make_user(db, "other_trainer", UserRole.TRAINER)

@pytest.fixture
def learner(db):
    return make_user(db, "learner", UserRole.LEARNER)

@pytest.fixture
def learner2(db):
    return make_user(db, "learner2", UserRole.LEARNER)

@pytest.fixture
def course(db, trainer):
    return make_course(db, trainer)
