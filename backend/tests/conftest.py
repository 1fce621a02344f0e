"""
Point the app at a throw-away SQLite file before anything imports
liftlog.db (the engine is built at import time), then create the schema.
"""
import os
import tempfile
import uuid

_tmpdir = tempfile.mkdtemp(prefix="liftlog-tests-")
os.environ["DB_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'liftlog.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest  # noqa: E402

from liftlog.db import Base, SessionLocal, engine  # noqa: E402
from liftlog import models  # noqa: E402,F401
from liftlog.security import create_access_token  # noqa: E402

Base.metadata.create_all(bind=engine)


def new_user_id() -> str:
    return f"user_{uuid.uuid4().hex[:12]}"


def auth_headers(user_id: str, **claims) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id, extra=claims or None)}"}


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_id():
    return new_user_id()
