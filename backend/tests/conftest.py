import os
import tempfile

# Point the app at a throwaway database before anything imports it
_tmp_dir = tempfile.mkdtemp(prefix="triage-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'emails.db')}"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture(autouse=True)
def _clean_app_db():
    from backend.app.db.database import SessionLocal, ensure_schema
    from backend.app.models.kv_model import KvEntry
    ensure_schema()
    db = SessionLocal()
    try:
        db.query(KvEntry).delete()
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture
def store():
    from backend.app.db.database import ensure_schema
    from backend.app.services.kv_store import KVStore
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    ensure_schema(engine)
    session = sessionmaker(bind=engine)()
    try:
        yield KVStore(session)
    finally:
        session.close()
        engine.dispose()
