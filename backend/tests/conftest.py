import os
import tempfile

import pytest

_tmpdir = tempfile.mkdtemp(prefix="dashboard-tests-")
os.environ["DASHBOARD_DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"

from dashboard.db import Base, engine, SessionLocal  # noqa: E402
from dashboard.schemas import ProjectRecord  # noqa: E402


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        yield session


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient
    from dashboard.main import app
    return TestClient(app)


@pytest.fixture
def make_project():
    def _make(code="PRJ-X", completion=0.0, allocated=0.0, consumed=0.0, rag="Green", **extra):
        return ProjectRecord(
            project_code=code,
            completion_percentage=completion,
            hours_allocated=allocated,
            hours_consumed=consumed,
            rag_status=rag,
            **extra,
        )
    return _make
