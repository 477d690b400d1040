import os

# The module-level app in main.py must never open a database file during tests
os.environ["USE_IN_MEMORY_DB"] = "true"

import pytest
from fastapi.testclient import TestClient

from bootstrap import in_memory_repositories, sql_repositories
from config import Settings
from tests.fakes import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(params=["memory", "sql"])
def repos(request, clock):
    """Both storage backends behind the same contract."""
    if request.param == "memory":
        r = in_memory_repositories(clock)
    else:
        r = sql_repositories("sqlite://", clock)
    yield r
    r.close()


@pytest.fixture
def client(repos, clock):
    from main import create_app

    app = create_app(Settings(USE_IN_MEMORY_DB=True, LOG_LEVEL="WARNING"), repositories=repos, clock=clock)
    with TestClient(app) as c:
        yield c
