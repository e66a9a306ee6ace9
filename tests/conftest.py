import pytest
from fastapi.testclient import TestClient

from portal.auth.sessions import sessions
from portal.database import SessionLocal
from portal.fixtures import reset_database
from portal.main import app

SEED_CREDENTIALS = {
    'student': ('22111234', 'pass123'),
    'admin': ('admin001', 'adminpass'),
    'librarian': ('lib001', 'libpass'),
    'teacher': ('teacher101', 'teachpass'),
}


@pytest.fixture(autouse=True)
def fresh_store():
    reset_database()
    sessions.clear()
    yield
    sessions.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def login_as(client: TestClient):
    def _login_as(role: str):
        roll, password = SEED_CREDENTIALS[role]
        return client.post('/login', data={'roll': roll, 'password': password}, follow_redirects=False)

    return _login_as
