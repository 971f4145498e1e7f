import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.database.connection import Base, build_engine, get_db, get_session_factory
from app.main import app


@pytest.fixture
def session_factory(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    def _register(email="ada@example.com", name="Ada Lovelace", password="secret123"):
        response = client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
def auth_headers(register_user):
    data = register_user()
    return {"Authorization": f"Bearer {data['accessToken']}"}


@pytest.fixture
def other_auth_headers(register_user):
    data = register_user(email="grace@example.com", name="Grace Hopper")
    return {"Authorization": f"Bearer {data['accessToken']}"}
