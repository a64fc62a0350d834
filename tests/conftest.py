import os
import sys
import tempfile
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# Config de test AVANT d'importer app (lue à l'import)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ["DATABASE_URL"] = SQLALCHEMY_TEST_DATABASE_URL
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="wiki-uploads-"))

import pytest
from sqlalchemy.orm import sessionmaker

import app.core.database
from app.core.database import Base, get_db, make_engine

test_engine = make_engine(SQLALCHEMY_TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# PATCH: main.py crée les tables et l'admin initial sur ce engine
app.core.database.engine = test_engine
app.core.database.SessionLocal = TestingSessionLocal

from app.core.security import create_access_token
from app.main import app
from app.models.user import User

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    # Nettoie avant le test
    Base.metadata.drop_all(bind=test_engine)
    # Crée les tables
    Base.metadata.create_all(bind=test_engine)
    yield
    # Nettoie après le test
    Base.metadata.drop_all(bind=test_engine)

# Override la dépendance
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def client():
    """Client de test FastAPI"""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = TestingSessionLocal()
    yield db
    db.close()


def headers_for(user: User) -> dict:
    token = create_access_token(user.id, user.username, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user():
    """Fabrique d'utilisateurs : make_user("alice", role="documentaliste")"""
    def _make(username: str, role: str = "user", password: str = "password123") -> User:
        db = TestingSessionLocal()
        user = User(username=username, role=role)
        user.set_password(password)
        db.add(user)
        db.commit()
        db.refresh(user)
        db.close()
        return user
    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user("admin", role="admin")


@pytest.fixture
def doc_user(make_user):
    return make_user("doc", role="documentaliste")


@pytest.fixture
def basic_user(make_user):
    return make_user("lecteur", role="user")


@pytest.fixture
def admin_headers(admin_user):
    return headers_for(admin_user)


@pytest.fixture
def doc_headers(doc_user):
    return headers_for(doc_user)


@pytest.fixture
def user_headers(basic_user):
    return headers_for(basic_user)


@pytest.fixture
def other_headers(make_user):
    """Un second utilisateur simple, qui n'a créé aucune page"""
    return headers_for(make_user("autre", role="user"))
