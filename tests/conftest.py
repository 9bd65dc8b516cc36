import os

# Must be set before the application modules read their settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_REQUESTS"] = "1000"
os.environ["ALLOWED_ORIGINS"] = '["http://testserver"]'

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from clinica.main import app
from clinica.core.database import get_db, get_redis, Base
from clinica.core.security import UserRole, create_access_token, get_password_hash
from clinica.models.cita import Cita, CitaEstado
from clinica.models.user import User

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "secret123"

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)

@pytest.fixture
def client(test_db, fake_redis):
    app.dependency_overrides[get_redis] = lambda: fake_redis
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.pop(get_redis, None)

@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def create_user(db_session):
    """Insert a user straight into the store, with any role."""
    def _create_user(username, role=UserRole.USER, full_name=None, password=DEFAULT_PASSWORD):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=get_password_hash(password),
            full_name=full_name or username.title(),
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _create_user

@pytest.fixture
def create_cita(db_session):
    def _create_cita(paciente, medico, fecha_hora, estado=CitaEstado.PENDIENTE, motivo="Consulta"):
        cita = Cita(
            paciente_id=paciente.id,
            medico_id=medico.id,
            fecha_hora=fecha_hora,
            motivo=motivo,
            estado=estado,
        )
        db_session.add(cita)
        db_session.commit()
        db_session.refresh(cita)
        return cita
    return _create_cita

def auth_headers(user):
    """Authorization header with a freshly issued token for ``user``."""
    token = create_access_token(user.id, user.role)
    return {"Authorization": f"Bearer {token}"}
