"""
Shared fixtures.

Every test gets its own file-backed SQLite database so that separate
sessions (and threads) really see each other's commits.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import models  # noqa: F401
from database import Base, get_db
from main import app
from models.company import Company
from models.product import Product
from models.users import User
from utils.tokenJWT import create_access_token


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'inventory_test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def _add(db, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def company(db):
    return _add(db, Company(name="Acme Tools"))


@pytest.fixture
def other_company(db):
    return _add(db, Company(name="Globex"))


@pytest.fixture
def user(db, company):
    return _add(db, User(email="owner@acme.com", name="Olivia Owner", external_id="ext-owner", company_id=company.id))


@pytest.fixture
def other_user(db, other_company):
    return _add(db, User(email="hank@globex.com", name="Hank", external_id="ext-hank", company_id=other_company.id))


@pytest.fixture
def make_product(db, company):
    def _make(**values):
        data = {"name": "Widget", "company_id": company.id, "min_stock": 0, "current_stock": 0}
        data.update(values)
        return _add(db, Product(**data))
    return _make


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # Not used as a context manager: the lifespan would touch the real database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build the bearer header the identity provider would hand out."""
    def _headers(sub="ext-owner", email="owner@acme.com", **metadata):
        token = create_access_token({"sub": sub, "email": email, "user_metadata": metadata})
        return {"Authorization": f"Bearer {token}"}
    return _headers
