# tests/conftest.py
import os

# database.session 이 import 시점에 URL 을 검사하므로 먼저 설정
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import database.base  # noqa: F401
from crud.account.user import create_user
from database.session import build_engine, get_db
from main import app
from models.base import Base
from models.marketing.campaign import Campaign
from models.marketing.client import Client


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def api(session_factory):
    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _auth(user) -> dict:
    return {"Authorization": f"Bearer dev-access-{user.id}"}


@pytest.fixture()
def users(db):
    admin = create_user(db, email="admin@example.com", password="admin-pw", role="admin")
    manager = create_user(db, email="manager@example.com", password="manager-pw", role="manager")
    member = create_user(db, email="member@example.com", password="member-pw", role="member")
    return {"admin": admin, "manager": manager, "member": member}


@pytest.fixture()
def manager_headers(users):
    return _auth(users["manager"])


@pytest.fixture()
def member_headers(users):
    return _auth(users["member"])


@pytest.fixture()
def admin_headers(users):
    return _auth(users["admin"])


@pytest.fixture()
def seed(db):
    """클라이언트 2 / 캠페인 3."""
    acme = Client(name="Acme", manager="Sato", business_division="第一事業部", priority=1)
    beta = Client(name="Beta", manager="Suzuki", business_division="第二事業部", priority=2)
    db.add_all([acme, beta])
    db.flush()

    spring = Campaign(
        client_id=acme.id, name="Spring Sale", total_budget=Decimal("500000"),
        start_year=2024, start_month=1,
    )
    brand = Campaign(
        client_id=acme.id, name="Brand Lift", total_budget=Decimal("300000"),
        start_year=2023, start_month=4, end_year=2023, end_month=12,
    )
    launch = Campaign(
        client_id=beta.id, name="App Launch", total_budget=Decimal("0"),
        start_year=2024, start_month=1,
    )
    db.add_all([spring, brand, launch])
    db.commit()
    return {
        "acme": acme.id,
        "beta": beta.id,
        "spring": spring.id,
        "brand": brand.id,
        "launch": launch.id,
    }
