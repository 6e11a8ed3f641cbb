# tests/conftest.py

"""
Fixtures compartidos: base de datos SQLite en memoria, cliente de la API
y datos mínimos (usuarios, pilotos, carreras).
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("CURRENT_SEASON_YEAR", "2025")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from app.core.dates import utcnow
from app.core.security import create_access_token, hash_password
from app.db.session import Base, get_db
from app.db.models.driver import Driver
from app.db.models.f1_race import F1Race
from app.db.models.user import User

SEASON = 2025

DRIVERS = [
    ("Max Verstappen", "Red Bull Racing", 1),
    ("Lewis Hamilton", "Ferrari", 44),
    ("Charles Leclerc", "Ferrari", 16),
    ("Lando Norris", "McLaren", 4),
    ("Oscar Piastri", "McLaren", 81),
    ("Fernando Alonso", "Aston Martin", 14),
    ("George Russell", "Mercedes", 63),
    ("Zhou Guanyu", "Sauber", 24),
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, name, role="user"):
    user = User(
        email=f"{name.lower().replace(' ', '.')}@finalpoint.com",
        name=name,
        hashed_password=hash_password("secret123"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db):
    return make_user(db, "Admin", role="admin")


@pytest.fixture
def alice(db):
    return make_user(db, "Alice")


@pytest.fixture
def bob(db):
    return make_user(db, "Bob")


@pytest.fixture
def drivers(db):
    """{apellido: Driver}"""
    created = {}
    for name, team, number in DRIVERS:
        driver = Driver(name=name, team=team, driver_number=number)
        db.add(driver)
        created[name.split()[-1]] = driver
    db.commit()
    return created


def make_race(db, week_number, qualifying_in=timedelta(days=2), has_sprint=False):
    qualifying = utcnow() + qualifying_in
    race = F1Race(
        season_year=SEASON,
        week_number=week_number,
        name=f"Gran Premio {week_number}",
        qualifying_datetime=qualifying,
        race_datetime=qualifying + timedelta(days=1),
        has_sprint=has_sprint,
        sprint_qualifying_datetime=qualifying - timedelta(days=1) if has_sprint else None,
    )
    db.add(race)
    db.commit()
    db.refresh(race)
    return race


@pytest.fixture
def open_race(db):
    """Semana 1: la clasificación es dentro de dos días, se aceptan picks."""
    return make_race(db, 1)


@pytest.fixture
def locked_race(db):
    """Semana 2: la clasificación ya empezó."""
    return make_race(db, 2, qualifying_in=-timedelta(hours=1))
