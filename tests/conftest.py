import os

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

import random
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.deps import get_db, get_gacha_service
from app.db.base import Base
from app.db.enums import Rarity
from app.db.models.dish import Dish
from app.db.models.group import DishGroup, Group
from app.db.models.user import User
from app.db.models.user_stats import UserStats
from app.db.models import draw  # noqa: F401
from app.services.draw_selector import WeightedItemSelector
from app.services.gacha import GachaService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # let SQLAlchemy emit BEGIN itself so SAVEPOINTs behave on pysqlite
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def gacha_service():
    return GachaService(selector=WeightedItemSelector(rng=random.Random(1234)), retry_attempts=1, daily_limit=None)


@pytest.fixture
def client(session_factory, gacha_service):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gacha_service] = lambda: gacha_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, username: str) -> User:
    user = User(username=username, display_name=username.title())
    db.add(user)
    db.flush()
    db.add(UserStats(user_id=user.id, total_draws=0, current_streak=0, total_login_days=0, unique_items_count=0))
    db.commit()
    return user


def make_dish(db, owner: User, name: str, rarity: Rarity = Rarity.COMMON, rating: str | None = None) -> Dish:
    dish = Dish(
        user_id=owner.id,
        name=name,
        rarity=rarity,
        rating=Decimal(rating) if rating is not None else None,
        image_url=f"https://img.example/{name}.jpg",
    )
    db.add(dish)
    db.commit()
    return dish


def make_group(db, owner: User, name: str, dishes: list[Dish] = (), is_public: bool = False) -> Group:
    group = Group(user_id=owner.id, name=name, is_public=is_public)
    db.add(group)
    db.flush()
    for dish in dishes:
        db.add(DishGroup(dish_id=dish.id, group_id=group.id))
    db.commit()
    return group
