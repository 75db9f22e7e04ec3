import os
import random
import re
import threading
import time

import pytest
from sqlalchemy import create_engine, event, func, select
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
from app.db.enums import DrawPolicy
from app.db.models.draw import Draw
from app.services.draw_selector import WeightedItemSelector
from app.services.errors import DailyLimitReached
from app.services.gacha import GachaService
from app.services.user_stats import get_engagement
from conftest import make_dish, make_group, make_user


POSTGRES_URL = os.getenv("TEST_POSTGRES_URL")

requires_postgres = pytest.mark.skipif(
    not POSTGRES_URL,
    reason="row locks need PostgreSQL; set TEST_POSTGRES_URL to run",
)


class HoldingSelector:
    """Picks the first dish, parking the first draw until ``release`` is set."""

    policy = DrawPolicy.WEIGHTED_ITEM

    def __init__(self) -> None:
        self.selected = threading.Event()
        self.release = threading.Event()

    def select(self, pool):
        if not self.selected.is_set():
            self.selected.set()
            self.release.wait(10)
        return pool[0]


class FirstDishSelector:
    policy = DrawPolicy.WEIGHTED_ITEM

    def select(self, pool):
        return pool[0]


def captured_statements(engine) -> list[str]:
    statements: list[str] = []

    @event.listens_for(engine, "before_cursor_execute")
    def _capture(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    return statements


def first_index(statements: list[str], pattern: str) -> int:
    regex = re.compile(pattern, re.IGNORECASE)
    return next(i for i, statement in enumerate(statements) if regex.search(statement))


@pytest.mark.parametrize("daily_limit", [0, 5])
def test_user_row_is_locked_before_draws_are_read(engine, db, daily_limit):
    user = make_user(db, "lena")
    dish = make_dish(db, user, "tteokbokki")
    group = make_group(db, user, "snacks", [dish])
    service = GachaService(
        selector=WeightedItemSelector(rng=random.Random(3)),
        retry_attempts=0,
        daily_limit=daily_limit or None,
    )

    statements = captured_statements(engine)
    service.draw(db, user.id, group.id)

    assert first_index(statements, r"\bFROM user_stats\b") < first_index(statements, r"\bFROM draws\b")


@pytest.fixture
def pg_session_factory():
    engine = create_engine(POSTGRES_URL)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


def run_in_thread(factory, service, user_id, group_id, outcomes, failures) -> threading.Thread:
    def _draw():
        session = factory()
        try:
            outcomes.append(service.draw(session, user_id, group_id))
        except Exception as exc:
            failures.append(exc)
        finally:
            session.close()

    thread = threading.Thread(target=_draw)
    thread.start()
    return thread


def race_two_draws(factory, daily_limit=None):
    with factory() as setup:
        user = make_user(setup, "mika")
        dish = make_dish(setup, user, "ramen")
        group = make_group(setup, user, "noodles", [dish])
        user_id, group_id = user.id, group.id

    holding = HoldingSelector()
    first = GachaService(selector=holding, retry_attempts=0, daily_limit=daily_limit)
    second = GachaService(selector=FirstDishSelector(), retry_attempts=0, daily_limit=daily_limit)
    outcomes, failures = [], []

    first_thread = run_in_thread(factory, first, user_id, group_id, outcomes, failures)
    assert holding.selected.wait(10)
    second_thread = run_in_thread(factory, second, user_id, group_id, outcomes, failures)

    time.sleep(0.5)
    # the second draw waits on the first one's lock of the stats row
    assert second_thread.is_alive()

    holding.release.set()
    first_thread.join(10)
    second_thread.join(10)
    return user_id, outcomes, failures


@requires_postgres
def test_concurrent_draws_of_a_new_dish_count_it_once(pg_session_factory):
    user_id, outcomes, failures = race_two_draws(pg_session_factory)

    assert failures == []
    assert len(outcomes) == 2
    with pg_session_factory() as session:
        engagement = get_engagement(session, user_id)
    assert engagement["total_draws"] == 2
    assert engagement["unique_items_count"] == 1


@requires_postgres
def test_concurrent_draws_respect_daily_limit(pg_session_factory):
    user_id, outcomes, failures = race_two_draws(pg_session_factory, daily_limit=1)

    assert len(outcomes) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], DailyLimitReached)
    with pg_session_factory() as session:
        assert session.execute(select(func.count(Draw.id))).scalar_one() == 1
