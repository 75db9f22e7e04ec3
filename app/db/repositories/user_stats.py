from datetime import date
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from app.db.models.user_stats import UserStats


def ensure_user_stats(db, user_id: int) -> None:
    exists = db.execute(
        select(UserStats.user_id).where(UserStats.user_id == user_id)
    ).scalar_one_or_none()
    if exists is not None:
        return

    # a concurrent request may create the row first; the savepoint keeps
    # the surrounding transaction usable when that happens
    try:
        with db.begin_nested():
            db.add(UserStats(
                user_id=user_id,
                total_draws=0,
                current_streak=0,
                total_login_days=0,
                last_active_date=None,
                unique_items_count=0,
            ))
    except IntegrityError:
        pass


def lock_user_stats(db, user_id: int) -> UserStats:
    """Create the user's stats row if needed and hold it ``FOR UPDATE``.

    Every read that decides what a draw writes (first time seen, draws left
    today) has to come after this lock so two draws of one user serialize.
    """
    ensure_user_stats(db, user_id)
    return db.execute(
        select(UserStats)
        .where(UserStats.user_id == user_id)
        .with_for_update()
    ).scalar_one()


def get_last_active(db, user_id: int) -> tuple[date | None, int]:
    last_active_date, current_streak = db.execute(
        select(UserStats.last_active_date, UserStats.current_streak)
        .where(UserStats.user_id == user_id)
    ).one()

    return last_active_date, current_streak


def increment_counters(db, user_id: int, draws: int = 0, unique_items: int = 0) -> None:
    if not draws and not unique_items:
        return

    db.execute(
        update(UserStats)
        .where(UserStats.user_id == user_id)
        .values(
            total_draws=UserStats.total_draws + draws,
            unique_items_count=UserStats.unique_items_count + unique_items,
        )
        .execution_options(synchronize_session=False)
    )


def roll_active_day(db, user_id: int, seen_last_active: date | None, today: date, new_streak: int) -> bool:
    """Move ``last_active_date`` to ``today`` if nobody else did it first.

    The update only matches while the row still holds the date that was read,
    so two requests racing over the same day boundary count it once.
    """
    query = update(UserStats).where(UserStats.user_id == user_id)
    if seen_last_active is None:
        query = query.where(UserStats.last_active_date.is_(None))
    else:
        query = query.where(UserStats.last_active_date == seen_last_active)

    result = db.execute(
        query
        .values(
            last_active_date=today,
            current_streak=new_streak,
            total_login_days=UserStats.total_login_days + 1,
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def get_user_stats(db, user_id: int, refresh: bool = False):
    return db.get(UserStats, user_id, populate_existing=refresh)
