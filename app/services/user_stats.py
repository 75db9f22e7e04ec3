from __future__ import annotations

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import NamedTuple
from zoneinfo import ZoneInfo

from app.config.settings import get_settings
from app.db.repositories.user_stats import (
    ensure_user_stats,
    get_last_active,
    get_user_stats,
    increment_counters,
    roll_active_day,
)
from app.db.repositories.draws import count_draws, get_most_frequent_dish

logger = logging.getLogger(__name__)


class StreakUpdate(NamedTuple):
    streak: int
    new_day: bool


def stats_zone(name: str | None = None) -> tzinfo:
    name = name or get_settings().stats_timezone
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def today_in_stats_zone(now: datetime | None = None) -> date:
    zone = stats_zone()
    if now is None:
        return datetime.now(zone).date()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(zone).date()


def start_of_day(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=stats_zone()).astimezone(timezone.utc)


def next_streak(last_active: date | None, today: date, current_streak: int) -> StreakUpdate:
    if last_active is None:
        return StreakUpdate(streak=1, new_day=True)
    if last_active == today:
        return StreakUpdate(streak=current_streak, new_day=False)
    if (today - last_active).days == 1:
        return StreakUpdate(streak=current_streak + 1, new_day=True)
    # a gap, or a clock that moved backwards
    return StreakUpdate(streak=1, new_day=True)


def record_activity(db, user_id: int, is_draw: bool = False, is_new_item: bool = False, today: date | None = None):
    """Apply one login or draw to the user's engagement row.

    Counters move on every call. Streak and login days move at most once
    per calendar day of the configured stats zone. Runs inside the caller's
    transaction; nothing is committed here.
    """
    today = today or today_in_stats_zone()

    ensure_user_stats(db, user_id)
    increment_counters(db, user_id, draws=int(is_draw), unique_items=int(is_new_item))

    last_active, current_streak = get_last_active(db, user_id)
    rollover = next_streak(last_active, today, current_streak)
    if rollover.new_day:
        rolled = roll_active_day(db, user_id, last_active, today, rollover.streak)
        if rolled:
            logger.debug("user %s active on %s, streak %s", user_id, today, rollover.streak)
        else:
            logger.debug("user %s day %s already rolled by a concurrent request", user_id, today)

    return get_user_stats(db, user_id, refresh=True)


def get_engagement(db, user_id: int) -> dict[str, object]:
    stats = get_user_stats(db, user_id)
    if stats is None:
        return {
            "total_draws": 0,
            "current_streak": 0,
            "total_login_days": 0,
            "last_active_date": None,
            "unique_items_count": 0,
        }

    return {
        "total_draws": stats.total_draws,
        "current_streak": stats.current_streak,
        "total_login_days": stats.total_login_days,
        "last_active_date": stats.last_active_date,
        "unique_items_count": stats.unique_items_count,
    }


def get_totals(db, user_id: int, group_id: int | None = None) -> dict[str, object]:
    return {
        "total_draws": count_draws(db, user_id, group_id),
        "most_frequent": get_most_frequent_dish(db, user_id, group_id),
    }
