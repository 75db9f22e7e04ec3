from __future__ import annotations

import logging
from typing import NamedTuple

from app.config.settings import get_settings
from app.db.models.dish import Dish
from app.db.models.draw import Draw
from app.db.repositories.dishes import get_dish, load_pool, lock_group_membership
from app.db.repositories.draws import count_draws_since, create_draw, get_history, has_drawn_dish
from app.db.repositories.groups import can_use_group, get_group
from app.db.repositories.user_stats import lock_user_stats
from app.services.draw_selector import DrawSelector, build_selector
from app.services.errors import (
    DailyLimitReached,
    DrawUnavailable,
    GroupAccessDenied,
    InvalidGroupId,
    ItemVanished,
    NoCandidates,
)
from app.services.user_stats import get_totals, record_activity, start_of_day, today_in_stats_zone

logger = logging.getLogger(__name__)


class DrawOutcome(NamedTuple):
    draw: Draw
    dish: Dish | None
    remaining: int | None


def validate_group_id(group_id: object) -> int:
    if isinstance(group_id, bool) or not isinstance(group_id, int) or group_id <= 0:
        raise InvalidGroupId()
    return group_id


class GachaService:
    def __init__(
        self,
        selector: DrawSelector | None = None,
        retry_attempts: int | None = None,
        daily_limit: int | None = None,
    ) -> None:
        settings = get_settings()
        self.selector = selector or build_selector(settings.draw_policy)
        self.retry_attempts = settings.draw_retry_attempts if retry_attempts is None else retry_attempts
        self.daily_limit = settings.daily_draw_limit if daily_limit is None else daily_limit

    def draw(self, db, user_id: int, group_id: int) -> DrawOutcome:
        group_id = validate_group_id(group_id)

        attempt = 0
        while True:
            try:
                return self._draw_once(db, user_id, group_id)
            except ItemVanished as exc:
                attempt += 1
                if attempt > self.retry_attempts:
                    logger.error(
                        "draw for user %s in group %s failed after %s attempt(s): %s",
                        user_id, group_id, attempt, exc,
                    )
                    raise DrawUnavailable() from exc
                logger.warning(
                    "dish vanished from group %s during draw for user %s, retrying (%s/%s)",
                    group_id, user_id, attempt, self.retry_attempts,
                )

    def _draw_once(self, db, user_id: int, group_id: int) -> DrawOutcome:
        try:
            group = get_group(db, group_id)
            if group is not None and not can_use_group(group, user_id):
                raise GroupAccessDenied()

            # serializes draws of one user: the daily count and the first-time
            # check below must not miss a concurrent draw that has not committed
            lock_user_stats(db, user_id)

            drawn_today = None
            if self.daily_limit is not None:
                drawn_today = count_draws_since(db, user_id, start_of_day(today_in_stats_zone()))
                if drawn_today >= self.daily_limit:
                    raise DailyLimitReached()

            # a missing group is treated as an empty pool
            pool = load_pool(db, group_id) if group is not None else []
            if not pool:
                logger.info("no candidates in group %s for user %s", group_id, user_id)
                raise NoCandidates()

            picked = self.selector.select(pool)

            if not lock_group_membership(db, group_id, picked.dish_id):
                raise ItemVanished(f"dish {picked.dish_id} is no longer in group {group_id}")

            is_new_item = not has_drawn_dish(db, user_id, picked.dish_id)
            draw = create_draw(db, user_id, group_id, picked.dish_id, picked.rarity)
            record_activity(db, user_id, is_draw=True, is_new_item=is_new_item)

            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            "user %s drew dish %s (%s) from group %s",
            user_id, picked.dish_id, picked.rarity, group_id,
        )

        remaining = None
        if self.daily_limit is not None:
            remaining = max(self.daily_limit - drawn_today - 1, 0)

        return DrawOutcome(draw=draw, dish=get_dish(db, picked.dish_id), remaining=remaining)

    def history(self, db, user_id: int) -> list[dict[str, object]]:
        return get_history(db, user_id)

    def stats(self, db, user_id: int, group_id: int | None = None) -> dict[str, object]:
        if group_id is not None:
            group_id = validate_group_id(group_id)
            group = get_group(db, group_id)
            if group is not None and not can_use_group(group, user_id):
                raise GroupAccessDenied()

        return get_totals(db, user_id, group_id)
