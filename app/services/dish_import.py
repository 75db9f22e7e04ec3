from __future__ import annotations

import logging
from typing import NamedTuple

from app.db.models.dish import Dish
from app.db.repositories.dishes import find_duplicate_dish, get_dishes_in_group

logger = logging.getLogger(__name__)


class ImportedDish(NamedTuple):
    dish: Dish
    is_new: bool


class GroupImport(NamedTuple):
    imported: int
    skipped: int


def copy_dish(db, user_id: int, source: Dish) -> ImportedDish:
    """Copy ``source`` into the user's own dishes.

    A dish the user already has with the same name and address is returned
    as is. The copy keeps the stored rarity instead of classifying again.
    Flushes but does not commit.
    """
    existing = find_duplicate_dish(db, user_id, source.name, source.address)
    if existing is not None:
        logger.debug("user %s already has dish %s as %s", user_id, source.id, existing.id)
        return ImportedDish(dish=existing, is_new=False)

    dish = Dish(
        user_id=user_id,
        name=source.name,
        description=source.description,
        image_url=source.image_url,
        address=source.address,
        rating=source.rating,
        rarity=source.rarity,
    )
    db.add(dish)
    db.flush()
    return ImportedDish(dish=dish, is_new=True)


def import_group_dishes(db, user_id: int, group_id: int) -> GroupImport:
    imported = skipped = 0
    for source in get_dishes_in_group(db, group_id):
        if copy_dish(db, user_id, source).is_new:
            imported += 1
        else:
            skipped += 1

    logger.info("user %s imported %s dish(es) from group %s, %s skipped", user_id, imported, group_id, skipped)
    return GroupImport(imported=imported, skipped=skipped)
