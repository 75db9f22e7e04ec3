from decimal import Decimal
from typing import NamedTuple
from sqlalchemy import select
from app.db.enums import Rarity
from app.db.models.dish import Dish
from app.db.models.group import DishGroup, Group


class PoolEntry(NamedTuple):
    dish_id: int
    rarity: Rarity
    rating: Decimal | None = None


def load_pool(db, group_id: int) -> list[PoolEntry]:
    rows = db.execute(
        select(Dish.id, Dish.rarity, Dish.rating)
        .join(DishGroup, DishGroup.dish_id == Dish.id)
        .where(DishGroup.group_id == group_id)
        .order_by(Dish.id)
    ).all()

    return [PoolEntry(dish_id=dish_id, rarity=rarity, rating=rating) for dish_id, rarity, rating in rows]


def lock_group_membership(db, group_id: int, dish_id: int) -> bool:
    # FOR SHARE keeps the membership row alive until the draw commits
    membership_id = db.execute(
        select(DishGroup.id)
        .join(Dish, Dish.id == DishGroup.dish_id)
        .where(DishGroup.group_id == group_id, DishGroup.dish_id == dish_id)
        .with_for_update(read=True, of=DishGroup)
    ).scalar_one_or_none()

    return membership_id is not None


def get_dish(db, dish_id: int):
    return db.execute(select(Dish).where(Dish.id == dish_id)).scalar_one_or_none()


def get_dishes_in_group(db, group_id: int):
    return db.execute(
        select(Dish)
        .join(DishGroup, DishGroup.dish_id == Dish.id)
        .where(DishGroup.group_id == group_id)
        .order_by(Dish.id)
    ).scalars().all()


def get_membership(db, group_id: int, dish_id: int):
    return db.execute(
        select(DishGroup).where(DishGroup.group_id == group_id, DishGroup.dish_id == dish_id)
    ).scalar_one_or_none()


def get_user_dishes(db, user_id: int):
    return db.execute(
        select(Dish)
        .where(Dish.user_id == user_id)
        .order_by(Dish.created_at.desc(), Dish.id.desc())
    ).scalars().all()


def find_duplicate_dish(db, user_id: int, name: str, address: str | None):
    """An owned dish with the same name at the same address, if any."""
    query = select(Dish).where(Dish.user_id == user_id, Dish.name == name)
    if address is None:
        query = query.where(Dish.address.is_(None))
    else:
        query = query.where(Dish.address == address)

    return db.execute(query.order_by(Dish.id).limit(1)).scalar_one_or_none()


def is_dish_in_public_group(db, dish_id: int) -> bool:
    found = db.execute(
        select(DishGroup.id)
        .join(Group, Group.id == DishGroup.group_id)
        .where(DishGroup.dish_id == dish_id, Group.is_public.is_(True))
        .limit(1)
    ).scalar_one_or_none()

    return found is not None
