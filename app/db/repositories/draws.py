from datetime import datetime
from sqlalchemy import select, func
from app.db.enums import Rarity
from app.db.models.draw import Draw
from app.db.models.dish import Dish
from app.db.models.group import Group


def create_draw(db, user_id: int, group_id: int, dish_id: int, rarity: Rarity) -> Draw:
    draw = Draw(user_id=user_id, group_id=group_id, dish_id=dish_id, rarity=rarity)
    db.add(draw)
    db.flush()
    return draw


def has_drawn_dish(db, user_id: int, dish_id: int) -> bool:
    existing = db.execute(
        select(Draw.id)
        .where(Draw.user_id == user_id, Draw.dish_id == dish_id)
        .limit(1)
    ).scalar_one_or_none()

    return existing is not None


def count_draws_since(db, user_id: int, since: datetime) -> int:
    return db.execute(
        select(func.count(Draw.id))
        .where(Draw.user_id == user_id, Draw.created_at >= since)
    ).scalar_one()


def count_draws(db, user_id: int, group_id: int | None = None) -> int:
    query = select(func.count(Draw.id)).where(Draw.user_id == user_id)
    if group_id is not None:
        query = query.where(Draw.group_id == group_id)

    return db.execute(query).scalar_one()


def get_most_frequent_dish(db, user_id: int, group_id: int | None = None):
    draw_count = func.count(Draw.id).label("draw_count")
    query = (
        select(Draw.dish_id, draw_count)
        .where(Draw.user_id == user_id, Draw.dish_id.is_not(None))
        .group_by(Draw.dish_id)
        # lowest dish id wins a tie
        .order_by(draw_count.desc(), Draw.dish_id.asc())
        .limit(1)
    )
    if group_id is not None:
        query = query.where(Draw.group_id == group_id)

    row = db.execute(query).one_or_none()
    if row is None:
        return None

    dish_id, count = row
    dish = db.execute(
        select(Dish.name, Dish.image_url, Dish.rarity).where(Dish.id == dish_id)
    ).one_or_none()
    name, image_url, rarity = dish if dish is not None else (None, None, None)

    return {
        "dish_id": dish_id,
        "name": name,
        "image_url": image_url,
        "rarity": rarity,
        "draw_count": int(count),
    }


def get_history(db, user_id: int):
    rows = db.execute(
        select(
            Draw.id,
            Draw.created_at,
            Draw.dish_id,
            Dish.name,
            Dish.image_url,
            Draw.rarity,
            Draw.group_id,
            Group.name,
        )
        .outerjoin(Dish, Dish.id == Draw.dish_id)
        .outerjoin(Group, Group.id == Draw.group_id)
        .where(Draw.user_id == user_id)
        .order_by(Draw.created_at.desc(), Draw.id.desc())
    ).all()

    return [
        {
            "draw_id": draw_id,
            "created_at": created_at,
            "dish_id": dish_id,
            "dish_name": dish_name,
            "image_url": image_url,
            "rarity": rarity,
            "group_id": group_id,
            "group_name": group_name,
        }
        for (
            draw_id,
            created_at,
            dish_id,
            dish_name,
            image_url,
            rarity,
            group_id,
            group_name,
        ) in rows
    ]
