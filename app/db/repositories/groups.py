from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from app.db.models.group import DishGroup, Group, SavedGroup
from app.db.models.user import User


def get_group(db, group_id: int):
    return db.execute(select(Group).where(Group.id == group_id)).scalar_one_or_none()


def can_use_group(group: Group, user_id: int) -> bool:
    return group.user_id == user_id or group.is_public


def _group_fields(group: Group) -> dict[str, object]:
    return {
        "id": group.id,
        "user_id": group.user_id,
        "name": group.name,
        "description": group.description,
        "is_public": group.is_public,
        "created_at": group.created_at,
    }


def _saved_by(user_id: int):
    return and_(SavedGroup.group_id == Group.id, SavedGroup.user_id == user_id)


def get_user_groups(db, user_id: int):
    """Groups the user owns plus the ones they saved, newest first."""
    rows = db.execute(
        select(Group, SavedGroup.id)
        .outerjoin(SavedGroup, _saved_by(user_id))
        .where(or_(Group.user_id == user_id, SavedGroup.id.is_not(None)))
        .order_by(Group.created_at.desc(), Group.id.desc())
    ).all()

    return [
        {**_group_fields(group), "is_owner": group.user_id == user_id, "is_saved": saved_id is not None}
        for group, saved_id in rows
    ]


def get_explore_groups(db, user_id: int):
    save_count = (
        select(func.count(SavedGroup.id))
        .where(SavedGroup.group_id == Group.id)
        .correlate(Group)
        .scalar_subquery()
    )
    dish_count = (
        select(func.count(DishGroup.id))
        .where(DishGroup.group_id == Group.id)
        .correlate(Group)
        .scalar_subquery()
    )
    rows = db.execute(
        select(Group, User.display_name, User.username, SavedGroup.id, save_count, dish_count)
        .join(User, User.id == Group.user_id)
        .outerjoin(SavedGroup, _saved_by(user_id))
        .where(Group.is_public.is_(True))
        .order_by(Group.created_at.desc(), Group.id.desc())
    ).all()

    return [
        {
            **_group_fields(group),
            "owner_name": display_name or username,
            "is_owner": group.user_id == user_id,
            "is_saved": saved_id is not None,
            "save_count": int(saves),
            "dish_count": int(dishes),
        }
        for group, display_name, username, saved_id, saves, dishes in rows
    ]


def save_group(db, user_id: int, group_id: int) -> None:
    exists = db.execute(
        select(SavedGroup.id).where(SavedGroup.user_id == user_id, SavedGroup.group_id == group_id)
    ).scalar_one_or_none()
    if exists is not None:
        return

    try:
        with db.begin_nested():
            db.add(SavedGroup(user_id=user_id, group_id=group_id))
    except IntegrityError:
        # saved by a concurrent request
        pass


def unsave_group(db, user_id: int, group_id: int) -> None:
    saved = db.execute(
        select(SavedGroup).where(SavedGroup.user_id == user_id, SavedGroup.group_id == group_id)
    ).scalar_one_or_none()
    if saved is not None:
        db.delete(saved)
