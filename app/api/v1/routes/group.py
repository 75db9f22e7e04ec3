import logging
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.api.deps import get_db, get_current_user
from app.db.models.group import DishGroup, Group
from app.db.models.user import User
from app.db.repositories.dishes import get_dish, get_dishes_in_group, get_membership
from app.db.repositories.groups import (
    can_use_group,
    get_explore_groups,
    get_group,
    get_user_groups,
    save_group,
    unsave_group,
)
from app.schemas.dish import DishRead
from app.schemas.group import ExploreGroup, GroupCreate, GroupImportResult, GroupListItem, GroupRead, GroupUpdate
from app.services.dish_import import import_group_dishes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["Group"])

def _owned_group(db: Session, group_id: int, user: User) -> Group:
    group = get_group(db, group_id)
    if group is None:
        raise HTTPException(status_code=404, detail="Group not found")
    if group.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized to modify this group")
    return group

def _visible_group(db: Session, group_id: int, user: User) -> Group:
    group = get_group(db, group_id)
    if group is None:
        raise HTTPException(status_code=404, detail="Group not found")
    if not can_use_group(group, user.id):
        raise HTTPException(status_code=403, detail="Not authorized to view this group")
    return group

@router.get("/", response_model=list[GroupListItem])
def list_my_groups(user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    return get_user_groups(db, user.id)

@router.get("/explore", response_model=list[ExploreGroup])
def explore_public_groups(user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    return get_explore_groups(db, user.id)

@router.get("/by-id/{id}", response_model=GroupRead)
def get_group_by_id(id: int, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    return _visible_group(db, id, user)

@router.post("/", response_model=GroupRead)
def create_group(payload: GroupCreate, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    group = Group(user_id=user.id, **payload.model_dump())
    db.add(group)
    db.commit()
    db.refresh(group)
    return group

@router.patch("/{id}", response_model=GroupRead)
def update_group(id: int, payload: GroupUpdate, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    group = _owned_group(db, id, user)

    updates = payload.model_dump(exclude_unset=True)
    for key in ("name", "is_public"):
        if key in updates and updates[key] is None:
            raise HTTPException(status_code=422, detail=f"{key} cannot be null")

    for key, value in updates.items():
        setattr(group, key, value)

    db.commit()
    db.refresh(group)
    return group

@router.delete("/{id}", status_code=204)
def delete_group(id: int, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    group = _owned_group(db, id, user)
    db.delete(group)
    db.commit()
    logger.info("user %s deleted group %s", user.id, id)
    return Response(status_code=204)

@router.get("/{id}/dishes", response_model=list[DishRead])
def list_group_dishes(id: int, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    _visible_group(db, id, user)
    return get_dishes_in_group(db, id)

@router.post("/{id}/dishes/{dish_id}", response_model=list[DishRead])
def add_dish_to_group(id: int, dish_id: int, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    _owned_group(db, id, user)
    dish = get_dish(db, dish_id)
    if dish is None:
        raise HTTPException(status_code=404, detail="Dish not found")
    if dish.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized to use this dish")

    if get_membership(db, id, dish_id) is None:
        db.add(DishGroup(group_id=id, dish_id=dish_id))
        try:
            db.commit()
        except IntegrityError:
            # already added by a concurrent request
            db.rollback()

    return get_dishes_in_group(db, id)

@router.delete("/{id}/dishes/{dish_id}", response_model=list[DishRead])
def remove_dish_from_group(id: int, dish_id: int, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    _owned_group(db, id, user)
    membership = get_membership(db, id, dish_id)
    if membership is None:
        raise HTTPException(status_code=404, detail="Dish is not in this group")

    db.delete(membership)
    db.commit()
    return get_dishes_in_group(db, id)

@router.post("/{id}/save", status_code=204)
def save_public_group(id: int, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    group = _visible_group(db, id, user)
    if group.user_id == user.id:
        raise HTTPException(status_code=400, detail="Cannot save your own group")

    save_group(db, user.id, id)
    db.commit()
    return Response(status_code=204)

@router.delete("/{id}/save", status_code=204)
def unsave_public_group(id: int, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    unsave_group(db, user.id, id)
    db.commit()
    return Response(status_code=204)

@router.post("/{id}/import", response_model=GroupImportResult)
def import_group(id: int, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    _visible_group(db, id, user)
    result = import_group_dishes(db, user.id, id)
    db.commit()
    return GroupImportResult(imported=result.imported, skipped=result.skipped)
