import logging
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from app.api.deps import get_db, get_current_user
from app.db.models.dish import Dish
from app.db.models.user import User
from app.db.repositories.dishes import get_dish, get_user_dishes, is_dish_in_public_group
from app.schemas.dish import DishCreate, DishImportResult, DishRead, DishUpdate
from app.services.dish_import import copy_dish
from app.services.rarity import classify_rarity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dishes", tags=["Dish"])

def _owned_dish(db: Session, dish_id: int, user: User) -> Dish:
    dish = get_dish(db, dish_id)
    if dish is None:
        raise HTTPException(status_code=404, detail="Dish not found")
    if dish.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized to modify this dish")
    return dish

@router.get("/", response_model=list[DishRead])
def list_my_dishes(user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    return get_user_dishes(db, user.id)

@router.get("/by-id/{id}", response_model=DishRead)
def get_dish_by_id(id: int, db: Session=Depends(get_db)):
    dish = get_dish(db, id)
    if dish is None:
        raise HTTPException(status_code=404, detail="Dish not found")
    return dish

@router.post("/", response_model=DishRead)
def create_dish(payload: DishCreate, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    values = payload.model_dump()
    if values["rarity"] is None:
        values["rarity"] = classify_rarity(payload.rating)

    dish = Dish(user_id=user.id, **values)
    db.add(dish)
    db.commit()
    db.refresh(dish)
    logger.info("user %s created dish %s as %s", user.id, dish.id, dish.rarity)
    return dish

@router.patch("/{id}", response_model=DishRead)
def update_dish(id: int, payload: DishUpdate, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    dish = _owned_dish(db, id, user)

    updates = payload.model_dump(exclude_unset=True)
    recompute = updates.pop("recompute_rarity", False)
    if "name" in updates and updates["name"] is None:
        raise HTTPException(status_code=422, detail="name cannot be null")
    if "rarity" in updates and updates["rarity"] is None:
        # clearing the tier means deriving it again from the rating
        del updates["rarity"]
        recompute = True

    for key, value in updates.items():
        setattr(dish, key, value)

    # the stored tier stays authoritative unless the caller asks for a recompute
    if (recompute and "rarity" not in updates) or dish.rarity is None:
        dish.rarity = classify_rarity(dish.rating)

    db.commit()
    db.refresh(dish)
    return dish

@router.delete("/{id}", status_code=204)
def delete_dish(id: int, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    dish = _owned_dish(db, id, user)
    db.delete(dish)
    db.commit()
    logger.info("user %s deleted dish %s", user.id, id)
    return Response(status_code=204)

@router.post("/{id}/import", response_model=DishImportResult)
def import_dish(id: int, response: Response, user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    source = get_dish(db, id)
    if source is None:
        raise HTTPException(status_code=404, detail="Source dish not found")
    # only dishes shared through a public group can be copied
    if source.user_id != user.id and not is_dish_in_public_group(db, source.id):
        raise HTTPException(status_code=403, detail="Not authorized to import this dish")

    result = copy_dish(db, user.id, source)
    db.commit()
    db.refresh(result.dish)
    if result.is_new:
        response.status_code = 201
        logger.info("user %s imported dish %s as %s", user.id, id, result.dish.id)
    return DishImportResult(dish=DishRead.model_validate(result.dish), is_new=result.is_new)
