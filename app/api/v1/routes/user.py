import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
from app.api.deps import get_db, get_current_user
from app.db.models.user import User
from app.db.models.user_stats import UserStats
from app.schemas.user import UserCreate, UserRead, UserStatsRead
from app.services.user_stats import get_engagement, record_activity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["User"])

@router.get("/by-id/{id}", response_model=UserRead)
def get_user(id: int, db: Session=Depends(get_db)):
    user = db.execute(select(User).where(User.id == id)).scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.post("/", response_model=UserRead)
def create_user(payload: UserCreate, db: Session=Depends(get_db)):
    existing = db.execute(
        select(User).where(User.username == payload.username)
    ).scalar_one_or_none()

    if existing:
        raise HTTPException(status_code=409, detail="User already exists")

    user = User(**payload.model_dump())
    db.add(user)
    db.flush()
    db.add(UserStats(user_id=user.id, total_draws=0, current_streak=0, total_login_days=0, unique_items_count=0))

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="User already exists")

    db.refresh(user)
    logger.info("created user %s (%s)", user.id, user.username)
    return user

@router.post("/me/activity", response_model=UserStatsRead)
def record_login(user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    try:
        stats = record_activity(db, user.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(stats)
    return stats

@router.get("/me/stats", response_model=UserStatsRead)
def get_my_stats(user: User=Depends(get_current_user), db: Session=Depends(get_db)):
    return get_engagement(db, user.id)
