from functools import lru_cache
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session
from app.db.session import SessionLocal
from app.db.models.user import User
from app.services.gacha import GachaService

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_current_user(
    x_user_id: int | None = Header(None, alias="X-User-Id"),
    db: Session=Depends(get_db),
) -> User:
    # authentication lives upstream; it forwards the resolved user id
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Not authorized, no user id")

    user = db.get(User, x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Not authorized, unknown user")
    return user

@lru_cache
def get_gacha_service() -> GachaService:
    return GachaService()
