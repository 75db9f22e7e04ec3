from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.api.deps import get_db, get_current_user, get_gacha_service
from app.db.models.user import User
from app.schemas.dish import DishRead
from app.schemas.gacha import DrawRequest, DrawResult, DrawStats, HistoryEntry
from app.services.errors import GachaError
from app.services.gacha import GachaService

router = APIRouter(prefix="/gacha", tags=["Gacha"])

def _http_error(exc: GachaError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_detail())

@router.post("/draw", response_model=DrawResult)
def draw_dish(
    payload: DrawRequest,
    user: User=Depends(get_current_user),
    db: Session=Depends(get_db),
    service: GachaService=Depends(get_gacha_service),
):
    try:
        outcome = service.draw(db, user.id, payload.group_id)
    except GachaError as exc:
        raise _http_error(exc)

    return DrawResult(
        draw_id=outcome.draw.id,
        dish=DishRead.model_validate(outcome.dish) if outcome.dish is not None else None,
        rarity=outcome.draw.rarity,
        group_id=outcome.draw.group_id,
        drawn_at=outcome.draw.created_at,
        remaining=outcome.remaining,
    )

@router.get("/history", response_model=list[HistoryEntry])
def get_draw_history(
    user: User=Depends(get_current_user),
    db: Session=Depends(get_db),
    service: GachaService=Depends(get_gacha_service),
):
    return service.history(db, user.id)

@router.get("/stats", response_model=DrawStats)
def get_draw_stats(
    group_id: int | None = None,
    user: User=Depends(get_current_user),
    db: Session=Depends(get_db),
    service: GachaService=Depends(get_gacha_service),
):
    try:
        return service.stats(db, user.id, group_id)
    except GachaError as exc:
        raise _http_error(exc)
