from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from app.db.enums import Rarity
from app.schemas.dish import DishRead

class DrawRequest(BaseModel):
    group_id: int = Field(..., gt=0)

class DrawResult(BaseModel):
    draw_id: int
    dish: DishRead | None = None
    rarity: Rarity
    group_id: int
    drawn_at: datetime
    remaining: int | None = None

class HistoryEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    draw_id: int
    created_at: datetime
    dish_id: int | None = None
    dish_name: str | None = None
    image_url: str | None = None
    rarity: Rarity
    group_id: int | None = None
    group_name: str | None = None

class DishSummary(BaseModel):
    dish_id: int
    name: str | None = None
    image_url: str | None = None
    rarity: Rarity | None = None
    draw_count: int

class DrawStats(BaseModel):
    total_draws: int
    most_frequent: DishSummary | None = None
