from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from app.db.enums import Rarity

class DishRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    address: str | None = None
    rating: Decimal | None = None
    rarity: Rarity
    created_at: datetime

class DishCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    image_url: str | None = None
    address: str | None = None
    rating: Decimal | None = Field(None, ge=0, le=5)
    rarity: Rarity | None = None

class DishUpdate(BaseModel):
    """Partial update: only the fields sent by the client are applied."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    image_url: str | None = None
    address: str | None = None
    rating: Decimal | None = Field(None, ge=0, le=5)
    rarity: Rarity | None = None
    recompute_rarity: bool = False

class DishImportResult(BaseModel):
    dish: DishRead
    is_new: bool
