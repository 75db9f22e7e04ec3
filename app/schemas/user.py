from datetime import date
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    display_name: str | None = Field(None, max_length=100)

class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    public_id: UUID
    username: str
    display_name: str | None = None
    total_draws: int
    current_streak: int

class UserStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_draws: int
    current_streak: int
    total_login_days: int
    last_active_date: date | None = None
    unique_items_count: int
