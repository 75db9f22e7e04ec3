from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

class GroupRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    description: str | None = None
    is_public: bool
    created_at: datetime

class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str | None = None
    is_public: bool = False

class GroupUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = None
    is_public: bool | None = None

class GroupListItem(GroupRead):
    is_owner: bool
    is_saved: bool

class ExploreGroup(GroupListItem):
    owner_name: str
    save_count: int
    dish_count: int

class GroupImportResult(BaseModel):
    imported: int
    skipped: int
