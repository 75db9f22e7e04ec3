from datetime import datetime
from app.db.base import Base
from sqlalchemy import Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from app.db.enums import Rarity
from app.db.models.dish import RARITY_TYPE, utcnow


class Draw(Base):
    __tablename__ = "draws"

    # group_id and dish_id are plain columns, not foreign keys: the draw log
    # outlives the dishes and groups it points at.
    __table_args__ = (
        Index("ix_draws_user_id_created_at", "user_id", "created_at"),
        Index("ix_draws_user_id_dish_id", "user_id", "dish_id"),
        Index("ix_draws_group_id", "group_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    group_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    dish_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rarity: Mapped[Rarity] = mapped_column(RARITY_TYPE, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
