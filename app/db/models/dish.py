from datetime import datetime, timezone
from decimal import Decimal
from app.db.base import Base
from sqlalchemy import Integer, String, Text, Enum, Numeric, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.enums import Rarity


RARITY_TYPE = Enum(Rarity, name="rarity_enum", values_callable=lambda enum_cls: [m.value for m in enum_cls])


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Dish(Base):
    __tablename__ = "dishes"

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 5)", name="ck_dishes_rating_range"),
        Index("ix_dishes_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    rating: Mapped[Decimal | None] = mapped_column(Numeric(2, 1), nullable=True)
    rarity: Mapped[Rarity] = mapped_column(RARITY_TYPE, nullable=False, default=Rarity.COMMON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    group_links: Mapped[list["DishGroup"]] = relationship(back_populates="dish", cascade="all, delete-orphan")
