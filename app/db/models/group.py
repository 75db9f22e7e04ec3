from datetime import datetime
from app.db.base import Base
from sqlalchemy import Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.models.dish import utcnow


class Group(Base):
    __tablename__ = "groups"

    __table_args__ = (
        Index("ix_groups_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    dish_links: Mapped[list["DishGroup"]] = relationship(back_populates="group", cascade="all, delete-orphan")
    saves: Mapped[list["SavedGroup"]] = relationship(back_populates="group", cascade="all, delete-orphan")


class DishGroup(Base):
    __tablename__ = "dish_groups"

    __table_args__ = (
        UniqueConstraint("dish_id", "group_id", name="uq_dish_groups_dish_id_group_id"),
        Index("ix_dish_groups_group_id", "group_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    dish_id: Mapped[int] = mapped_column(ForeignKey("dishes.id", ondelete="CASCADE"), nullable=False)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)

    dish: Mapped["Dish"] = relationship(back_populates="group_links")
    group: Mapped["Group"] = relationship(back_populates="dish_links")


class SavedGroup(Base):
    """A public group of another user bookmarked for drawing."""

    __tablename__ = "saved_groups"

    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_saved_groups_user_id_group_id"),
        Index("ix_saved_groups_group_id", "group_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    group: Mapped["Group"] = relationship(back_populates="saves")
