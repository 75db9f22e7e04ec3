from app.db.base import Base
from sqlalchemy import Integer, String
from sqlalchemy.types import Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    public_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), default=uuid.uuid4, unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    stats: Mapped["UserStats"] = relationship(back_populates="user", uselist=False, cascade="all, delete-orphan")

    @property
    def total_draws(self) -> int:
        if self.stats is None:
            return 0
        return self.stats.total_draws

    @property
    def current_streak(self) -> int:
        if self.stats is None:
            return 0
        return self.stats.current_streak
