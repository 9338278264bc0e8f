from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, DateTime, Integer, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database import Base

class Friendship(Base):
    """A single directional friendship proposal from user_id to friend_id"""
    __tablename__ = "friendships"
    __table_args__ = (
        # one edge per unordered pair, whichever side requested it
        UniqueConstraint("pair_low", "pair_high", name="uq_friendships_pair"),
        CheckConstraint("NOT (accepted AND rejected)", name="ck_friendships_single_decision"),
        CheckConstraint("user_id <> friend_id", name="ck_friendships_no_self"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    friend_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    pair_low: Mapped[int] = mapped_column(Integer, nullable=False)
    pair_high: Mapped[int] = mapped_column(Integer, nullable=False)
    accepted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    rejected: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    cancelled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    @property
    def is_pending(self) -> bool:
        return not (self.accepted or self.rejected or self.cancelled)
