from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from journeyapi.models.base import BaseModel, IdType


class DealType(str, Enum):
    BIRTHDAY = "birthday"
    DAILY = "daily"
    SPECIAL = "special"


class CheckInType(str, Enum):
    QR = "qr"
    MANUAL = "manual"
    QR_SKIPPED = "qr_skipped"


class Journey(BaseModel):
    """
    A user's ordered run of vendor stops.

    ``stops`` is an embedded JSON list; each element is::

        {"vendor_id", "name", "latitude", "longitude", "distance",
         "has_qr_code", "checked_in", "check_in_timestamp", "check_in_type"}

    The list is always replaced as a whole so SQLAlchemy notices the change.
    ``completion_bonus`` is set only when the final check-in completes the
    journey; a journey completed any other way never owes one.
    State machine: active -> completed | cancelled, terminal afterwards.
    """

    __tablename__ = "journeys"
    __table_args__ = (Index("idx_journeys_user_active", "user_id", "is_active"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    deal_type: Mapped[str] = mapped_column(String(16), nullable=False)
    stops: Mapped[List[dict]] = mapped_column(JSON, nullable=False, default=list)
    current_vendor_index: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    max_distance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    start_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    start_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    total_distance: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    estimated_time: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_cancelled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    completion_bonus: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def total_vendors(self) -> int:
        return len(self.stops or [])

    def __repr__(self):
        return (
            f"<Journey(id={self.id}, user_id={self.user_id}, "
            f"index={self.current_vendor_index}/{self.total_vendors})>"
        )


class JourneyStats(BaseModel):
    """Per-user aggregate counters updated when a journey ends"""

    __tablename__ = "journey_stats"

    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    completed_journeys: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cancelled_journeys: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_vendors_visited: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    last_completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
