from datetime import date, datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Date, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from journeyapi.models.base import BaseModel, IdType


class User(BaseModel):
    """App user registered from a device.

    ``points`` caches the sum of the user's points_ledger deltas and is only
    written by the ledger append path.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column(
        String(128), unique=True, nullable=False, index=True
    )
    username: Mapped[Optional[str]] = mapped_column(
        String(30), unique=True, nullable=True
    )
    points: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    birthdate: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    age_verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    tos_accepted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, points={self.points})>"
