"""
Points ledger.

Every change to a user's points is one immutable row here. ``balance_after``
is the user's running total after the row was applied, and ``ref_id`` is the
idempotency key: an append carrying a ref_id that already exists is a no-op.
"""

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import UniqueConstraint

from journeyapi.models.base import BaseModel, IdType


class PointsLedger(BaseModel):
    __tablename__ = "points_ledger"
    __table_args__ = (
        UniqueConstraint("ref_id", name="uq_points_ledger_ref_id"),
        Index("idx_points_ledger_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    # positive = credit, negative = debit
    delta_points: Mapped[int] = mapped_column(BigInteger, nullable=False)
    balance_after: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # e.g. "journey-check-in", "journey-completion", "check-in"
    source: Mapped[str] = mapped_column(String(64), nullable=False)
    # "metadata" is reserved on declarative classes
    details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    ref_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
