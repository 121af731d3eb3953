"""
User Favorites Model

Junction table between users and vendors.
"""

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import PrimaryKeyConstraint

from journeyapi.models.base import BaseModel


class UserFavorite(BaseModel):
    __tablename__ = "user_favorites"
    __table_args__ = (
        PrimaryKeyConstraint("user_id", "vendor_id", name="pk_user_favorites"),
    )

    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    vendor_id: Mapped[str] = mapped_column(String(64), nullable=False)
