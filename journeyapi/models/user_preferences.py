from sqlalchemy import BigInteger, Boolean, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from journeyapi.models.base import BaseModel


class UserPreferences(BaseModel):
    __tablename__ = "user_preferences"

    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    theme: Mapped[str] = mapped_column(String(16), default="light", nullable=False)
    notifications: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    max_distance: Mapped[float] = mapped_column(Float, default=25.0, nullable=False)
    show_partner_only: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
