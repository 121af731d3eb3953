"""
Vendor reference data.

Rows are written by the catalog import script only; the API reads them.
``deals`` keeps the catalog's nested layout::

    {
        "birthday": {"description": ..., "discount": ..., "restrictions": [...]},
        "daily": {"monday": [Deal, ...], ...},
        "special": [{"title": ..., "startDate": ..., "endDate": ..., ...}],
    }
"""

from typing import Optional

from sqlalchemy import Boolean, Float, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from journeyapi.models.base import BaseModel


class Vendor(BaseModel):
    __tablename__ = "vendors"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    hours: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    contact: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    deals: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_partner: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_qr_code: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self):
        return f"<Vendor(id={self.id}, name={self.name})>"
