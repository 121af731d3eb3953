from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from journeyapi.models.base import BaseModel


class DataMigration(BaseModel):
    """Marker row for one-time data imports; created_at is the applied time"""

    __tablename__ = "data_migrations"

    name: Mapped[str] = mapped_column(String(128), primary_key=True)
