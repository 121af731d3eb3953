import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import text

from journeyapi.config import settings
from journeyapi.database.connection import engine
from journeyapi.models import Base


def init_db():
    """Create the schema (PostgreSQL) and every table"""
    try:
        if not settings.database_url.startswith("sqlite"):
            with engine.connect() as conn:
                conn.execute(
                    text(f"CREATE SCHEMA IF NOT EXISTS {settings.POSTGRES_SCHEMA}")
                )
                conn.commit()

        Base.metadata.create_all(bind=engine)
        print(f"Database initialized: {len(Base.metadata.tables)} tables")
    except Exception as e:
        print(f"Database initialization failed: {str(e)}")
        raise


if __name__ == "__main__":
    init_db()
