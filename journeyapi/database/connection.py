from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from journeyapi.config import settings


def build_engine(url: str):
    """SQLite for local development, PostgreSQL everywhere else"""
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=settings.DEBUG,
        )

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=3600,  # recycle hourly
        echo=settings.DEBUG,
        connect_args={"options": f"-csearch_path={settings.POSTGRES_SCHEMA}"},
    )


engine = build_engine(settings.database_url)

# Use expire_on_commit=False to avoid DetachedInstanceError when accessing
# attributes after commit within the same request scope (common FastAPI pattern).
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)
