from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="journeyapi/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "Deal Journey API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_HOST: str = ""
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = ""
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DATABASE: str = ""
    POSTGRES_SCHEMA: str = "public"

    # Takes precedence over the POSTGRES_* components when set
    DATABASE_URL: Optional[str] = "sqlite:///./journeyapi.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @property
    def database_url(self) -> str:
        """Resolve the SQLAlchemy URL from DATABASE_URL or POSTGRES_* vars"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        # URL encode the password to handle special characters
        encoded_password = quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql+psycopg2://{self.POSTGRES_USERNAME}:{encoded_password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    # Security
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30

    # Vendor catalog backend: "database" | "fixture"
    DATA_BACKEND: str = "database"
    VENDOR_FIXTURE_PATH: Optional[str] = None

    # Check-in rules
    QR_SCHEME: str = "lootsganja"
    CHECKIN_PROXIMITY_MILES: float = 0.1
    BASE_CHECKIN_POINTS: int = 10
    QR_SKIPPED_POINTS: int = 5
    COMPLETION_BONUS_PER_STOP: int = 5
    PARTIAL_COMPLETION_POINTS_PER_STOP: int = 3

    # Route estimation
    MINUTES_PER_MILE: float = 2.4  # 25 mph average
    TRAFFIC_FACTOR: float = 1.2
    DEFAULT_MAX_DISTANCE: float = 25.0
    DEFAULT_MAX_VENDORS: int = 5

    # Daily deals are keyed by the vendor's local weekday
    TIMEZONE: str = "America/Anchorage"

    @property
    def qr_prefix(self) -> str:
        return f"{self.QR_SCHEME}://checkin/"


settings = Settings()
