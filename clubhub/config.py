from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: Optional[str] = None
    PGHOST: Optional[str] = None
    PGDATABASE: Optional[str] = None
    PGUSER: Optional[str] = None
    PGPASSWORD: Optional[str] = None
    PGSSLMODE: str = "require"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Tickets
    TICKET_SECRET_KEY: Optional[str] = None
    TICKET_TOKEN_EXPIRE_DAYS: int = 100
    TICKET_QR_SIZE: int = 400
    CHECK_IN_OPENS_HOURS_BEFORE: float = 20
    CHECK_IN_CLOSES_HOURS_AFTER: float = 2

    # OTP
    OTP_TTL_MINUTES: int = 10
    OTP_MAX_ATTEMPTS: int = 5

    # Application
    PROJECT_NAME: str = "Club Events Portal"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.PGUSER}:{self.PGPASSWORD}@{self.PGHOST}/{self.PGDATABASE}?sslmode={self.PGSSLMODE}"

    @property
    def ticket_secret_key(self) -> Optional[str]:
        # Ticket signing falls back to the session key when no dedicated key is set
        return self.TICKET_SECRET_KEY or self.SECRET_KEY

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
