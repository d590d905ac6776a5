from typing import List, Optional
from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Credion Backend"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/v1"
    LOG_LEVEL: str = "INFO"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "credion"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None  # e.g. sqlite+aiosqlite:// for local runs

    # Auth (tokens are issued by the auth service, we only verify them)
    SECRET_KEY: str = "your-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # Alares report API
    ALARES_BASE_URL: str = "https://alares.com.au/api"
    ALARES_API_TOKEN: str = ""

    # PPSR Cloud
    PPSR_BASE_URL: str = "https://api.ppsrcloud.com.au/v1"
    PPSR_API_TOKEN: str = ""
    PPSR_SETTLE_DELAY_SECONDS: float = 30.0

    # Australian Business Register
    ABR_BASE_URL: str = "https://abr.business.gov.au/json"
    ABR_GUID: str = ""

    # Upstream behaviour
    UPSTREAM_TIMEOUT_SECONDS: float = 30.0
    FETCH_RETRY_ATTEMPTS: int = 5
    FETCH_RETRY_DELAY_SECONDS: float = 2.0

    # Reports
    REPORT_CACHE_DAYS: int = 7
    REPORT_DEADLINE_SECONDS: float = 120.0

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")

settings = Settings()
