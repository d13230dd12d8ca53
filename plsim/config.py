from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# Load .env from repo root for local development and scripts.
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)
    store_url: str = Field(default="", alias="STORE_URL")
    # text/plain;charset=utf-8 avoids a CORS preflight on stores that cannot answer OPTIONS
    store_content_type: str = Field(default="application/json", alias="STORE_CONTENT_TYPE")
    http_timeout_seconds: float = Field(default=30.0, alias="HTTP_TIMEOUT_SECONDS")
    http_retry_attempts: int = Field(default=1, alias="HTTP_RETRY_ATTEMPTS")
    http_retry_backoff_seconds: float = Field(default=1.0, alias="HTTP_RETRY_BACKOFF_SECONDS")
    seed_anchor_year: int = Field(default=2025, alias="SEED_ANCHOR_YEAR")
    seed_anchor_month: int = Field(default=9, ge=1, le=12, alias="SEED_ANCHOR_MONTH")
    seed_months: int = Field(default=16, alias="SEED_MONTHS")
    seed_base_sales: int = Field(default=3_000_000, alias="SEED_BASE_SALES")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_error_file: str = Field(default="", alias="LOG_ERROR_FILE")

settings = Settings()
