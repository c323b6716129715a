from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# Load .env from repo root for local development and scripts.
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)
    db_path: str = Field(default="./data/app.db", alias="DB_PATH")
    local_tz: str = Field(default="America/Los_Angeles", alias="LOCAL_TZ")
    daily_cutover: str = Field(default="00:00", alias="DAILY_CUTOVER")
    projection_months_default: int = Field(default=12, alias="PROJECTION_MONTHS_DEFAULT")
    projection_months_max: int = Field(default=60, alias="PROJECTION_MONTHS_MAX")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")
    log_error_file: str = Field(default="", alias="LOG_ERROR_FILE")

settings = Settings()
