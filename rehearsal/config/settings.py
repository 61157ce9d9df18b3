from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "Interview Rehearsal"
    APP_ADDRESS: str = "0.0.0.0"
    APP_PORT: int = 8000

    MISTRAL_API_KEY: str
    MISTRAL_MODEL: str = "mistral-large-latest"

    LOG_DIR: str = "logs"

    RESUME_MAX_BYTES: int = 5 * 1024 * 1024
    RESUME_ALLOWED_TYPES: List[str] = [
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ]
    FIELD_MIN_LENGTH: int = 2
    FIELD_MAX_LENGTH: int = 200
    ANSWER_MAX_LENGTH: int = 10000

    SCORE_MIN: int = 0
    SCORE_MAX: int = 100

    GENERATION_TIMEOUT_S: float = 60.0
    SCORING_TIMEOUT_S: float = 90.0

    MAX_SESSION_ATTEMPTS: int = 3
    RETRY_REUSES_QUESTIONS: bool = False

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
