from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings

PACKAGE_DIR = Path(__file__).parent

class Settings(BaseSettings):
    """Application configuration with environment variable support"""

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = False
    LOG_LEVEL: str = "INFO"

    # Scoring data
    WEIGHTS_FILE: str = str(PACKAGE_DIR / "data" / "weights.json")

    # Analysis settings
    DEFAULT_TRIALS: int = 10000
    MAX_TRIALS: int = 500000
    DEFAULT_QUESTION_COUNT: int = 18
    MAX_QUESTION_COUNT: int = 200
    EXACT_MAX_STATES: int = 200000  # Distinct (E, P, C) totals before falling back to sampling

    # Submission settings
    STRICT_ANSWER_VALIDATION: bool = False  # Reject incomplete/duplicate answer sets with 400

    # CORS settings
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

settings = Settings()
