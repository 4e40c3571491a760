"""Configuration management for gridcalc."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # Database path for the cell grid
    database_path: Path = Path(os.getenv("DATABASE_PATH", "data/gridcalc.db"))

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "5000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    # Formula settings
    max_formula_length: int = int(os.getenv("MAX_FORMULA_LENGTH", "1000"))
    honor_sqrt_root: bool = os.getenv("GRIDCALC_HONOR_SQRT_ROOT", "false").lower() == "true"  # Use SQRT's root argument as an n-th root


settings = Settings()
