"""Application configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path)

# Database
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./stalklog.db")

# CORS
CORS_ORIGINS: list[str] = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Rate limiting
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").strip().lower() not in ("0", "false", "no")
RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
RATE_LIMIT_IMPORT: str = os.getenv("RATE_LIMIT_IMPORT", "10/minute")

# CSV import
IMPORT_DEFAULT_GRID_SQUARE: str = os.getenv("IMPORT_DEFAULT_GRID_SQUARE", "SO").strip().upper()
IMPORT_DEFAULT_YEAR: int = int(os.getenv("IMPORT_DEFAULT_YEAR", "2023"))

# Predictions
PREDICTIONS_RECENT_DAYS: int = int(os.getenv("PREDICTIONS_RECENT_DAYS", "30"))
