"""Service settings read from the environment (and an optional .env file)."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()  # load environment variables from .env file

DEFAULT_DB_PATH = Path(__file__).parent / "data" / "horizon.db"
HORIZON_DB_PATH = Path(os.getenv("HORIZON_DB_PATH", str(DEFAULT_DB_PATH)))

# CORS origins - comma-separated values, or "*" for all (development only)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# when true, a horizon save deactivates stored nodes the client no longer sends
SYNC_DEACTIVATE_MISSING = os.getenv("SYNC_DEACTIVATE_MISSING", "false").lower() == "true"

DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
