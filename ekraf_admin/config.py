"""
Runtime configuration for the admin client.

Values are read once from the environment (a local .env file is honoured).
"""
import os
from pathlib import Path

import pytz
from dotenv import load_dotenv

load_dotenv()

# Backend REST API, every resource lives under this prefix
API_BASE_URL = os.environ.get("EKRAF_API_BASE_URL", "https://ekraf.asepharyana.tech/api")

# External image host, lives outside the API base URL
UPLOADER_URL = os.environ.get(
    "EKRAF_UPLOADER_URL", "https://apidl.asepharyana.cloud/api/uploader/ryzencdn"
)

# Session storage: "file", "redis" or "memory"
SESSION_BACKEND = os.environ.get("EKRAF_SESSION_BACKEND", "file")
SESSION_FILE = Path(
    os.environ.get("EKRAF_SESSION_FILE", str(Path.home() / ".ekraf_admin" / "session.json"))
)
SESSION_REDIS_URL = os.environ.get("EKRAF_SESSION_REDIS_URL", "redis://localhost:6379/0")

# Seconds after an optimistic patch during which focus refetches are skipped
OPTIMISTIC_GUARD_SECONDS = float(os.environ.get("EKRAF_OPTIMISTIC_GUARD_SECONDS", 0.5))

DEFAULT_PAGE_SIZE = int(os.environ.get("EKRAF_PAGE_SIZE", 10))

# Naive timestamps from the backend are interpreted in this timezone
DEFAULT_TIMEZONE = pytz.timezone(os.environ.get("EKRAF_TIMEZONE", "Asia/Jakarta"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
