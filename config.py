"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "mydb")
DB_USER: str = os.getenv("DB_USER", "postgres")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

DB_POOL_MIN_CONN: int = int(os.getenv("DB_POOL_MIN_CONN", "1"))
DB_POOL_MAX_CONN: int = int(os.getenv("DB_POOL_MAX_CONN", "5"))

# ── Query Comments ────────────────────────────────────────
QUERY_COMMENTS_ENABLED: bool = (
    os.getenv("QUERY_COMMENTS_ENABLED", "true").strip().lower()
    not in ("0", "false", "no", "off")
)

# Seconds to wait for a .map file to load; 0 waits forever.
SOURCE_MAP_LOAD_TIMEOUT_SECONDS: float = float(
    os.getenv("SOURCE_MAP_LOAD_TIMEOUT_SECONDS", "2.0")
)

_raw_markers = os.getenv("THIRD_PARTY_MARKERS", "site-packages,dist-packages")
THIRD_PARTY_MARKERS: tuple[str, ...] = tuple(
    marker.strip() for marker in _raw_markers.split(",") if marker.strip()
)

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
