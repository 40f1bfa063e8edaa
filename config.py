"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "northwind")
DB_USER: str = os.getenv("DB_USER", "northwind_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = os.getenv("DATABASE_URL") or (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ── Connection Pool ───────────────────────────────────────
DB_POOL_MIN: int = int(os.getenv("DB_POOL_MIN", "1"))
DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", "5"))

# ── Orders ────────────────────────────────────────────────
DEFAULT_PER_PAGE: int = int(os.getenv("DEFAULT_PER_PAGE", "20"))
# Deleting an order leaves its line items in place unless this is set.
ORDER_DELETE_CASCADE: bool = _env_flag("ORDER_DELETE_CASCADE")

# ── Employees ─────────────────────────────────────────────
EMPLOYEES_INCLUDE_WITHOUT_ORDERS: bool = _env_flag("EMPLOYEES_INCLUDE_WITHOUT_ORDERS")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
