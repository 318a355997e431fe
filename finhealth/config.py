import os
from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env")
# Read .env as UTF-8 with BOM support to avoid a malformed first key.
load_dotenv(env_path, encoding="utf-8-sig")


TRUTHY_VALUES = {"1", "true", "yes", "on"}


def is_truthy(raw: str) -> bool:
    return raw.strip().lower() in TRUTHY_VALUES


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return is_truthy(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

# Storage backend for profiles, checkpoints and accepted actions
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").strip().lower()
if STORAGE_BACKEND not in {"memory", "supabase"}:
    STORAGE_BACKEND = "memory"

SUPABASE_URL = os.getenv("SUPABASE_URL", "").strip()
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "").strip()
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET", "").strip()
SQL_TIMEOUT_SEC = max(1, _env_int("SQL_TIMEOUT_SEC", 20))

DEV_BYPASS_AUTH = _env_bool("DEV_BYPASS_AUTH", False)

# ============================================================================
# FIRE PROJECTION DEFAULTS
# ============================================================================
FIRE_DEFAULT_MULTIPLE = _env_float("FIRE_DEFAULT_MULTIPLE", 25.0)
if FIRE_DEFAULT_MULTIPLE <= 0:
    FIRE_DEFAULT_MULTIPLE = 25.0
FIRE_DEFAULT_TARGET_AGE = _env_int("FIRE_DEFAULT_TARGET_AGE", 50)
FIRE_DEFAULT_RETURN_PCT = _env_float("FIRE_DEFAULT_RETURN_PCT", 12.0)
FIRE_DEFAULT_INFLATION_PCT = _env_float("FIRE_DEFAULT_INFLATION_PCT", 6.0)
