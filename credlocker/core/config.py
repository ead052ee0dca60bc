"""
Configuration constants for the application.
"""
import os
from pathlib import Path

# Load environment variables from .env file if it exists
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def is_production() -> bool:
    """
    Detect if we're running in production (Railway, Heroku, etc).
    Railway sets RAILWAY_ENVIRONMENT, other platforms set other vars.
    """
    return bool(
        os.getenv("RAILWAY_ENVIRONMENT") or
        os.getenv("RAILWAY_PROJECT_ID") or
        os.getenv("ENVIRONMENT", "").lower() == "production" or
        os.getenv("HEROKU_APP_NAME")
    )


# User record set (JSON). Rewritten in full on every mutation.
USERS_FILE = Path(os.getenv("USERS_FILE", str(BASE_DIR / "data" / "users.json")))


def dev_seeding_enabled() -> bool:
    """Opt-in only (SEED_DEV_USERS=1), and never in production."""
    return _flag("SEED_DEV_USERS") and not is_production()


# Seed the two default accounts (admin/password, user/password) when no
# users file exists yet. Once seeded they are written out with the first save.
SEED_DEV_USERS = dev_seeding_enabled()

MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))

# Fallback reward for catalog entries without experienceReward
DEFAULT_TASK_REWARD = 10

# XP needed to leave level N is N * XP_PER_LEVEL
XP_PER_LEVEL = 100

# IPQualityScore API key for the security tools.
# IMPORTANT: Do NOT hardcode keys in code or commit them to git.
IPQS_API_KEY = os.getenv("IPQS_API_KEY", "").strip()
IPQS_BASE_URL = os.getenv("IPQS_BASE_URL", "https://www.ipqualityscore.com/api/json").rstrip("/")
IPQS_TIMEOUT_SECONDS = float(os.getenv("IPQS_TIMEOUT_SECONDS", "10"))

# Only expose /debug routes when explicitly enabled
ENABLE_DEBUG_ROUTES = _flag("ENABLE_DEBUG_ROUTES")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
