import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///data/jobly.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_BCRYPT_ROUNDS = 12


def load_env() -> None:
    """Load .env from project root if present."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path)


def get_database_url() -> str:
    return os.getenv("JOBLY_DATABASE_URL") or DEFAULT_DATABASE_URL


def get_log_level() -> str:
    return (os.getenv("JOBLY_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()


def get_bcrypt_rounds() -> int:
    raw = os.getenv("JOBLY_BCRYPT_ROUNDS")
    if not raw:
        return DEFAULT_BCRYPT_ROUNDS
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"JOBLY_BCRYPT_ROUNDS must be an integer, got {raw!r}")
