import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL")
DB_ECHO = _env_bool("DB_ECHO")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# длина кода приглашения в команду
TEAM_CODE_LENGTH = int(os.getenv("TEAM_CODE_LENGTH", "8"))
DASHBOARD_LIST_LIMIT = int(os.getenv("DASHBOARD_LIST_LIMIT", "5"))
