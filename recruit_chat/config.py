"""Pydantic settings loaded from .env, with conf.json overlay."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent

# ---------------------------------------------------------------------------
# conf.json: deployment runtime config (separate from .env secrets)
# ---------------------------------------------------------------------------


def get_data_dir() -> Path:
    """Resolve the data directory. RECRUIT_CHAT_DIR env var or ~/.config/recruit-chat."""
    d = os.environ.get("RECRUIT_CHAT_DIR", "")
    return Path(d).expanduser() if d else Path.home() / ".config" / "recruit-chat"


class RuntimeConfig(BaseModel):
    database_url: str = ""
    app_url: str = ""
    log_level: str = ""
    log_file: str = ""
    cors_allow_all_origins: bool | None = None  # None = use Settings default


_logger = logging.getLogger(__name__)


def load_conf() -> RuntimeConfig:
    """Load conf.json from the data directory."""
    conf_path = get_data_dir() / "conf.json"
    if conf_path.exists():
        try:
            return RuntimeConfig.model_validate_json(conf_path.read_text())
        except Exception:
            _logger.warning("Failed to parse %s, using defaults", conf_path, exc_info=True)
    return RuntimeConfig()


# ---------------------------------------------------------------------------
# Bootstrap: load .env, load conf.json
# ---------------------------------------------------------------------------

_env_file = BASE_DIR.parent / ".env"
load_dotenv(_env_file)
_conf = load_conf()

# ---------------------------------------------------------------------------
# Settings (pydantic-settings): .env / env vars override conf.json defaults
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"

    DATABASE_URL: str = _conf.database_url or f"sqlite:///{BASE_DIR / 'db.sqlite3'}"

    # Public URL of the chat page; generated share links are built from it.
    APP_URL: str = _conf.app_url or "http://localhost:3000"
    # Platform-assigned deployment host (no scheme); https://<host> is also a trusted origin.
    VERCEL_URL: str = ""

    CORS_ALLOW_ALL_ORIGINS: bool = (
        _conf.cors_allow_all_origins if _conf.cors_allow_all_origins is not None else True
    )

    # Admin area
    ADMIN_USERNAME: str = ""
    ADMIN_PASSWORD: str = ""  # plain text or a bcrypt hash ("$2b$...")
    ADMIN_ACCESS_TOKEN: str = ""  # bearer credential for analytics stats

    # Completion provider
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    COMPLETION_MAX_TOKENS: int = 1000
    COMPLETION_TEMPERATURE: float = 0.7
    COMPLETION_TIMEOUT: int = 60

    # Knowledge base / system prompt
    CANDIDATE_NAME: str = "the candidate"
    KNOWLEDGE_BASE_CONTENT: str = ""
    KNOWLEDGE_BASE_FILE: str = str(BASE_DIR.parent / "knowledge-base.md")

    # Token defaults and conversation memory
    DEFAULT_MAX_MESSAGES: int = 30
    DEFAULT_VALIDITY_DAYS: int = 30
    HISTORY_MAX_ENTRIES: int = 20

    LOG_LEVEL: str = _conf.log_level or "INFO"
    LOG_FILE: str = _conf.log_file or ""
    LOG_MAX_BYTES: int = 10_485_760
    LOG_BACKUP_COUNT: int = 5

    model_config = ConfigDict(
        env_file=str(BASE_DIR.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
