"""Centralised settings for the nerdscrape service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


def _split_hosts(raw: str) -> list[str]:
    return [h.strip().lower() for h in raw.split(",") if h.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("NERDSCRAPE_WORKSPACE", Path.home() / ".nerdscrape_data")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "scrapes.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    request_budget: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_BUDGET", "60.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("SCRAPER_USER_AGENT", _DEFAULT_USER_AGENT)
    )
    denied_hosts: list[str] = field(
        default_factory=lambda: _split_hosts(os.environ.get("DENIED_HOSTS", ""))
    )

    # ------------------------------------------------------------------
    # Enrichment model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "ollama")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from nerdscrape.config import settings
settings = Settings()
