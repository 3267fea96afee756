"""Runtime settings loaded from the environment and an optional ``.env`` file."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


class Settings(BaseModel):
    """Application settings.

    Attributes:
        db_path: DuckDB file holding the saved collections. ``None`` keeps
            everything in memory.
        gemini_api_key: API key for the lookup service.
        gemini_model: Gemini model used for lookups.
        log_level: Logging level name.
    """

    db_path: Optional[str] = Field(default=None)
    gemini_api_key: Optional[str] = Field(default=None)
    gemini_model: str = Field(default=DEFAULT_GEMINI_MODEL)
    log_level: str = Field(default="WARNING")

    @classmethod
    def from_env(cls) -> "Settings":
        """Builds settings from environment variables, after loading ``.env``."""
        load_dotenv()
        return cls(
            db_path=os.getenv("FLASHVOCAB_DB_PATH") or None,
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("FLASHVOCAB_GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            log_level=os.getenv("FLASHVOCAB_LOG_LEVEL", "WARNING"),
        )
