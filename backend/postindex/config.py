"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - search_debounce_ms is non-negative; 0 disables the debounce window

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out-of-the-box against data/posts.json
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from postindex.core.domain_types import SearchMode

_DEFAULT_POSTS = Path(__file__).resolve().parent.parent / "data" / "posts.json"


class Settings(BaseSettings):
    """Application settings from environment variables (prefix POSTINDEX_)."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="POSTINDEX_", case_sensitive=False,
    )

    # Post source: local path or http(s) URL
    posts_source: str = str(_DEFAULT_POSTS)
    posts_fetch_timeout_seconds: float = Field(10.0, gt=0)

    # Query engine
    search_mode: SearchMode = SearchMode.SCORED
    search_debounce_ms: int = Field(300, ge=0)
    max_search_term_length: int = Field(200, ge=1)

    # API
    cors_origins: list[str] = ["http://localhost:5173"]
    site_title: str = "Personal Blog"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("posts_source", mode="before")
    @classmethod
    def strip_source(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


@lru_cache
def get_settings() -> Settings:
    return Settings()
