import json
import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_SETTINGS_FILE = Path("data/settings.json")
_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)
_TUNING_KEYS = frozenset({
    "drag_commit_distance",
    "bar_base_fraction",
    "bar_max_fraction",
    "bar_min_fraction",
    "bar_reference_hours",
})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Reflection"
    app_version: str = "0.1.0"
    app_env: str = "development"

    # Persistence: "file" (one JSON blob per key), "sqlite" or "memory"
    storage_backend: str = "file"
    data_dir: str = "data"
    database_url: str = "sqlite:///data/reflection.db"

    # Defaults for synthesized entities
    default_plan_name: str = "Default Plan"
    default_theme_color: str = "#00CE4A"

    # Focus sessions
    session_tick_seconds: float = 1.0

    # Drag-to-reorder: gestures shorter than this never commit a move
    drag_commit_distance: float = 20.0

    # Statistics bar widths, as fractions of the container extent
    bar_base_fraction: float = 0.3
    bar_max_fraction: float = 0.95
    bar_min_fraction: float = 0.15
    bar_reference_hours: float = 3.0

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine: SQL statements
    log_level_store: str = "INFO"            # EntityStore + blob stores
    log_level_session: str = "INFO"          # SessionEngine lifecycle

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def model_post_init(self, __context: object) -> None:
        """Merge runtime tuning overrides from data/settings.json."""
        if _SETTINGS_FILE.exists():
            try:
                overrides = json.loads(_SETTINGS_FILE.read_text("utf-8"))
                for key in _TUNING_KEYS:
                    if key in overrides and isinstance(overrides[key], (int, float)):
                        object.__setattr__(self, key, float(overrides[key]))
            except Exception as exc:
                _config_logger.warning("Could not load settings overrides: %s", exc)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance: reads .env once."""
    return Settings()
