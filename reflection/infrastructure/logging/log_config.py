"""Per-category logging levels.

The store, the session engine and SQLAlchemy each get their own level from
Settings, so SQL echo can stay quiet while store flushes are traced.

Usage:
    from reflection.infrastructure.logging.log_config import setup_logging
    setup_logging(settings)   # once, from the application lifespan
"""

import logging
import sys

from reflection.config import Settings, get_settings

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_DATE_FORMAT = "%H:%M:%S"

# Settings field -> logger names it controls
_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite"),
    "log_level_store": (
        "EntityStore",
        "reflection.application.services.entity_store",
        "reflection.infrastructure.storage",
        "reflection.infrastructure.database",
    ),
    "log_level_session": (
        "SessionEngine",
        "reflection.application.services.session_engine",
    ),
}


def category_levels(settings: Settings) -> dict[str, int]:
    """Map every categorized logger name to its numeric level."""
    levels: dict[str, int] = {}
    for settings_field, logger_names in _CATEGORY_MAP.items():
        level = _parse_level(getattr(settings, settings_field))
        levels.update(dict.fromkeys(logger_names, level))
    return levels


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
        root.addHandler(handler)

    for name, level in category_levels(settings).items():
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s sql=%s store=%s session=%s",
        settings.log_level,
        settings.log_level_sql,
        settings.log_level_store,
        settings.log_level_session,
    )


def _parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names fall back to INFO."""
    numeric = logging.getLevelName(raw.strip().upper())
    return numeric if isinstance(numeric, int) else logging.INFO
