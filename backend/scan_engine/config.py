"""
Feature flags, paths, and centralized configuration.
Values are read lazily from the environment; a .env next to the backend is loaded once on import.
"""
import os
import logging
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# backend/scan_engine/config.py -> parent=scan_engine, parent.parent=backend
_PACKAGE_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _PACKAGE_DIR.parent

load_dotenv(_BACKEND_DIR / ".env")

_TRUTHY = ("1", "true", "yes")

# Reason shown when no ingredient could be read; the status is always insufficient_data.
EMPTY_INPUT_REASON = "No ingredients detected"


# --- Data paths ---
def get_default_term_dictionary_path() -> Path:
    return _PACKAGE_DIR / "data" / "term_dictionary.json"


def get_term_dictionary_path() -> Path:
    override = os.environ.get("TERM_DICTIONARY_PATH", "").strip()
    if override:
        return Path(override).expanduser()
    return get_default_term_dictionary_path()


# --- Matching behaviour ---
def get_plural_matching_enabled() -> bool:
    """Accept a plural after a pattern ("egg" matches "Eggs", "strawberry" matches "Strawberries")."""
    return os.environ.get("MATCH_PLURALS", "true").lower() in _TRUTHY


# --- Logging ---
def get_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging() -> None:
    logging.basicConfig(level=get_log_level())


# --- Startup logging ---
def log_config() -> None:
    path = get_term_dictionary_path()
    logger.info(
        "CONFIG: term_dictionary=%s exists=%s match_plurals=%s log_level=%s",
        path, path.exists(), get_plural_matching_enabled(), get_log_level(),
    )
