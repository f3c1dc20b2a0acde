"""
config.py - environment-driven settings and logging setup

Settings are read from environment variables so the same code runs locally
and on Streamlit Cloud (app.py copies Streamlit secrets into the environment
before anything here is imported).

Recognised variables:
 - EXPLOG_DATA_FILE: path of the local storage file
 - EXPLOG_STORAGE: "local" (JSON file, default) or "memory" (session only)
 - EXPLOG_LOG_LEVEL: logging level name, default INFO
 - EXPLOG_CURRENCY_SYMBOL: symbol shown next to amounts, default "$"
"""

from dataclasses import dataclass
import logging
import os

# location of the JSON persistence file (relative to the project root)
DEFAULT_DATA_FILE = os.path.join(os.path.dirname(__file__), "..", "data", "explog_storage.json")

STORAGE_BACKENDS = ("local", "memory")

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


@dataclass
class Settings:
    data_file: str = DEFAULT_DATA_FILE
    storage_backend: str = "local"
    log_level: str = "INFO"
    currency_symbol: str = "$"

    @staticmethod
    def from_env() -> "Settings":
        """Build settings from EXPLOG_* environment variables, falling back to defaults."""
        backend = (os.getenv("EXPLOG_STORAGE") or "local").strip().lower()
        if backend not in STORAGE_BACKENDS:
            logging.getLogger(__name__).warning(
                "Unknown EXPLOG_STORAGE=%r, using local file storage", backend
            )
            backend = "local"
        return Settings(
            data_file=(os.getenv("EXPLOG_DATA_FILE") or "").strip() or DEFAULT_DATA_FILE,
            storage_backend=backend,
            log_level=(os.getenv("EXPLOG_LOG_LEVEL") or "INFO").strip().upper(),
            currency_symbol=os.getenv("EXPLOG_CURRENCY_SYMBOL") or "$",
        )


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a single StreamHandler to the package logger.
    Calling this more than once keeps the existing handler and only updates the level.
    """
    logger = logging.getLogger("explog")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    numeric = getattr(logging, str(level).upper(), None)
    logger.setLevel(numeric if isinstance(numeric, int) else logging.INFO)
    return logger
