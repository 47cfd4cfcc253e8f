"""
Configuration helpers.

Values come from the environment; a .env file in the working directory is
loaded first when present.
"""
import os
import logging
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TITLE = "Executive Leadership Forum 2024"


def get_mongo_uri() -> str:
    return os.getenv("MONGO_URI", "mongodb://localhost:27017/feedbackdesk")


def get_db_name() -> str:
    return os.getenv("DB_NAME", "feedbackdesk")


def get_gemini_api_key() -> Optional[str]:
    """Get Gemini API key from environment."""
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        logger.warning("GEMINI_API_KEY not set - session reports are unavailable")
    return api_key


def get_gemini_model() -> str:
    return os.getenv("GEMINI_MODEL", "gemini-2.0-flash")


def seed_demo_data_enabled() -> bool:
    """Check if demo sessions/participants should be inserted into an empty store."""
    return os.getenv("SEED_DEMO_DATA", "false").lower() == "true"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Setup logging configuration.

    Args:
        level: Logging level name; falls back to LOG_LEVEL, then INFO
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
