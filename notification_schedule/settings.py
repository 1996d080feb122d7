"""
Settings for the local notification tools
Read from the environment (and a .env file when present)
"""

import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
  return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


class AppConfig:
  """Application configuration settings"""

  # Used for unit names, config directory and the notifier app name
  APP_NAME = os.getenv("LOCALNOTIFY_APP_NAME", "localnotify")

  # Skip the calendar notification center even where it is available
  FORCE_LEGACY = _flag("LOCALNOTIFY_FORCE_LEGACY")

  # Legacy cancel(identifiers) cancels only the matching categories
  LEGACY_FILTERED_CANCEL = _flag("LOCALNOTIFY_LEGACY_FILTERED_CANCEL")

  # Program the systemd service units run to show a notification
  SHOW_COMMAND = os.getenv("LOCALNOTIFY_SHOW_COMMAND", "localnotify-show")

  # Logging
  LOG_LEVEL = os.getenv("LOCALNOTIFY_LOG_LEVEL", "INFO")


def configure_logging() -> None:
  logging.basicConfig(
    level=getattr(logging, AppConfig.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
  )
