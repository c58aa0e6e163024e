"""
Configuration for the Film Catalog.
Values come from the environment; a .env file next to the working directory is loaded first.
"""

import os  # environment access
import sys  # stderr sink for logging

from dotenv import load_dotenv  # read .env into the environment
from loguru import logger  # console logger

# Load .env from the current working directory (no-op when absent)
load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
	"""Interpret common truthy strings ("1", "true", "yes", "on")."""
	value = os.getenv(name)
	if value is None:
		return default
	return value.strip().lower() in {'1', 'true', 'yes', 'on'}


class Config:
	DATABASE_URL = os.getenv('CATALOG_DATABASE_URL', 'sqlite:///film_catalog.db')  # SQLAlchemy URL
	ECHO_SQL = _env_flag('CATALOG_ECHO_SQL')  # log every statement via SQLAlchemy
	LOG_LEVEL = os.getenv('CATALOG_LOG_LEVEL', 'INFO').upper()  # loguru sink level


def configure_logging(level: str = Config.LOG_LEVEL):
	"""Reset loguru to a single stderr sink at the given level."""
	logger.remove()  # drop the default handler
	logger.add(sys.stderr, level=level)
	logger.debug(f"[Config] Logging configured at level {level}")
