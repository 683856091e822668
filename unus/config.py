"""
Runtime configuration.

Settings come from the environment (optionally via a .env file).
Cryptographic parameters are protocol constants in unus.ecies and are
not configurable here.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Storage ---
DATABASE_PATH = os.getenv("UNUS_DATABASE_PATH", "unus.db")

# --- Payload limits ---
MAX_SECRET_BYTES = int(os.getenv("UNUS_MAX_SECRET_BYTES", "1048576"))  # 1 MiB


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging once for scripts and the entry point."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
