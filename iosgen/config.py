"""Centralized config loading, read once at import time."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load .env from project root (parent of iosgen/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

_config = yaml.safe_load(CONFIG_PATH.read_text())


def get_config() -> dict:
    """Return the loaded config dictionary."""
    return _config


def get_api_url() -> str:
    """Return the build service base URL. IOSGEN_API_URL wins over config.yaml."""
    return os.environ.get("IOSGEN_API_URL") or get_config()["api_url"]
