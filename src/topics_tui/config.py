from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from datetime import datetime
from typing import Any, Dict, List, Optional

# --- Configuration ---
TOPICS_URL = "https://jsonplaceholder.typicode.com/posts"
TOPICS_LIMIT = 5
HTTP_TIMEOUT = 15

CONFIG_PATH = os.path.expanduser("~/.config/topics/config.json")

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:115.0) "
        "Gecko/20100101 Firefox/115.0"
    ),
    "Accept": "application/json",
}
RETRY_TOTAL = 3
RETRY_BACKOFF = 0.3
RETRY_STATUSES = [429, 500, 502, 503, 504]

DEFAULT_CREDENTIALS: List[Dict[str, str]] = [
    {"email": "john@example.com", "password": "john123", "name": "John"},
    {"email": "jane@example.com", "password": "jane123", "name": "Jane"},
]

# Default UI settings
UI_DEFAULTS = {
    "statusbar_keybindings": (
        "[b {color}]r[/] refresh, [b {color}]p[/] profile, [b {color}]ctrl+q[/] quit"
    ),
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "source": "placeholder",
    "sources": {
        "placeholder": {"url": TOPICS_URL, "limit": TOPICS_LIMIT},
        "rss": {"url": "", "limit": TOPICS_LIMIT},
    },
    "credentials": DEFAULT_CREDENTIALS,
    "theme": "textual-dark",
    "ui": UI_DEFAULTS,
}

# --- Logging ---
logger = logging.getLogger("topics")

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
DEBUG_LOG_DIR = tempfile.gettempdir()


def setup_logging(debug: bool = False, log_dir: str = DEBUG_LOG_DIR) -> Optional[str]:
    """Route the "topics" logger to a per-run file when debugging.

    Without ``debug`` the logger only gets a NullHandler, so nothing reaches
    the terminal the TUI is drawing on. Returns the log file path, if any.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False
    if not debug:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL)
        return None

    stamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    debug_path = os.path.join(log_dir, f"topics_{stamp}_{os.getpid()}.log")
    handler = logging.FileHandler(debug_path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def ensure_config_file_exists() -> None:
    """Write the default config file if the user's config file is not found."""
    if not os.path.exists(CONFIG_PATH):
        logger.info("Config file not found at %s, creating default.", CONFIG_PATH)
        save_config(DEFAULT_CONFIG)


def load_config() -> Dict[str, Any]:
    """Load the main configuration file, filling in missing keys from defaults."""
    ensure_config_file_exists()
    config = copy.deepcopy(DEFAULT_CONFIG)
    try:
        with open(CONFIG_PATH, "r") as f:
            config.update(json.load(f))
        logger.info("Loaded config from %s", CONFIG_PATH)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", CONFIG_PATH, e)
    return config


def save_config(config: Dict[str, Any]) -> None:
    """Save the main configuration file."""
    try:
        os.makedirs(os.path.dirname(CONFIG_PATH), exist_ok=True)
        with open(CONFIG_PATH, "w") as f:
            json.dump(config, f, indent=2)
        logger.info("Saved config to %s", CONFIG_PATH)
    except IOError as e:
        logger.error("Failed to save config to %s: %s", CONFIG_PATH, e)
