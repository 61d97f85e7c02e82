#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys

from .app import TopicsApp
from .config import load_config, setup_logging
from .source_manager import SOURCES

logger = logging.getLogger("topics")


# --- Entrypoint ---
def main() -> None:
    parser = argparse.ArgumentParser(description="Topics TUI learning client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--theme", type=str, help="Set the Textual theme for this run")
    parser.add_argument(
        "--source",
        choices=sorted(SOURCES),
        help="Topic source to use instead of the configured one",
    )
    args = parser.parse_args()

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    if args.source:
        config["source"] = args.source
    theme_name = args.theme or config.get("theme")

    logger.info("Using source %s, theme %s", config.get("source"), theme_name)

    try:
        app = TopicsApp(theme=theme_name, config=config)
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)


if __name__ == "__main__":
    main()
