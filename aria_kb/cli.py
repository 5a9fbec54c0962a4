#!/usr/bin/env python3
"""Command line entry point for the ARIA knowledge base builder

Example usage::

    aria-kb build                                 # config/aria_kb.yaml defaults
    aria-kb build --data-dir data --output data/aria-data.json
    python -m aria_kb.cli build --log-level DEBUG
"""
from __future__ import annotations

import argparse
import sys
from typing import Any, Dict

from aria_kb.core.config_loader import load_settings
from aria_kb.core.exceptions import ConfigurationError, PrimaryDocumentError
from aria_kb.core.logging_config import get_logger, setup_logging
from aria_kb.pipeline.aria_pipeline import AriaPipeline

EXIT_OK = 0
EXIT_FATAL = 1

logger = get_logger("cli")


def _build(args: argparse.Namespace) -> int:
    overrides: Dict[str, Any] = {}
    if args.data_dir:
        overrides["paths"] = {"data_dir": args.data_dir}
    if args.output:
        overrides.setdefault("paths", {})["output_file"] = args.output

    try:
        settings = load_settings(args.config, **overrides)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FATAL

    setup_logging(
        log_level=args.log_level or settings.logging.level,
        log_file=settings.logging.file,
    )

    try:
        AriaPipeline(settings).build()
    except PrimaryDocumentError as e:
        logger.error(str(e))
        return EXIT_FATAL

    logger.info("Done!")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="ARIA specification knowledge base builder")
    sub = parser.add_subparsers(dest="command")

    build_parser = sub.add_parser("build", help="Parse the ARIA sources and write the JSON dataset")
    build_parser.add_argument("--config", default=None, help="YAML config file")
    build_parser.add_argument("--data-dir", default=None, help="Directory containing aria/")
    build_parser.add_argument("--output", default=None, help="Output JSON file")
    build_parser.add_argument("--log-level", default=None,
                              choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    if args.command == "build":
        return _build(args)

    parser.error(f"Unknown command: {args.command}")
    return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
