# main.py

"""Entry point for the Rumi storefront (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from storefront.config.logging_config import setup_logging
from storefront.config.settings import Settings

logger = logging.getLogger("storefront.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description=f"{Settings.BRAND_NAME} storefront.",
        epilog=f"Categories: {', '.join(Settings.CATEGORIES)}",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        default=False,
        dest="list_products",
        help="Print the catalog and exit.",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="With --list: only this category.",
    )
    parser.add_argument(
        "-s",
        "--search",
        default=None,
        help="With --list: search name, category and subcategory.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="With --list: output format (default: table).",
    )
    parser.add_argument(
        "--import",
        default=None,
        dest="import_file",
        metavar="FILE",
        help="Bulk-import a JSON array of products.",
    )
    parser.add_argument(
        "--ask",
        default=None,
        metavar="QUESTION",
        help="Ask the AI beauty advisor one question.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Check the catalog table and image bucket.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from storefront.ui.app import StorefrontApp

    try:
        app = StorefrontApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("Storefront TUI shutting down")


def main() -> None:
    """Route to the TUI (no args) or a headless command."""
    log_file = setup_logging()
    logger.info("Storefront starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    from storefront.cli import runner

    if args.health:
        sys.exit(asyncio.run(runner.run_health_check()))
    elif args.import_file:
        sys.exit(asyncio.run(runner.cli_import(args.import_file)))
    elif args.ask:
        sys.exit(asyncio.run(runner.cli_ask(args.ask)))
    elif args.list_products:
        sys.exit(
            asyncio.run(
                runner.cli_list(
                    args.category, args.search, args.output_format
                )
            )
        )
    else:
        _run_tui()


if __name__ == "__main__":
    main()
