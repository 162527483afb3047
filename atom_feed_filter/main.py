"""
Main entry point for Atom Feed Filter.

Either prints the filtered feed once or serves it over HTTP.
"""

import argparse
import asyncio
import logging
import sys
from typing import TextIO

import coloredlogs
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from atom_feed_filter.config import AppConfig, load_config
from atom_feed_filter.exceptions import FeedFilterError
from atom_feed_filter.fetcher import FeedFetcher
from atom_feed_filter.models import RenderTarget
from atom_feed_filter.pipeline import build_feed
from atom_feed_filter.server import serve

logger = logging.getLogger(__name__)


async def run_once(
    config: AppConfig,
    target: RenderTarget | None = None,
    out: TextIO | None = None,
) -> int:
    """
    Run the pipeline a single time and write the document.

    Parameters
    ----------
    config : AppConfig
        Application configuration.
    target : RenderTarget | None
        Output format, defaults to ``config.output_format``.
    out : TextIO | None
        Stream receiving the document, defaults to standard output.
        Nothing is written to it on failure.

    Returns
    -------
    int
        Process exit status.
    """
    if target is None:
        target = config.output_format
    if out is None:
        out = sys.stdout

    async with FeedFetcher(
        timeout=config.request_timeout,
        user_agent=config.user_agent,
        proxy_url=config.proxy,
    ) as fetcher:
        try:
            document = await build_feed(config, fetcher, target)
        except FeedFilterError as e:
            logger.error("Error: %s", e)
            return 1

    out.write(document)
    out.flush()
    return 0


def setup_logging(verbose: bool = False) -> None:
    """
    Configure application logging.

    Parameters
    ----------
    verbose : bool
        If True, set log level to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO

    coloredlogs.install(
        level=level,
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    # Reduce noise from third-party libraries
    if not verbose:
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atom-feed-filter",
        description="Filters Atom feed entries by keyword (default: 'article')",
    )
    parser.add_argument("-u", "--url", help="Atom feed URL to filter")
    parser.add_argument(
        "-f",
        "--filter-word",
        help="Filter keyword (default: 'article')",
    )
    parser.add_argument(
        "-p", "--port", type=int, help="Port to listen on (default: 3000)"
    )
    parser.add_argument("--host", help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument(
        "--serve-once",
        action="store_true",
        help="Print the filtered feed to standard output and exit",
    )
    parser.add_argument(
        "--format",
        choices=[target.value for target in RenderTarget],
        help="Format printed by --serve-once (default: rss)",
    )
    parser.add_argument("-c", "--config", help="Path to a YAML configuration file")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def _missing_url(error: ValidationError) -> bool:
    return any(
        err["loc"] == ("atom_feed_url",) and err["type"] == "missing"
        for err in error.errors()
    )


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_arg_parser().parse_args(argv)

    setup_logging(args.verbose)
    load_dotenv(override=False)

    overrides = {
        "atom_feed_url": args.url,
        "filter_word": args.filter_word,
        "port": args.port,
        "host": args.host,
        "output_format": args.format,
    }

    try:
        config = load_config(args.config, overrides)
    except ValidationError as e:
        if _missing_url(e):
            logger.error("No Atom feed URL provided.")
            logger.error(
                "Please set ATOM_FEED_URL environment variable or use --url option."
            )
        else:
            logger.error("Invalid configuration: %s", e)
        sys.exit(1)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error("Failed to load configuration: %s", e)
        sys.exit(1)

    if args.serve_once:
        sys.exit(asyncio.run(run_once(config)))

    serve(config)


if __name__ == "__main__":
    main()
