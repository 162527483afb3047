"""
The fetch, parse, filter and render cycle.

Each call runs the whole cycle from scratch; nothing is cached between
calls.
"""

import logging
from dataclasses import replace

from atom_feed_filter.atom_parser import parse_feed
from atom_feed_filter.config import AppConfig
from atom_feed_filter.fetcher import FeedFetcher
from atom_feed_filter.filters import filter_feed
from atom_feed_filter.models import Feed, RenderTarget
from atom_feed_filter.renderer import render_feed

logger = logging.getLogger(__name__)


def site_link(feed_url: str) -> str:
    """Guess the site URL of a feed URL, e.g. ``.../commits/main.atom``."""
    return feed_url.removesuffix(".atom")


def apply_fallbacks(feed: Feed, config: AppConfig) -> Feed:
    """
    Fill in metadata the source feed does not provide.

    Parameters
    ----------
    feed : Feed
        The parsed source feed.
    config : AppConfig
        Configuration holding the fallback values.

    Returns
    -------
    Feed
        The feed with title, description, link and id set.
    """
    return replace(
        feed,
        title=feed.title or config.title_fallback,
        description=feed.description or config.description_fallback,
        link=feed.link or site_link(config.atom_feed_url),
        id=feed.id or config.atom_feed_url,
    )


async def build_feed(
    config: AppConfig, fetcher: FeedFetcher, target: RenderTarget
) -> str:
    """
    Produce the filtered feed document.

    Parameters
    ----------
    config : AppConfig
        Source URL, keyword and fallback metadata.
    fetcher : FeedFetcher
        Client used to retrieve the source feed.
    target : RenderTarget
        Output format.

    Returns
    -------
    str
        The rendered document.

    Raises
    ------
    FetchError
        If the source cannot be retrieved.
    ParseError
        If the source is not a readable Atom feed.
    RenderError
        If rendering hits an internal invariant violation.
    """
    logger.info("Fetching %s", config.atom_feed_url)
    content = await fetcher.fetch(config.atom_feed_url)

    feed = apply_fallbacks(parse_feed(content), config)
    filtered = filter_feed(feed, config.filter_word)

    return render_feed(filtered, target)
