"""
Keyword filtering for feed entries.

An entry matches when the keyword appears, ignoring case, in its title
or its summary. An empty keyword matches nothing.
"""

import logging

from atom_feed_filter.models import Feed, FeedEntry, FilteredFeed

logger = logging.getLogger(__name__)


def matches_keyword(entry: FeedEntry, keyword: str) -> bool:
    """
    Check whether an entry contains a keyword.

    Parameters
    ----------
    entry : FeedEntry
        The entry to check.
    keyword : str
        Keyword to look for, case-insensitively.

    Returns
    -------
    bool
        True if the keyword occurs in the title or the summary.
    """
    if not keyword:
        return False

    needle = keyword.lower()
    return needle in entry.title.lower() or needle in entry.summary.lower()


def filter_feed(feed: Feed, keyword: str) -> FilteredFeed:
    """
    Keep the entries of a feed that contain a keyword.

    Parameters
    ----------
    feed : Feed
        Feed to filter.
    keyword : str
        Keyword entries must contain.

    Returns
    -------
    FilteredFeed
        The feed's metadata with the matching entries, in their original
        order.
    """
    if not keyword:
        logger.warning("Empty filter keyword, no entries will match")

    kept = tuple(entry for entry in feed.entries if matches_keyword(entry, keyword))

    logger.info(
        "Filtered %d entries down to %d",
        len(feed.entries),
        len(kept),
    )

    return FilteredFeed(
        title=feed.title,
        description=feed.description,
        entries=kept,
        id=feed.id,
        link=feed.link,
        updated=feed.updated,
        keyword=keyword,
        source_entry_count=len(feed.entries),
    )
