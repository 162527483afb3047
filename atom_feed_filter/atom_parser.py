"""
Atom feed parsing module.

Turns a raw Atom document into a Feed using feedparser. Broken entries
are skipped with a warning so the rest of the feed survives.
"""

import calendar
import logging
import time
from datetime import datetime, timezone
from typing import Any

import feedparser

from atom_feed_filter.exceptions import ParseError, ParseErrorKind
from atom_feed_filter.models import Feed, FeedEntry

logger = logging.getLogger(__name__)

HTML_TYPES = ("text/html", "application/xhtml+xml")


def _to_datetime(value: Any) -> datetime | None:
    """Convert a feedparser UTC time tuple to an aware datetime."""
    if not isinstance(value, time.struct_time):
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    except (OverflowError, ValueError, OSError):
        return None


def _select_link(entry: Any) -> str:
    """
    Pick the entry's link.

    Prefers the first ``rel="alternate"`` link, then the first link of
    any relation.
    """
    links = [link for link in entry.get("links", []) if link.get("href")]
    for link in links:
        if link.get("rel", "alternate") == "alternate":
            return link["href"]
    if links:
        return links[0]["href"]
    return entry.get("link", "")


def _extract_summary(entry: Any) -> tuple[str, bool]:
    """Return the summary text and whether it is HTML."""
    if entry.get("summary"):
        detail = entry.get("summary_detail") or {}
        return entry["summary"], detail.get("type") in HTML_TYPES

    for content in entry.get("content") or []:
        if content.get("value"):
            return content["value"], content.get("type") in HTML_TYPES

    return "", False


def _extract_author(entry: Any) -> str:
    if entry.get("author"):
        return entry["author"]
    detail = entry.get("author_detail") or {}
    return detail.get("name", "")


def parse_entry(entry: Any) -> FeedEntry:
    """
    Build a FeedEntry from a feedparser entry.

    Parameters
    ----------
    entry : Any
        A feedparser entry.

    Returns
    -------
    FeedEntry
        The normalized entry.

    Raises
    ------
    ParseError
        If the entry has no title, or neither an id nor a link.
    """
    link = _select_link(entry)
    entry_id = entry.get("id") or link
    if not entry_id:
        raise ParseError(ParseErrorKind.MISSING_REQUIRED_FIELD, "entry has no id")
    if "title" not in entry:
        raise ParseError(
            ParseErrorKind.MISSING_REQUIRED_FIELD, f"entry '{entry_id}' has no title"
        )

    summary, summary_html = _extract_summary(entry)
    updated = _to_datetime(entry.get("updated_parsed")) or _to_datetime(
        entry.get("published_parsed")
    )
    if updated is None and entry.get("updated"):
        logger.debug(
            "Entry '%s' has an unparseable timestamp: %s", entry_id, entry["updated"]
        )

    return FeedEntry(
        id=entry_id,
        title=entry["title"],
        link=link,
        summary=summary,
        updated=updated,
        author=_extract_author(entry),
        summary_html=summary_html,
    )


def parse_feed(content: str | bytes) -> Feed:
    """
    Parse an Atom document.

    Parameters
    ----------
    content : str | bytes
        Raw Atom XML. Bytes are decoded by feedparser using the encoding
        in the XML declaration.

    Returns
    -------
    Feed
        The feed with every entry that could be read, in document order.

    Raises
    ------
    ParseError
        If the document is not well-formed enough to be recognised as a
        feed, or is a feed of another format.
    """
    # Strip leading whitespace - some servers return content with
    # leading newlines which breaks XML declaration parsing
    content = content.lstrip()
    parsed: Any = feedparser.parse(content)
    version = parsed.get("version", "")

    if not version:
        if parsed.bozo:
            raise ParseError(
                ParseErrorKind.MALFORMED_XML,
                f"Document is not well-formed: {parsed.get('bozo_exception')}",
            )
        raise ParseError(
            ParseErrorKind.UNEXPECTED_SCHEMA, "Document is not a syndication feed"
        )
    if not version.startswith("atom"):
        raise ParseError(
            ParseErrorKind.UNEXPECTED_SCHEMA,
            f"Expected an Atom feed, got '{version}'",
        )

    if parsed.bozo:
        logger.warning("Feed has parsing issues: %s", parsed.get("bozo_exception"))

    entries = []
    for position, entry in enumerate(parsed.entries, start=1):
        try:
            entries.append(parse_entry(entry))
        except ParseError as e:
            logger.warning("Skipping entry %d: %s", position, e)

    meta = parsed.feed
    feed = Feed(
        title=meta.get("title", ""),
        description=meta.get("subtitle", ""),
        entries=tuple(entries),
        id=meta.get("id", ""),
        link=meta.get("link", ""),
        updated=_to_datetime(meta.get("updated_parsed")),
    )

    logger.info("Parsed %d entries from '%s'", len(feed.entries), feed.title)
    return feed
