"""
Feed serialization to Atom 1.0 and RSS 2.0.

Rendering depends only on the feed passed in, so the same feed always
produces the same document.
"""

import logging
import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime

from atom_feed_filter.exceptions import RenderError, RenderErrorKind
from atom_feed_filter.models import FeedEntry, FilteredFeed, RenderTarget

logger = logging.getLogger(__name__)

ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"
GENERATOR = "Atom Feed Filter"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'

# Atom requires <updated>; used when neither the entries nor the feed have one
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Code points XML 1.0 does not allow, even escaped
_INVALID_XML_CHARS = re.compile(
    "[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)


def _clean(text: str) -> str:
    return _INVALID_XML_CHARS.sub("", text)


def _add(parent: ET.Element, tag: str, text: str | None = None, **attrib: str) -> ET.Element:
    """Append a child element with sanitized text and attributes."""
    element = ET.SubElement(parent, tag, {k: _clean(v) for k, v in attrib.items()})
    if text is not None:
        element.text = _clean(text)
    return element


def format_atom_date(value: datetime) -> str:
    """Format a timestamp as an RFC 3339 UTC date."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_rss_date(value: datetime) -> str:
    """Format a timestamp as an RFC 822 date."""
    return format_datetime(value.astimezone(timezone.utc))


def _check_entries(feed: FilteredFeed) -> None:
    for entry in feed.entries:
        if not isinstance(entry, FeedEntry):
            raise RenderError(
                RenderErrorKind.INVALID_ENTRY,
                f"Expected FeedEntry, got {type(entry).__name__}",
            )


def _build_atom(feed: FilteredFeed) -> ET.Element:
    root = ET.Element("feed", {"xmlns": ATOM_NAMESPACE})
    _add(root, "title", feed.title)
    if feed.description:
        _add(root, "subtitle", feed.description)
    if feed.id:
        _add(root, "id", feed.id)
    if feed.link:
        _add(root, "link", rel="alternate", href=feed.link)
    feed_updated = feed.latest_update or EPOCH
    _add(root, "updated", format_atom_date(feed_updated))
    _add(root, "generator", GENERATOR)

    for entry in feed.entries:
        item = _add(root, "entry")
        _add(item, "id", entry.id)
        _add(item, "title", entry.title)
        if entry.link:
            _add(item, "link", rel="alternate", href=entry.link)
        if entry.summary_html:
            _add(item, "summary", entry.summary, type="html")
        else:
            _add(item, "summary", entry.summary)
        _add(item, "updated", format_atom_date(entry.updated or feed_updated))
        if entry.author:
            author = _add(item, "author")
            _add(author, "name", entry.author)

    return root


def _build_rss(feed: FilteredFeed) -> ET.Element:
    root = ET.Element("rss", {"version": "2.0"})
    channel = _add(root, "channel")
    _add(channel, "title", feed.title)
    _add(channel, "link", feed.link)
    _add(channel, "description", feed.description)
    _add(channel, "language", "en-us")
    _add(channel, "generator", GENERATOR)
    updated = feed.latest_update
    if updated is not None:
        _add(channel, "lastBuildDate", format_rss_date(updated))

    for entry in feed.entries:
        item = _add(channel, "item")
        _add(item, "title", entry.title)
        if entry.link:
            _add(item, "link", entry.link)
            _add(item, "guid", entry.link, isPermaLink="true")
        else:
            _add(item, "guid", entry.id, isPermaLink="false")
        _add(item, "description", entry.summary)
        if entry.updated is not None:
            _add(item, "pubDate", format_rss_date(entry.updated))

    return root


def render_feed(feed: FilteredFeed, target: RenderTarget) -> str:
    """
    Serialize a filtered feed.

    Parameters
    ----------
    feed : FilteredFeed
        Feed to serialize.
    target : RenderTarget
        Output format.

    Returns
    -------
    str
        A complete XML document, declaration included.

    Raises
    ------
    RenderError
        If the target is unknown or the feed holds something other than
        FeedEntry instances.
    """
    _check_entries(feed)

    if target is RenderTarget.ATOM:
        root = _build_atom(feed)
    elif target is RenderTarget.RSS:
        root = _build_rss(feed)
    else:
        raise RenderError(RenderErrorKind.UNKNOWN_TARGET, f"Unknown target: {target!r}")

    ET.indent(root)
    document = XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"

    logger.debug("Rendered %d entries as %s", len(feed.entries), target.value)
    return document
