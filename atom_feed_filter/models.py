"""
Value types shared by every stage of the feed pipeline.

All types are frozen dataclasses: a feed is built once per fetch cycle
and never mutated afterwards.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class RenderTarget(str, Enum):
    """Output syndication format."""

    ATOM = "atom"
    RSS = "rss"

    @property
    def content_type(self) -> str:
        """HTTP content type for documents of this format."""
        if self is RenderTarget.ATOM:
            return "application/atom+xml"
        return "application/rss+xml"


@dataclass(frozen=True)
class FeedEntry:
    """
    A single syndicated entry.

    Attributes
    ----------
    id : str
        Identifier, unique within the feed and stable across fetches.
    title : str
        Entry title.
    link : str
        URL of the entry's alternate representation.
    summary : str
        Summary text, or the first content value when there is no summary.
    updated : datetime | None
        Last update time in UTC, None when missing or unparseable.
    author : str
        Name of the first author.
    summary_html : bool
        Whether ``summary`` holds HTML markup rather than plain text.
    """

    id: str
    title: str
    link: str = ""
    summary: str = ""
    updated: datetime | None = None
    author: str = ""
    summary_html: bool = False


@dataclass(frozen=True)
class Feed:
    """
    A parsed feed, entries in source document order.

    Attributes
    ----------
    title : str
        Feed title.
    description : str
        Feed description (the Atom subtitle).
    entries : tuple[FeedEntry, ...]
        Every entry the source provided.
    id : str
        Feed identifier.
    link : str
        URL of the site the feed belongs to.
    updated : datetime | None
        Feed-level update time in UTC.
    """

    title: str = ""
    description: str = ""
    entries: tuple[FeedEntry, ...] = ()
    id: str = ""
    link: str = ""
    updated: datetime | None = None

    @property
    def latest_update(self) -> datetime | None:
        """Newest entry timestamp, falling back to the feed's own."""
        stamps = [entry.updated for entry in self.entries if entry.updated is not None]
        if stamps:
            return max(stamps)
        return self.updated


@dataclass(frozen=True)
class FilteredFeed(Feed):
    """
    A feed reduced to the entries matching a keyword.

    Attributes
    ----------
    keyword : str
        Keyword the entries were selected with.
    source_entry_count : int
        Number of entries in the feed before filtering.
    """

    keyword: str = ""
    source_entry_count: int = 0
