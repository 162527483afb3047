"""
Shared fixtures for Atom Feed Filter tests.

Provides common test fixtures for use across all test modules.
"""

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from atom_feed_filter.config import AppConfig
from atom_feed_filter.models import Feed, FeedEntry


# Path to test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

FEED_URL = "https://example.com/repo/commits/main.atom"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_atom_path(fixtures_dir: Path) -> Path:
    """Return path to sample Atom feed file."""
    return fixtures_dir / "sample_atom.xml"


@pytest.fixture
def sample_rss_path(fixtures_dir: Path) -> Path:
    """Return path to sample RSS feed file."""
    return fixtures_dir / "sample_rss.xml"


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    """Return path to sample config file."""
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def sample_atom_content(sample_atom_path: Path) -> str:
    """Return contents of sample Atom feed."""
    return sample_atom_path.read_text()


@pytest.fixture
def sample_rss_content(sample_rss_path: Path) -> str:
    """Return contents of sample RSS feed."""
    return sample_rss_path.read_text()


@pytest.fixture
def sample_entries() -> tuple[FeedEntry, ...]:
    """
    Create entries covering matches in title, summary and neither.

    Returns
    -------
    tuple[FeedEntry, ...]
        Three entries in reverse-chronological order.
    """
    return (
        FeedEntry(
            id="tag:example.com,2024:1",
            title="New article: X",
            link="https://example.com/1",
            summary="First post",
            updated=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
            author="Alice",
        ),
        FeedEntry(
            id="tag:example.com,2024:2",
            title="Release notes",
            link="https://example.com/2",
            summary="Nothing to see",
            updated=datetime(2024, 2, 1, 9, 30, tzinfo=timezone.utc),
        ),
        FeedEntry(
            id="tag:example.com,2024:3",
            title="Weekly digest",
            link="https://example.com/3",
            summary="Links to an Article we liked",
            updated=None,
        ),
    )


@pytest.fixture
def sample_feed(sample_entries: tuple[FeedEntry, ...]) -> Feed:
    """Create a feed holding the sample entries."""
    return Feed(
        title="Example Feed",
        description="Example description",
        entries=sample_entries,
        id="tag:example.com,2024:feed",
        link="https://example.com/",
    )


@pytest.fixture
def minimal_app_config() -> AppConfig:
    """Create a minimal valid app configuration."""
    return AppConfig(atom_feed_url=FEED_URL)


@pytest.fixture
def mock_fetcher(sample_atom_content: str) -> MagicMock:
    """
    Create a mock fetcher returning the sample Atom feed.

    Returns
    -------
    MagicMock
        A FeedFetcher stand-in with ``fetch`` and ``close`` mocked.
    """
    fetcher = MagicMock()
    fetcher.fetch = AsyncMock(return_value=sample_atom_content)
    fetcher.close = AsyncMock()
    return fetcher
