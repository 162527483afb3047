"""
Unit tests for the filtering module.

Tests cover keyword matching and the filter_feed function.
"""

import pytest

from atom_feed_filter.filters import filter_feed, matches_keyword
from atom_feed_filter.models import Feed, FeedEntry, FilteredFeed


class TestMatchesKeyword:
    """Tests for matches_keyword."""

    @pytest.mark.parametrize(
        "title",
        [
            "New Article about Rust",
            "ARTICLE: How to code",
            "Updated article on web dev",
        ],
    )
    def test_title_match_case_insensitive(self, title: str) -> None:
        """Test case-insensitive matching on the title."""
        entry = FeedEntry(id="1", title=title)

        assert matches_keyword(entry, "article")

    @pytest.mark.parametrize("title", ["Fix bug in parser", "Update README"])
    def test_no_match(self, title: str) -> None:
        """Test entries without the keyword do not match."""
        entry = FeedEntry(id="1", title=title, summary="nothing relevant")

        assert not matches_keyword(entry, "article")

    def test_summary_match(self) -> None:
        """Test that a match in the summary is enough."""
        entry = FeedEntry(id="1", title="Weekly digest", summary="An Article we liked")

        assert matches_keyword(entry, "article")

    def test_keyword_case_ignored(self) -> None:
        """Test that the keyword's own case does not matter."""
        entry = FeedEntry(id="1", title="security advisory")

        assert matches_keyword(entry, "SECURITY")

    def test_substring_match(self) -> None:
        """Test that the keyword may occur inside a word."""
        entry = FeedEntry(id="1", title="Articles of the week")

        assert matches_keyword(entry, "article")

    def test_sharp_s_not_expanded(self) -> None:
        """Test that plain lowercasing is used, so 'ß' does not match 'ss'."""
        entry = FeedEntry(id="1", title="Meet the boss")

        assert not matches_keyword(entry, "ß")
        assert matches_keyword(FeedEntry(id="2", title="STRAßE"), "straße")

    def test_empty_keyword_matches_nothing(self) -> None:
        """Test that an empty keyword never matches."""
        entry = FeedEntry(id="1", title="Anything at all", summary="Really anything")

        assert not matches_keyword(entry, "")


class TestFilterFeed:
    """Tests for filter_feed."""

    def test_scenario_article(self) -> None:
        """Test that only the entry mentioning the keyword is kept."""
        feed = Feed(
            title="Feed",
            entries=(
                FeedEntry(id="1", title="New article: X"),
                FeedEntry(id="2", title="Release notes"),
            ),
        )

        filtered = filter_feed(feed, "article")

        assert [entry.title for entry in filtered.entries] == ["New article: X"]

    def test_returns_filtered_feed(self, sample_feed: Feed) -> None:
        """Test metadata is carried over onto the FilteredFeed."""
        filtered = filter_feed(sample_feed, "article")

        assert isinstance(filtered, FilteredFeed)
        assert filtered.title == sample_feed.title
        assert filtered.description == sample_feed.description
        assert filtered.id == sample_feed.id
        assert filtered.link == sample_feed.link
        assert filtered.keyword == "article"
        assert filtered.source_entry_count == 3

    def test_order_preserving_subsequence(self, sample_feed: Feed) -> None:
        """Test kept entries are the matching ones, in source order."""
        filtered = filter_feed(sample_feed, "article")

        kept_ids = [entry.id for entry in filtered.entries]
        assert kept_ids == ["tag:example.com,2024:1", "tag:example.com,2024:3"]

        for entry in sample_feed.entries:
            text = f"{entry.title}\n{entry.summary}".lower()
            assert (entry.id in kept_ids) == ("article" in text)

    def test_entries_not_copied(self, sample_feed: Feed) -> None:
        """Test kept entries are the original objects."""
        filtered = filter_feed(sample_feed, "release")

        assert filtered.entries[0] is sample_feed.entries[1]

    def test_deterministic(self, sample_feed: Feed) -> None:
        """Test identical inputs produce identical results."""
        assert filter_feed(sample_feed, "article") == filter_feed(sample_feed, "article")

    def test_empty_feed(self) -> None:
        """Test a feed without entries filters to no entries."""
        filtered = filter_feed(Feed(title="Empty"), "article")

        assert filtered.entries == ()
        assert filtered.source_entry_count == 0

    def test_empty_keyword(
        self, sample_feed: Feed, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that an empty keyword drops every entry and warns."""
        filtered = filter_feed(sample_feed, "")

        assert filtered.entries == ()
        assert "empty filter keyword" in caplog.text.lower()
