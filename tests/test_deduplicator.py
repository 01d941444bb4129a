# tests/test_deduplicator.py

"""Tests for ListingDeduplicator."""

import unittest
from datetime import datetime, timedelta, timezone

from hackagg.filters.deduplicator import ListingDeduplicator
from hackagg.models.listing import Listing, RawListing

_T0 = datetime(2026, 10, 1, tzinfo=timezone.utc)


def _l(link: str, title: str = "Hack", source: str = "devpost") -> Listing:
    """Create a minimal Listing for testing."""
    return Listing(source=source, title=title, link=link)


class TestLinkKey(unittest.TestCase):
    """Link normalisation for comparison."""

    def test_host_case_ignored(self) -> None:
        """Scheme and host compare case-insensitively."""
        self.assertEqual(
            ListingDeduplicator.link_key("HTTPS://A.Example/Hack"),
            ListingDeduplicator.link_key("https://a.example/Hack"),
        )

    def test_path_case_kept(self) -> None:
        """Links differing only in path case are different listings."""
        self.assertNotEqual(
            ListingDeduplicator.link_key("https://ext.example/Hack"),
            ListingDeduplicator.link_key("https://ext.example/hack"),
        )

    def test_trailing_slash_kept(self) -> None:
        """A trailing slash makes a different link."""
        self.assertNotEqual(
            ListingDeduplicator.link_key("https://a.example/hack/"),
            ListingDeduplicator.link_key("https://a.example/hack"),
        )

    def test_fragment_ignored(self) -> None:
        """Fragments do not distinguish links."""
        self.assertEqual(
            ListingDeduplicator.link_key("https://a.example/x#rules"),
            "https://a.example/x",
        )

    def test_query_string_kept(self) -> None:
        """Query strings can identify different listings."""
        self.assertNotEqual(
            ListingDeduplicator.link_key("https://a.example/e?id=1"),
            ListingDeduplicator.link_key("https://a.example/e?id=2"),
        )

    def test_empty(self) -> None:
        """Empty links map to an empty key."""
        self.assertEqual(ListingDeduplicator.link_key(""), "")


class TestDeduplicateRaw(unittest.TestCase):
    """Per-adapter raw record dedup."""

    def test_first_occurrence_kept(self) -> None:
        """Without modification signals the first record wins."""
        records = [
            RawListing(title="First", link="https://a.example/1"),
            RawListing(title="Other", link="https://a.example/2"),
            RawListing(title="Second", link="https://a.example/1"),
        ]
        kept, removed = ListingDeduplicator.deduplicate_raw(records)
        self.assertEqual(removed, 1)
        self.assertEqual([r.title for r in kept], ["First", "Other"])

    def test_newer_record_takes_first_position(self) -> None:
        """A more recently updated duplicate replaces the first in place."""
        records = [
            RawListing(title="Old", link="https://a.example/1", updated_at=_T0),
            RawListing(title="Other", link="https://a.example/2"),
            RawListing(
                title="New",
                link="https://a.example/1",
                updated_at=_T0 + timedelta(days=1),
            ),
        ]
        kept, _ = ListingDeduplicator.deduplicate_raw(records)
        self.assertEqual([r.title for r in kept], ["New", "Other"])

    def test_older_record_does_not_replace(self) -> None:
        """An older duplicate is simply dropped."""
        records = [
            RawListing(title="New", link="https://a.example/1", updated_at=_T0),
            RawListing(
                title="Old",
                link="https://a.example/1",
                updated_at=_T0 - timedelta(days=1),
            ),
        ]
        kept, _ = ListingDeduplicator.deduplicate_raw(records)
        self.assertEqual([r.title for r in kept], ["New"])

    def test_one_sided_signal_keeps_first(self) -> None:
        """A tie-break needs a signal on both duplicates."""
        records = [
            RawListing(title="First", link="https://a.example/1"),
            RawListing(title="Dated", link="https://a.example/1", updated_at=_T0),
        ]
        kept, _ = ListingDeduplicator.deduplicate_raw(records)
        self.assertEqual([r.title for r in kept], ["First"])

    def test_linkless_records_pass_through(self) -> None:
        """Records without a link are left for the normalizer."""
        records = [RawListing(title="A"), RawListing(title="B")]
        kept, removed = ListingDeduplicator.deduplicate_raw(records)
        self.assertEqual(len(kept), 2)
        self.assertEqual(removed, 0)


class TestDeduplicate(unittest.TestCase):
    """Normalized listing dedup."""

    def test_first_seen_wins(self) -> None:
        """Later duplicates are removed, order preserved."""
        items = [_l("https://a/1", "A"), _l("https://a/2", "B"), _l("https://a/1", "C")]
        kept, removed = ListingDeduplicator.deduplicate(items)
        self.assertEqual([i.title for i in kept], ["A", "B"])
        self.assertEqual(removed, 1)

    def test_shared_seen_set_spans_batches(self) -> None:
        """A shared set removes links seen in an earlier source."""
        seen: set[str] = set()
        first, _ = ListingDeduplicator.deduplicate([_l("https://x/1")], seen)
        second, removed = ListingDeduplicator.deduplicate(
            [_l("https://x/1", source="github"), _l("https://x/2", source="github")],
            seen,
        )
        self.assertEqual(len(first), 1)
        self.assertEqual([i.link for i in second], ["https://x/2"])
        self.assertEqual(removed, 1)

    def test_path_case_variants_both_kept(self) -> None:
        """Only identical links collapse."""
        items = [_l("https://ext.example/Hack", "A"), _l("https://ext.example/hack", "B")]
        kept, removed = ListingDeduplicator.deduplicate(items)
        self.assertEqual([i.title for i in kept], ["A", "B"])
        self.assertEqual(removed, 0)

    def test_empty(self) -> None:
        """No listings, nothing removed."""
        self.assertEqual(ListingDeduplicator.deduplicate([]), ([], 0))


if __name__ == "__main__":
    unittest.main()
