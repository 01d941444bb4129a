# tests/test_github_adapter.py

"""Tests for the GitHub adapter using mocked HTTP responses."""

import json
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

from hackagg.adapters.base_adapter import SourceFetchError
from hackagg.adapters.github_adapter import GithubAdapter

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _make_mock_response(text: str, status: int = 200) -> MagicMock:
    """Create a mock response carrying *text*."""
    mock_resp = MagicMock()
    mock_resp.status_code = status
    mock_resp.text = text
    return mock_resp


def _fixture_response() -> MagicMock:
    """Mock response for the GitHub search fixture."""
    return _make_mock_response(
        (FIXTURES_DIR / "github_search.json").read_text(encoding="utf-8")
    )


@patch("hackagg.adapters.base_adapter.curl_requests.Session")
class TestGithubAdapter(unittest.TestCase):
    """Tests for the GitHub adapter using mocked HTTP responses."""

    def _adapter(
        self,
        mock_session_cls: MagicMock,
        *responses: MagicMock,
        token: str | None = None,
    ) -> GithubAdapter:
        """Adapter whose session returns *responses* in order."""
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.side_effect = list(responses)
        adapter = GithubAdapter(token=token)
        adapter.session = mock_session
        return adapter

    def test_newer_duplicate_replaces_older(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Duplicate html_url keeps first position, newest content."""
        adapter = self._adapter(mock_session_cls, _fixture_response())
        records = adapter.fetch()
        self.assertEqual(len(records), 2)
        self.assertEqual(
            records[0].title, "octo-org/hackathon-starter-renamed"
        )
        self.assertEqual(records[1].title, "campus/student-hack-week")

    def test_fields_parsed(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Topics, description and pushed_at are mapped."""
        adapter = self._adapter(mock_session_cls, _fixture_response())
        first = adapter.fetch()[0]
        self.assertEqual(
            first.link, "https://github.com/octo-org/hackathon-starter"
        )
        self.assertEqual(first.tags, ["hackathon"])
        self.assertEqual(first.prize_text, "")
        self.assertEqual(
            first.updated_at,
            datetime(2026, 10, 2, 9, 0, tzinfo=timezone.utc),
        )

    def test_null_description_and_topics(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Null description/topics become empty values."""
        adapter = self._adapter(mock_session_cls, _fixture_response())
        second = adapter.fetch()[1]
        self.assertEqual(second.description, "")
        self.assertEqual(second.tags, [])

    def test_token_sent_as_authorization(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A configured token is sent in the Authorization header."""
        adapter = self._adapter(
            mock_session_cls, _fixture_response(), token="ghp_test"
        )
        adapter.fetch()
        headers = adapter.session.get.call_args.kwargs["headers"]
        self.assertEqual(headers["Authorization"], "token ghp_test")

    def test_no_token_no_authorization(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Anonymous requests carry no Authorization header."""
        adapter = self._adapter(mock_session_cls, _fixture_response())
        adapter.fetch()
        headers = adapter.session.get.call_args.kwargs["headers"]
        self.assertNotIn("Authorization", headers)

    def test_search_query_in_url(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """The search targets recently pushed hackathon repos."""
        adapter = self._adapter(mock_session_cls, _fixture_response())
        adapter.fetch()
        url = adapter.session.get.call_args.args[0]
        self.assertIn("q=hackathon%20in%3Aname%2Cdescription", url)
        self.assertIn("pushed%3A%3E%3D", url)
        self.assertIn("sort=updated", url)
        self.assertIn("per_page=30", url)

    def test_short_page_stops_pagination(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Fewer items than per_page means no further pages."""
        adapter = self._adapter(mock_session_cls, _fixture_response())
        adapter.fetch()
        self.assertEqual(adapter.session.get.call_count, 1)

    def test_full_page_fetches_next(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A full first page leads to a second request."""
        per_page = 30
        page1 = {
            "total_count": 40,
            "items": [
                {"full_name": f"o/r{i}", "html_url": f"https://github.com/o/r{i}"}
                for i in range(per_page)
            ],
        }
        page2 = {
            "total_count": 40,
            "items": [
                {"full_name": "o/last", "html_url": "https://github.com/o/last"}
            ],
        }
        adapter = self._adapter(
            mock_session_cls,
            _make_mock_response(json.dumps(page1)),
            _make_mock_response(json.dumps(page2)),
        )
        records = adapter.fetch()
        self.assertEqual(len(records), per_page + 1)
        self.assertIn("page=2", adapter.session.get.call_args.args[0])

    def test_rate_limited_first_page_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A 403 on the first page is an adapter failure."""
        adapter = self._adapter(
            mock_session_cls,
            _make_mock_response('{"message": "API rate limit exceeded"}', 403),
        )
        with self.assertRaises(SourceFetchError):
            adapter.fetch()


if __name__ == "__main__":
    unittest.main()
