# tests/test_api.py

"""Tests for the FastAPI hackathons endpoint."""

import unittest
from typing import Any
from unittest.mock import patch

from fastapi.testclient import TestClient

from hackagg.api.app import create_app
from hackagg.services.aggregator import HackathonAggregator
from hackagg.storage.aggregation_cache import AggregationCache


class _Adapter:
    """Adapter returning fixed dict records."""

    def __init__(self, source_id: str, records: list[dict[str, Any]]) -> None:
        self.source_id = source_id
        self.base_url = f"https://{source_id}.example"
        self.records = records

    def fetch(self) -> list[dict[str, Any]]:
        return list(self.records)


def _client() -> TestClient:
    """TestClient over two stub sources."""
    cache = AggregationCache(
        [
            _Adapter(
                "devpost",
                [
                    {
                        "title": "ML Weekend",
                        "link": "https://devpost.example/ml",
                        "description": "machine learning",
                        "prizeText": "$10,000",
                    },
                    {
                        "title": "Student Jam",
                        "link": "https://devpost.example/jam",
                        "tags": ["student"],
                        "prizeText": "2K",
                    },
                ],
            ),
            _Adapter(
                "github",
                [{"title": "octo/hack", "link": "https://github.com/octo/hack"}],
            ),
        ],
        clock=lambda: 0.0,
    )
    return TestClient(create_app(HackathonAggregator(cache)))


class TestHackathonsEndpoint(unittest.TestCase):
    """GET /api/hackathons."""

    def test_defaults_return_everything(self) -> None:
        """No parameters lists every source in order."""
        resp = _client().get("/api/hackathons")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["ok"])
        self.assertEqual(body["count"], 3)
        self.assertEqual(
            [item["source"] for item in body["data"]],
            ["devpost", "devpost", "github"],
        )

    def test_cache_control_header(self) -> None:
        """Successful responses allow brief shared caching."""
        resp = _client().get("/api/hackathons")
        self.assertEqual(
            resp.headers["cache-control"],
            "s-maxage=60, stale-while-revalidate=120",
        )

    def test_filter_and_min_prize(self) -> None:
        """filter and minPrize query parameters are applied."""
        resp = _client().get(
            "/api/hackathons", params={"filter": "ai", "minPrize": "5000"}
        )
        body = resp.json()
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["data"][0]["title"], "ML Weekend")
        self.assertEqual(body["data"][0]["prizeText"], "$10,000")

    def test_source_selection(self) -> None:
        """source narrows the result to one catalog."""
        resp = _client().get("/api/hackathons", params={"source": "github"})
        self.assertEqual(resp.json()["count"], 1)

    def test_malformed_min_prize_ignored(self) -> None:
        """A non-numeric minPrize is not a validation error."""
        resp = _client().get("/api/hackathons", params={"minPrize": "abc"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["count"], 3)

    def test_engine_failure_returns_500(self) -> None:
        """Unexpected errors become {ok: false} with HTTP 500."""
        with patch(
            "hackagg.api.app.HackathonAggregator.from_settings",
            side_effect=RuntimeError("no adapters"),
        ):
            client = TestClient(create_app())
            resp = client.get("/api/hackathons")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(), {"ok": False, "error": "no adapters"}
        )


if __name__ == "__main__":
    unittest.main()
