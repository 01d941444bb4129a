# hackagg/config/settings.py

"""Central configuration for the hackathon aggregator."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the hackathon aggregator."""

    # --- Fetching ---
    REQUEST_DELAY: float = 1.0          # Seconds between paginated requests
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 1                # Attempts per request (refresh cycle retries)
    MAX_PAGES: int = 5                  # Max pagination depth per source

    # --- Resilience ---
    CIRCUIT_BREAKER_THRESHOLD: int = 3  # Consecutive failures to trip
    CIRCUIT_BREAKER_COOLDOWN: float = 300.0
    MAX_DELAY_MULTIPLIER: int = 8       # Cap for adaptive backoff
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
        "automated requests",
    ]

    # --- Aggregation cache ---
    CACHE_TTL: float = 300.0            # Max snapshot age (secs)
    ADAPTER_TIMEOUT: float = 60.0       # Hard cap on one adapter fetch
    FETCH_BUDGET: float = 45.0          # Wall-clock budget inside fetch(), below ADAPTER_TIMEOUT
    RESPONSE_CACHE_CONTROL: str = (
        "s-maxage=60, stale-while-revalidate=120"
    )

    # --- GitHub ---
    GITHUB_LOOKBACK_DAYS: int = 365
    GITHUB_PER_PAGE: int = 30
    GITHUB_MAX_PAGES: int = 2

    # --- Credentials (handed to adapters at construction) ---
    SOURCE_CREDENTIALS: dict[str, dict[str, str | None]] = {
        "github": {"token": os.getenv("GITHUB_TOKEN") or None},
    }

    # --- Health check ---
    HEALTH_TIMEOUT: int = 10            # Seconds per homepage probe
    HEALTH_SLOW_MS: float = 5000.0      # Probes slower than this are "slow"

    # --- HTTP server ---
    API_HOST: str = os.getenv("HACKAGG_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("HACKAGG_PORT", "8000"))

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "none",
        "sec-fetch-user": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SELECTORS_PATH: Path = BASE_DIR / "hackagg" / "config" / "selectors.json"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Sources (order here is the order of every merged snapshot) ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "devpost",
            "label": "Devpost",
            "adapter": "hackagg.adapters.devpost_adapter.DevpostAdapter",
        },
        {
            "id": "github",
            "label": "GitHub",
            "adapter": "hackagg.adapters.github_adapter.GithubAdapter",
        },
        {
            "id": "mlh",
            "label": "Major League Hacking",
            "adapter": "hackagg.adapters.mlh_adapter.MlhAdapter",
        },
    ]
