# hackagg/adapters/resilience.py

"""Per-adapter request pacing, circuit breaking and block-page detection."""

import logging
import time
from collections.abc import Callable

logger = logging.getLogger("hackagg.resilience")

# Cloudflare interstitial markers, checked before the CAPTCHA keywords
CF_CHALLENGE_MARKERS: tuple[str, ...] = (
    "challenges.cloudflare.com",
    "cdn-cgi/challenge-platform",
    "just a moment",
    "cf-turnstile",
    "cf_chl_opt",
)

# A page this long with a <body> is a real listing page
_REAL_PAGE_MIN_LENGTH = 5000


def blocked_marker(text: str, captcha_keywords: list[str]) -> str | None:
    """Return the marker showing *text* is a block page, else None.

    JSON documents are never block pages.
    """
    if text.lstrip().startswith(("{", "[")):
        return None
    lower = text.lower()
    for marker in CF_CHALLENGE_MARKERS:
        if marker in lower:
            return marker
    if "<body" in lower and len(text) > _REAL_PAGE_MIN_LENGTH:
        return None
    for keyword in captcha_keywords:
        if keyword in lower:
            return keyword
    return None


class RequestPacer:
    """Delay between requests, doubled on rate limiting up to a cap."""

    def __init__(self, base_delay: float, max_multiplier: int) -> None:
        self.base_delay = base_delay
        self.max_delay = base_delay * max_multiplier
        self.delay = base_delay

    def wait(self, limit: float | None = None) -> None:
        """Sleep for the current delay, or *limit* seconds if shorter."""
        time.sleep(self.delay if limit is None else min(self.delay, limit))

    def escalate(self) -> float:
        self.delay = min(self.delay * 2, self.max_delay)
        return self.delay

    def reset(self) -> None:
        self.delay = self.base_delay


class CircuitBreaker:
    """Stops calling a catalog after repeated consecutive failures.

    Once open, requests are refused until ``cooldown`` seconds have
    passed; the next request is then let through as a probe
    (half-open).  A success closes the breaker, a failure re-opens it.
    """

    def __init__(
        self,
        name: str,
        threshold: int,
        cooldown: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.name = name
        self.threshold = threshold
        self.cooldown = cooldown
        self._clock = clock
        self.failures = 0
        self.opened_at: float | None = None

    @property
    def is_open(self) -> bool:
        return self.opened_at is not None

    def allow(self) -> bool:
        """True when a request may be sent now."""
        if self.opened_at is None:
            return True
        elapsed = self._clock() - self.opened_at
        if elapsed < self.cooldown:
            return False
        logger.info(
            "[%s] Circuit breaker half-open after %.0fs", self.name, elapsed
        )
        self.opened_at = None
        return True

    def record_success(self) -> None:
        self.failures = 0
        self.opened_at = None

    def record_failure(self) -> None:
        self.failures += 1
        if self.failures >= self.threshold and self.opened_at is None:
            self.opened_at = self._clock()
            logger.error(
                "[%s] Circuit breaker opened after %d consecutive failures",
                self.name,
                self.failures,
            )
