# hackagg/models/query.py

"""Per-request query model."""

import math
from dataclasses import dataclass

ALL_SOURCES = "all"


@dataclass(frozen=True)
class Query:
    """Source selector, keyword filter and minimum prize for one request."""

    source: str = ALL_SOURCES
    keyword: str = ""
    min_prize: int = 0

    @classmethod
    def from_params(
        cls,
        source: str | None = None,
        keyword: str | None = None,
        min_prize: str | float | None = None,
    ) -> "Query":
        """Build a Query from loosely-typed request/CLI values.

        Missing source means all sources.  ``min_prize`` accepts any
        numeric string; non-numeric, negative or missing values mean
        no prize filter.
        """
        return cls(
            source=(source or "").strip() or ALL_SOURCES,
            keyword=(keyword or "").strip(),
            min_prize=_coerce_min_prize(min_prize),
        )


def _coerce_min_prize(value: str | float | None) -> int:
    """Truncate a numeric-ish value to a non-negative int."""
    if value is None or value == "":
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number) or number <= 0:
        return 0
    return int(number)
