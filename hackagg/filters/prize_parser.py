# hackagg/filters/prize_parser.py

"""Heuristic parsing of free-text prize descriptions."""

import re

_CURRENCY_RE = re.compile(r"[$₹£€¥,]")

# A number followed by a magnitude suffix: "10K", "2.5 l", "2Lakh", "5 lakhs".
# The suffix must end the word ("10 laptops" has none).
_SUFFIX_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s?(k|l(?:akhs?)?)\b", re.IGNORECASE
)

_DIGIT_RUN_RE = re.compile(r"\d{2,}")

_MULTIPLIERS: dict[str, int] = {
    "k": 1_000,
    "l": 100_000,  # lakh
}


def parse_prize(text: str | None) -> int:
    """Extract a best-effort prize amount from text like '$5,000' or '2L'.

    Returns 0 when nothing resembling an amount is found.
    """
    if not text:
        return 0
    cleaned = _CURRENCY_RE.sub("", text)

    suffixed = _SUFFIX_RE.search(cleaned)
    if suffixed:
        number, suffix = suffixed.groups()
        return round(float(number) * _MULTIPLIERS[suffix[0].lower()])

    literal = _DIGIT_RUN_RE.search(cleaned)
    if literal:
        return int(literal.group())
    return 0
