"""Swiss number and file size formatting helpers."""

from __future__ import annotations

import re
from typing import Optional

from core.constants import THOUSANDS_SEPARATOR, THOUSANDS_SEPARATORS

_SEPARATOR_RE = re.compile("[" + "".join(THOUSANDS_SEPARATORS) + r"\s]")
_LEADING_INT_RE = re.compile(r"^[+-]?[0-9]+")

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def strip_thousands_separators(value: str) -> str:
    """Remove Swiss grouping apostrophes and whitespace: "1'200" -> "1200"."""
    return _SEPARATOR_RE.sub("", value)


def parse_swiss_number(value) -> Optional[int]:
    """
    Parse a Swiss formatted integer.

    Mirrors parseInt: the leading integer of the cleaned string is used, and
    trailing garbage is ignored ("12x" -> 12). Returns None when the string
    does not start with a number or has too many digits to convert.
    """
    match = _LEADING_INT_RE.match(strip_thousands_separators(str(value)))
    if not match:
        return None
    try:
        return int(match.group(0))
    except ValueError:
        return None


def format_swiss_number(number: int) -> str:
    """Group thousands with apostrophes: 1200000 -> "1'200'000"."""
    return f"{int(number):,}".replace(",", THOUSANDS_SEPARATOR)


def format_file_size(size_bytes: int, decimals: int = 2) -> str:
    """Human-readable size with 1024 steps: 1536 -> "1.5 KB"."""
    if size_bytes <= 0:
        return "0 Bytes"

    index = 0
    value = float(size_bytes)
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1

    # 1.50 -> "1.5", 100.00 -> "100"
    text = f"{value:.{max(decimals, 0)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"
