"""Human-readable memory and disk sizes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

__all__ = ["SizeUnit", "Size"]


class SizeUnit(Enum):
    """Unit of a size, with its display suffix and multiplier."""

    BYTES = ("", 1)
    KILOBYTES = ("K", 1024)
    MEGABYTES = ("M", 1024**2)
    GIGABYTES = ("G", 1024**3)
    TERABYTES = ("T", 1024**4)

    def __init__(self, suffix: str, multiplier: int) -> None:
        self.suffix = suffix
        self.multiplier = multiplier


_UNITS_BY_LETTER = {
    unit.suffix.lower(): unit for unit in SizeUnit if unit.suffix
}

_COUNT_RE = re.compile(r"\+?[0-9]+")


def _parse_count(text: str) -> int:
    if not _COUNT_RE.fullmatch(text):
        raise ValueError(f"invalid size count: {text!r}")
    return int(text)


@dataclass(frozen=True)
class Size:
    """A count of some unit, such as ``4G``."""

    count: int
    unit: SizeUnit = SizeUnit.BYTES

    @classmethod
    def parse(cls, text: str) -> Size:
        """Parse strings like ``1234``, ``12K``, ``3mb`` or ``2TB``."""
        if not text:
            raise ValueError("empty size")

        # A trailing 'b' is optional
        if text[-1] in "bB":
            text = text[:-1]
            if not text:
                raise ValueError("empty size")

        unit = _UNITS_BY_LETTER.get(text[-1].lower())
        if unit is None:
            return cls(_parse_count(text), SizeUnit.BYTES)
        return cls(_parse_count(text[:-1]), unit)

    def to_bytes(self) -> int:
        """Return the size in bytes."""
        return self.count * self.unit.multiplier

    def __str__(self) -> str:
        return f"{self.count}{self.unit.suffix}"