"""
Totally ordered ECMAScript editions.

Editions compare by recency: `EsVersion.ES7 < EsVersion.ES16 < EsVersion.ESNEXT`.
`ESNEXT` is a sentinel for syntax newer than any named edition.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import total_ordering
from typing import Iterable, Optional

_YEAR_OFFSET = 2009


@total_ordering
class EsVersion(Enum):
    ES7 = 7
    ES8 = 8
    ES9 = 9
    ES10 = 10
    ES11 = 11
    ES12 = 12
    ES13 = 13
    ES14 = 14
    ES15 = 15
    ES16 = 16
    ESNEXT = 99

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, EsVersion):
            return NotImplemented
        return self.value < other.value

    @property
    def label(self) -> str:
        if self is EsVersion.ESNEXT:
            return "ESNext"
        return self.name

    @property
    def year(self) -> Optional[int]:
        if self is EsVersion.ESNEXT:
            return None
        return _YEAR_OFFSET + self.value

    def __str__(self) -> str:
        if self.year is None:
            return self.label
        return f"{self.label} ({self.year})"

    @classmethod
    def parse(cls, text: str) -> "EsVersion":
        """
        Resolve an edition from user input.

        Accepts edition numbers (`ES7`), years (`ES2016`, `2016`) and `ESNext`,
        case-insensitively.
        """
        normalized = text.strip().upper()
        if normalized == "ESNEXT":
            return cls.ESNEXT
        match = re.fullmatch(r"(?:ES)?(\d+)", normalized)
        if match is None:
            raise ValueError(f"Unknown ECMAScript edition: {text!r}")
        number = int(match.group(1))
        if number > _YEAR_OFFSET:
            number -= _YEAR_OFFSET
        for version in cls:
            if version is not cls.ESNEXT and version.value == number:
                return version
        raise ValueError(f"Unknown ECMAScript edition: {text!r}")


def latest_version(versions: Iterable[EsVersion]) -> EsVersion:
    """Return the most recent edition of a non-empty iterable."""
    return max(versions)


__all__ = ["EsVersion", "latest_version"]
