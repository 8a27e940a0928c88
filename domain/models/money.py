"""
Fixed-point monetary value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_DISPLAY_PATTERN = re.compile(r"^(-)?(\d+)(?:\.(\d{1,2}))?$")


def _check_range(paisa: int) -> int:
    if paisa < INT64_MIN or paisa > INT64_MAX:
        raise OverflowError(f"Monetary value {paisa} is outside the signed 64-bit range.")
    return paisa


@total_ordering
@dataclass(frozen=True)
class Money:
    """
    An amount of currency counted in paisa (1/100 of the display unit).

    Floats are never accepted. Division only happens in scale_bp() and
    apply_odds(), both of which floor.
    """

    paisa: int

    def __post_init__(self):
        # bool is an int subclass; True paisa is always a bug
        if isinstance(self.paisa, bool) or not isinstance(self.paisa, int):
            raise TypeError(f"Money requires an int number of paisa, got {type(self.paisa).__name__}.")
        _check_range(self.paisa)

    @classmethod
    def zero(cls) -> Money:
        return cls(0)

    @classmethod
    def of(cls, value: Money | int) -> Money:
        """Coerce an int paisa amount (or an existing Money) into Money."""
        if isinstance(value, Money):
            return value
        return cls(value)

    @classmethod
    def parse(cls, text: str) -> Money:
        """
        Parse a display string such as "12.34" or "-5" into Money exactly.

        Raises:
            ValueError: If the text is not a decimal with at most two fractional digits
        """
        match = _DISPLAY_PATTERN.match(text.strip())
        if not match:
            raise ValueError(f"Invalid monetary amount: {text!r}")
        sign, units, fraction = match.groups()
        paisa = int(units) * 100 + int((fraction or "0").ljust(2, "0"))
        return cls(-paisa if sign else paisa)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(_check_range(self.paisa + other.paisa))

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(_check_range(self.paisa - other.paisa))

    def __neg__(self) -> Money:
        return Money(_check_range(-self.paisa))

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.paisa < other.paisa

    def __int__(self) -> int:
        return self.paisa

    def __bool__(self) -> bool:
        return self.paisa != 0

    def is_positive(self) -> bool:
        return self.paisa > 0

    def is_negative(self) -> bool:
        return self.paisa < 0

    def scale_bp(self, basis_points: int) -> Money:
        """Return floor(self * basis_points / 10000)."""
        return Money(_check_range((self.paisa * basis_points) // 10000))

    def apply_odds(self, multiplier: int) -> Money:
        """Return floor(self * multiplier / 100) for an odds multiplier scaled by 100."""
        return Money(_check_range((self.paisa * multiplier) // 100))

    def __str__(self) -> str:
        sign = "-" if self.paisa < 0 else ""
        units, fraction = divmod(abs(self.paisa), 100)
        return f"{sign}{units}.{fraction:02d}"

    def __repr__(self) -> str:
        return f"Money({self.paisa})"
