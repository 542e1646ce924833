"""Shipping-carrier tracking numbers that also pass a Luhn check.

FedEx numbers are 12 or 15 digit strings with their own check digit;
roughly one in ten of them is Luhn-valid too and would otherwise be
redacted as a card.  Only carriers whose numbers fall inside card lengths
(12-19 digits) are listed.  Each ``Carrier`` is a ``Callable[[str], bool]``
so callers can pass their own validators to ``CardSanitizer``.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Callable


def _mod10(digits: str) -> bool:
    """Weighted 3-1 check digit counted from the right, check digit excluded."""
    sequence, check = digits[:-1], int(digits[-1])
    total = 0
    for i, ch in enumerate(reversed(sequence)):
        total += int(ch) * (3 if i % 2 == 0 else 1)
    return (10 - total % 10) % 10 == check


def _mod11_fedex_express(digits: str) -> bool:
    """3-1-7 weights left to right over the first 11 digits."""
    sequence, check = digits[:-1], int(digits[-1])
    weights = (3, 1, 7)
    total = sum(int(ch) * weights[i % 3] for i, ch in enumerate(sequence))
    return total % 11 % 10 == check


@dataclass(frozen=True, slots=True)
class Carrier:
    name: str
    pattern: re.Pattern
    check: Callable[[str], bool]

    def __call__(self, digits: str) -> bool:
        return self.pattern.fullmatch(digits) is not None and self.check(digits)


CARRIERS: tuple[Carrier, ...] = (
    Carrier("fedex_express", re.compile(r"[0-9]{12}"), _mod11_fedex_express),
    Carrier("fedex_ground", re.compile(r"[0-9]{15}"), _mod10),
)


def is_tracking_number(
    digits: str,
    validators: tuple[Callable[[str], bool], ...] = CARRIERS,
) -> bool:
    return any(validator(digits) for validator in validators)
