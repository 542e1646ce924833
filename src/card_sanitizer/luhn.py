"""Luhn (mod 10) checksum used by payment card numbers."""

from __future__ import annotations


def _checksum(digits: str) -> int:
    total = 0
    for i, ch in enumerate(reversed(digits)):
        n = int(ch)
        if i % 2 == 1:
            n *= 2
            if n > 9:
                n -= 9
        total += n
    return total % 10


def valid(digits: str) -> bool:
    """Return True if the digit string passes the Luhn check."""
    if not digits or not digits.isascii() or not digits.isdigit():
        return False
    return _checksum(digits) == 0


def check_digit(partial: str) -> str:
    """Return the digit that makes ``partial + digit`` Luhn-valid."""
    return str((10 - _checksum(partial + "0")) % 10)
