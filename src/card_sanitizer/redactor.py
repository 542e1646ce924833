"""Redactor — masks the middle digits of a validated candidate.

Usage:
    redact_numbers("4111 1111 1111 1111", replacement_token="*")
    # "4111 11** **** 1111"
"""

from __future__ import annotations


def redact_numbers(
    text: str,
    *,
    replacement_token: str = "▇",
    expose_first: int = 6,
    expose_last: int = 4,
) -> str:
    """Replace every digit of ``text`` outside the exposed head and tail.

    Digits are counted on their own, so spacing and punctuation between
    them come through unchanged.
    """
    limit = sum(ch in "0123456789" for ch in text) - expose_last
    out: list[str] = []
    index = 0
    for ch in text:
        if ch in "0123456789":
            out.append(replacement_token if expose_first <= index < limit else ch)
            index += 1
        else:
            out.append(ch)
    return "".join(out)
