"""Shared fixtures: deterministic Luhn-valid card and tracking number generators."""

import os
import random
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from card_sanitizer import luhn


def _generate_card(rng: random.Random, length: int, prefix: str) -> str:
    body = prefix + "".join(str(rng.randrange(10)) for _ in range(length - len(prefix) - 1))
    return body + luhn.check_digit(body)


def _generate_fedex(rng: random.Random) -> str:
    """15-digit FedEx Ground number, prefixed with 6 so it can collide with Maestro."""
    digits = [6] + [rng.randrange(10) for _ in range(13)]
    total = sum(d * (3 if i % 2 == 0 else 1) for i, d in enumerate(reversed(digits)))
    check = (10 - total % 10) % 10
    return "".join(map(str, digits + [check]))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def make_card(rng):
    """Factory for Luhn-valid card numbers: make_card(16, prefix="4")."""
    def _make(length: int = 16, prefix: str = "4") -> str:
        return _generate_card(rng, length, prefix)
    return _make


@pytest.fixture
def fedex_cards(rng) -> list[str]:
    """FedEx Ground tracking numbers that also pass the Luhn check."""
    numbers: list[str] = []
    while len(numbers) < 50:
        candidate = _generate_fedex(rng)
        if luhn.valid(candidate):
            numbers.append(candidate)
    return numbers
