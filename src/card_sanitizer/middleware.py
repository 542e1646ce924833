"""Adapters that plug the sanitizer into host logging and parameter filters.

Parameter filter (two-argument closure, e.g. for request-parameter
filtering):

    filter_param = parameter_filter()
    filter_param("comment", "card 4111 1111 1111 1111")
    # "card 4111 11▇▇ ▇▇▇▇ 1111"
    filter_param("amount", 42)       # 42, non-text passes through

Standard library logging:

    handler.addFilter(CardNumberFilter())

structlog:

    structlog.configure(processors=[..., sanitize_event_dict, renderer])
"""

from __future__ import annotations
import functools
import logging
from typing import Any, Callable

from .sanitizer import CardSanitizer, SanitizerConfig, repair_encoding


def parameter_filter(
    *, config: SanitizerConfig | None = None, **options: Any,
) -> Callable[[Any, Any], Any]:
    """Factory — returns ``(key, value) -> value`` with card numbers redacted.

    Bytes values always come back as decoded ``str``; other non-text values
    pass through untouched.
    """
    sanitizer = CardSanitizer(config, **options)

    def _filter(key: Any, value: Any) -> Any:
        if isinstance(value, (bytes, bytearray)):
            value = repair_encoding(value)
        elif not isinstance(value, str):
            return value
        redacted = sanitizer.sanitize(value, return_changes=False)
        return value if redacted is None else redacted

    return _filter


class CardNumberFilter(logging.Filter):
    """logging.Filter that redacts card numbers from the rendered message."""

    def __init__(
        self, name: str = "", *, config: SanitizerConfig | None = None, **options: Any,
    ) -> None:
        super().__init__(name)
        self._sanitizer = CardSanitizer(config, **options)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self._sanitizer.sanitize(message, return_changes=False)
        if redacted is not None:
            record.msg = redacted
            record.args = None
        return True


@functools.lru_cache(maxsize=1)
def _default_sanitizer() -> CardSanitizer:
    return CardSanitizer()


def sanitize_event_dict(logger: Any, method_name: str, event_dict: dict) -> dict:
    """structlog processor that redacts card numbers from every string field."""
    sanitizer = _default_sanitizer()
    for key, value in event_dict.items():
        if isinstance(value, str):
            redacted = sanitizer.sanitize(value, return_changes=False)
            if redacted is not None:
                event_dict[key] = redacted
    return event_dict
