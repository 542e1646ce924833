"""CardSanitizer — the main API.  Finds card numbers in text and truncates them.

Usage:
    from card_sanitizer import CardSanitizer

    sanitizer = CardSanitizer()              # reusable, thread-safe
    sanitizer.sanitize("Hello 4111 1111 1111 1111 there")
    # "Hello 4111 11▇▇ ▇▇▇▇ 1111 there"

    sanitizer.sanitize("nothing here")       # None — nothing redacted

    # Options override the instance defaults for one call
    sanitizer.sanitize(text, replacement_token="*", return_changes=True)
    # [Change(original="4111 1111 1111 1111", redacted="4111 11** **** 1111")]

Pipeline per call: repair encoding → length guard → hide expiration
dates → one regex pass over digit runs → Luhn → flanking context →
issuer prefix → grouping → tracking numbers → redact.
"""

from __future__ import annotations
import dataclasses
import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

import structlog

from . import luhn
from .companies import find_company, valid_company_prefix, valid_grouping
from .patterns import (
    NON_DIGITS,
    NUMBERS_WITH_LINE_NOISE,
    expiration_boundary,
    mask_expirations,
    unmask_expirations,
    valid_context,
)
from .redactor import redact_numbers
from .tracking import CARRIERS, is_tracking_number
from .types import Candidate, CardMatch, Change, SanitizeResult, SanitizeStatus

logger = structlog.get_logger(__name__)

# Characters of context kept on each side of a candidate; enough for the
# longest flanking keyword.
FLANK_WINDOW = 16

_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


@dataclass(frozen=True)
class SanitizerConfig:
    """Configuration for the CardSanitizer."""
    replacement_token: str = "▇"
    expose_first: int = 6              # leading digits left visible
    expose_last: int = 4               # trailing digits left visible
    use_groupings: bool = False        # require the issuer's visual grouping
    exclude_tracking_numbers: bool = False
    parse_flanking: bool = False       # reject numbers glued to letters/digits
    return_changes: bool = False       # return [(original, redacted)] instead of text
    # Longer inputs are not scanned at all (None = no limit)
    max_length: int | None = 10_000

    def __post_init__(self) -> None:
        if self.expose_first < 0 or self.expose_last < 0:
            raise ValueError("expose_first and expose_last must be non-negative")
        if self.max_length is not None and self.max_length < 0:
            raise ValueError("max_length must be non-negative")

    def merge(self, **options: Any) -> SanitizerConfig:
        """Return a copy with ``options`` applied.  Unknown names raise TypeError."""
        return dataclasses.replace(self, **options) if options else self


def repair_encoding(text: str | bytes) -> str:
    """Decode bytes as UTF-8 and replace anything invalid with U+FFFD."""
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode("utf-8", errors="replace")
    return _LONE_SURROGATE.sub("\ufffd", text)


class CardSanitizer:
    """Heuristic card-number sanitizer.

    Holds only immutable settings; everything about an in-flight match
    lives in a per-call ``Candidate``, so one instance can be shared
    across threads.
    """

    def __init__(
        self,
        config: SanitizerConfig | None = None,
        *,
        tracking_validators: Sequence[Callable[[str], bool]] | None = None,
        **options: Any,
    ) -> None:
        self.config = (config or SanitizerConfig()).merge(**options)
        self.tracking_validators = (
            CARRIERS if tracking_validators is None else tuple(tracking_validators)
        )
        logger.debug(
            "card_sanitizer.initialized",
            use_groupings=self.config.use_groupings,
            parse_flanking=self.config.parse_flanking,
            exclude_tracking_numbers=self.config.exclude_tracking_numbers,
        )

    def sanitize(
        self, text: str | bytes, options: Mapping[str, Any] | None = None, **overrides: Any,
    ) -> str | list[Change] | None:
        """Redact card numbers in ``text``.

        ``options`` (a mapping) and keyword overrides apply to this call only.

        Returns the redacted text, or the list of changes when
        ``return_changes`` is set.  Returns None when nothing was
        redacted (including oversized input, see ``sanitize_result``).
        """
        config = self._settings(options, overrides)
        result = self._sanitize(text, config)
        if config.return_changes:
            return result.changes or None
        return result.text if result.changes else None

    def sanitize_result(
        self, text: str | bytes, options: Mapping[str, Any] | None = None, **overrides: Any,
    ) -> SanitizeResult:
        """Like ``sanitize`` but always returns a SanitizeResult with a status."""
        return self._sanitize(text, self._settings(options, overrides))

    def find_cards(
        self, text: str | bytes, options: Mapping[str, Any] | None = None, **overrides: Any,
    ) -> list[CardMatch]:
        """Locate validated card numbers without redacting them.

        Offsets refer to the encoding-repaired text.
        """
        config = self._settings(options, overrides)
        text = repair_encoding(text)
        if self._oversized(text, config):
            return []

        boundary = expiration_boundary()
        masked = mask_expirations(text, boundary)
        found: list[CardMatch] = []
        for match in NUMBERS_WITH_LINE_NOISE.finditer(masked):
            candidate = self._validate(match, config)
            if candidate is None:
                continue
            # Boundaries only wrap dates, never a candidate, so the shift
            # is the number of boundaries seen before the match.
            shift = masked.count(boundary, 0, match.start()) * len(boundary)
            start = match.start() - shift
            company = find_company(candidate.digits)
            found.append(CardMatch(
                start=start,
                end=start + len(candidate.text),
                text=candidate.text,
                digits=candidate.digits,
                company=company.value if company else None,
            ))
        return found

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _settings(self, options: Mapping[str, Any] | None, overrides: dict[str, Any]) -> SanitizerConfig:
        return self.config.merge(**{**(options or {}), **overrides})

    def _sanitize(self, text: str | bytes, config: SanitizerConfig) -> SanitizeResult:
        text = repair_encoding(text)
        if self._oversized(text, config):
            return SanitizeResult(status=SanitizeStatus.OVERSIZED, text=text)

        changes: list[Change] = []

        def _replace(match: re.Match) -> str:
            candidate = self._validate(match, config)
            if candidate is None:
                return match.group()
            redacted = redact_numbers(
                candidate.text,
                replacement_token=config.replacement_token,
                expose_first=config.expose_first,
                expose_last=config.expose_last,
            )
            changes.append(Change(candidate.text, redacted))
            return redacted

        boundary = expiration_boundary()
        masked = mask_expirations(text, boundary)
        redacted = NUMBERS_WITH_LINE_NOISE.sub(_replace, masked)

        if not changes:
            return SanitizeResult(status=SanitizeStatus.CLEAN, text=text)

        logger.debug("card_sanitizer.redacted", changes=len(changes))
        return SanitizeResult(
            status=SanitizeStatus.REDACTED,
            text=unmask_expirations(redacted, boundary),
            changes=changes,
        )

    def _oversized(self, text: str, config: SanitizerConfig) -> bool:
        if config.max_length is None or len(text) <= config.max_length:
            return False
        logger.warning(
            "card_sanitizer.oversized",
            length=len(text),
            max_length=config.max_length,
        )
        return True

    def _validate(self, match: re.Match, config: SanitizerConfig) -> Candidate | None:
        """Build the Candidate for ``match`` and return it if every check passes."""
        if match.group(1) is not None:
            return None

        start, end = match.start(), match.end()
        source = match.string
        candidate = Candidate(
            text=match.group(),
            digits=NON_DIGITS.sub("", match.group()),
            prefix=source[max(0, start - FLANK_WINDOW):start],
            postfix=source[end:end + FLANK_WINDOW],
        )

        if not luhn.valid(candidate.digits):
            return None
        if config.parse_flanking and not valid_context(candidate.prefix, candidate.postfix):
            return None
        if not self._valid_numbers(candidate, config):
            return None
        return candidate

    def _valid_numbers(self, candidate: Candidate, config: SanitizerConfig) -> bool:
        if not valid_company_prefix(candidate.digits):
            return False
        if config.use_groupings and not valid_grouping(
            candidate.text, find_company(candidate.digits)
        ):
            return False
        if config.exclude_tracking_numbers and is_tracking_number(
            candidate.digits, self.tracking_validators
        ):
            return False
        return True
