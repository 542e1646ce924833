"""Scanner patterns — digit runs with line noise, expiration dates, flanking.

Every repetition below is bounded and sits on a non-capturing group, so
the worst case stays linear in the input length even on spacing-heavy
text.  Digits are spelled ``[0-9]``: ``\\d`` would also accept non-ASCII
digits.
"""

from __future__ import annotations
import re
import secrets

# Separator tolerated between two digits of one candidate.  Commas,
# periods, parentheses, slashes, colons, semicolons, angle brackets and
# ampersands are excluded: they delimit lists, decimals, URLs, markup and
# entities rather than card groups.
LINE_NOISE_CHAR = r"[^\w\n,()/:;<>&.]"
MAX_LINE_NOISE = 5
LINE_NOISE = rf"{LINE_NOISE_CHAR}{{0,{MAX_LINE_NOISE}}}"
NONEMPTY_LINE_NOISE = re.compile(rf"{LINE_NOISE_CHAR}{{1,{MAX_LINE_NOISE}}}")

# A run preceded by "+", "/", "&#43;" or "scheme:..." is a phone number,
# path or URL.  Group 1 captures it so the match can be skipped whole.
# A scheme may only start where no scheme character precedes it, so each
# colon is tried from one start position.
SCHEME_OR_PLUS = (
    r"((?:&#43;|\+|/)"
    r"|(?<![\-+.a-zA-Z0-9])(?:[a-zA-Z][\-+.a-zA-Z0-9]{0,9}):[^\s>]{1,2048})"
)

NUMBERS_WITH_LINE_NOISE = re.compile(
    rf"{SCHEME_OR_PLUS}?[0-9](?:{LINE_NOISE}[0-9]){{10,30}}"
)

NON_DIGITS = re.compile(r"[^0-9]")

# " 3/15", " 03-2015": month, separator, 2 or 4 digit year, then no digit.
EXPIRATION_DATE = re.compile(
    r"(?<=\s)(?:0?[1-9]|1[0-2])[/-](?:[0-9]{4}|[0-9]{2})(?![0-9])"
)

ACCEPTED_PREFIX = re.compile(r"(?:cc|card|visa|amex)\Z", re.IGNORECASE)
ACCEPTED_POSTFIX = re.compile(r"\Aex", re.IGNORECASE)

_HEX_TO_ALPHA = str.maketrans("0123456789", "ghijklmnop")


# ── Expiration dates ─────────────────────────────────────────────────

def expiration_boundary() -> str:
    """Random letters-only marker, fresh for every call."""
    return secrets.token_hex(8).translate(_HEX_TO_ALPHA)


def mask_expirations(text: str, boundary: str) -> str:
    """Wrap expiration dates in ``boundary`` so no digit run can absorb them."""
    return EXPIRATION_DATE.sub(lambda m: f"{boundary}{m.group()}{boundary}", text)


def unmask_expirations(text: str, boundary: str) -> str:
    return text.replace(boundary, "")


# ── Flanking context ─────────────────────────────────────────────────

def valid_prefix(prefix: str) -> bool:
    if not prefix or ACCEPTED_PREFIX.search(prefix):
        return True
    return not prefix[-1].isalnum()


def valid_postfix(postfix: str) -> bool:
    if not postfix or ACCEPTED_POSTFIX.match(postfix):
        return True
    return not postfix[0].isalnum()


def valid_context(prefix: str, postfix: str) -> bool:
    """Reject numbers glued to letters or digits (IDs, phone numbers) unless
    a card keyword sits right next to them."""
    return valid_prefix(prefix) and valid_postfix(postfix)
