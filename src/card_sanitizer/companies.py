"""Card issuer table — IIN prefix/length patterns and display groupings.

Each company maps to ONE ``CardFormat`` holding both the full-number
pattern and the accepted grouping shapes, so the two can never drift
apart.  Table order is significant: ``find_company`` returns the first
match, and several ranges overlap (maestro swallows most ``6`` prefixes,
visa_master duplicates visa and master).
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum

from .patterns import NONEMPTY_LINE_NOISE


class CardCompany(str, Enum):
    VISA = "visa"
    MASTER = "master"
    DISCOVER = "discover"
    AMERICAN_EXPRESS = "american_express"
    DINERS_CLUB = "diners_club"
    JCB = "jcb"
    SWITCH = "switch"
    SOLO = "solo"
    DANKORT = "dankort"
    MAESTRO = "maestro"
    FORBRUGSFORENINGEN = "forbrugsforeningen"
    LASER = "laser"
    BC_GLOBAL = "bc_global"
    CARTE_BLANCHE = "carte_blanche"
    INSTA_PAYMENT = "insta_payment"
    KOREAN_LOCAL = "korean_local"
    UNION_PAY = "union_pay"
    VISA_MASTER = "visa_master"


@dataclass(frozen=True, slots=True)
class CardFormat:
    """Full-number pattern plus accepted grouping shapes for one issuer."""
    pattern: re.Pattern
    # Each shape is compared against the leading groups only, so trailing
    # groups of longer variants (+1/+2/+3 digits) are unconstrained.
    groupings: tuple[tuple[int, ...], ...]


_FOUR_BY_FOUR = ((4, 4, 4, 4),)

CARD_COMPANIES: dict[CardCompany, CardFormat] = {
    CardCompany.VISA: CardFormat(
        re.compile(r"4\d{12}(?:\d{3})?(?:\d{3})?"), _FOUR_BY_FOUR),
    CardCompany.MASTER: CardFormat(
        re.compile(
            r"(?:5[1-5]\d{4}|677189|222[1-9]\d{2}|22[3-9]\d{3}|2[3-6]\d{4}"
            r"|27[01]\d{3}|2720\d{2})\d{10}"
        ), _FOUR_BY_FOUR),
    CardCompany.DISCOVER: CardFormat(
        re.compile(
            r"6011\d{12}|65\d{14}|64[4-9]\d{13}"
            r"|622(?:12[6-9]|1[3-9]\d|[2-8]\d{2}|9[01]\d|92[0-5])\d{10}"
        ), _FOUR_BY_FOUR),
    CardCompany.AMERICAN_EXPRESS: CardFormat(
        re.compile(r"3[47]\d{13}"), ((4, 6, 5),)),
    CardCompany.DINERS_CLUB: CardFormat(
        re.compile(r"36\d{12}|30[0-5]\d{11}|3095\d{10}|3[89]\d{12}"), ((4, 6, 4),)),
    CardCompany.JCB: CardFormat(
        re.compile(r"35(?:28|29|[3-8]\d)\d{12}"), _FOUR_BY_FOUR),
    CardCompany.SWITCH: CardFormat(
        re.compile(r"6759\d{12}(?:\d{2,3})?"), _FOUR_BY_FOUR),
    CardCompany.SOLO: CardFormat(
        re.compile(r"6767\d{12}(?:\d{2,3})?"), _FOUR_BY_FOUR),
    CardCompany.DANKORT: CardFormat(
        re.compile(r"5019\d{12}"), _FOUR_BY_FOUR),
    CardCompany.MAESTRO: CardFormat(
        re.compile(r"(?:5[06-8]|6\d)\d{10,17}"), ((4,), (5,))),
    CardCompany.FORBRUGSFORENINGEN: CardFormat(
        re.compile(r"600722\d{10}"), _FOUR_BY_FOUR),
    CardCompany.LASER: CardFormat(
        re.compile(r"(?:6304|6706|6709|6771(?!89))\d{8}(?:\d{4}|\d{6,7})?"), _FOUR_BY_FOUR),
    CardCompany.BC_GLOBAL: CardFormat(
        re.compile(r"(?:6541|6556)\d{12}"), _FOUR_BY_FOUR),
    CardCompany.CARTE_BLANCHE: CardFormat(
        re.compile(r"389\d{11}"), ((4, 6, 4),)),
    CardCompany.INSTA_PAYMENT: CardFormat(
        re.compile(r"63[7-9]\d{13}"), _FOUR_BY_FOUR),
    CardCompany.KOREAN_LOCAL: CardFormat(
        re.compile(r"9\d{15}"), _FOUR_BY_FOUR),
    CardCompany.UNION_PAY: CardFormat(
        re.compile(r"62\d{14,17}"), ((4, 4, 4, 4), (6, 13))),
    CardCompany.VISA_MASTER: CardFormat(
        re.compile(r"4\d{12}(?:\d{3})?|5[1-5]\d{14}"), _FOUR_BY_FOUR),
}

# Union of every company pattern, independent of table order.
VALID_COMPANY_PREFIXES = re.compile(
    "|".join(f"(?:{fmt.pattern.pattern})" for fmt in CARD_COMPANIES.values())
)


def find_company(digits: str) -> CardCompany | None:
    """Return the first company whose pattern matches the whole number."""
    for company, fmt in CARD_COMPANIES.items():
        if fmt.pattern.fullmatch(digits):
            return company
    return None


def valid_company_prefix(digits: str) -> bool:
    return VALID_COMPANY_PREFIXES.fullmatch(digits) is not None


def valid_grouping(text: str, company: CardCompany | None) -> bool:
    """Check that the digit clusters of ``text`` follow the issuer's layout.

    An ungrouped number is always accepted.  Otherwise the group lengths
    must start with one of the company's shapes.
    """
    groups = tuple(len(g) for g in NONEMPTY_LINE_NOISE.split(text))
    if len(groups) == 1:
        return True
    if company is None:
        return False
    return any(
        groups[:len(shape)] == shape
        for shape in CARD_COMPANIES[company].groupings
    )
