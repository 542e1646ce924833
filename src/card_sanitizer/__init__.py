"""Card Sanitizer — finds payment card numbers in text and truncates them."""

from .sanitizer import CardSanitizer, SanitizerConfig
from .companies import CARD_COMPANIES, CardCompany
from .middleware import CardNumberFilter, parameter_filter, sanitize_event_dict
from .config import create_sanitizer, load_config, load_from_yaml
from .types import Candidate, CardMatch, Change, SanitizeResult, SanitizeStatus

__all__ = [
    "CardSanitizer", "SanitizerConfig",
    "CARD_COMPANIES", "CardCompany",
    "CardNumberFilter", "parameter_filter", "sanitize_event_dict",
    "create_sanitizer", "load_config", "load_from_yaml",
    "Candidate", "CardMatch", "Change", "SanitizeResult", "SanitizeStatus",
]
__version__ = "0.1.0"
