"""YAML/dict config loader for card-sanitizer.

Supports loading from a YAML file or a plain dict (for embedding
in a larger application config).

Example YAML:

    card_sanitizer:
      enabled: true
      replacement_token: "*"
      expose_first: 6
      expose_last: 4
      use_groupings: true
      exclude_tracking_numbers: true
      parse_flanking: true
      max_length: 10000
"""

from __future__ import annotations
import dataclasses
from pathlib import Path
from typing import Any, Mapping

from .sanitizer import CardSanitizer, SanitizerConfig, repair_encoding
from .types import CardMatch, Change, SanitizeResult, SanitizeStatus

_OPTION_NAMES = frozenset(f.name for f in dataclasses.fields(SanitizerConfig))


class _NoopSanitizer:
    """Pass-through sanitizer when redaction is disabled.

    Mirrors the public API of CardSanitizer, including its rejection of
    unknown option names.
    """

    def __init__(self, config: SanitizerConfig | None = None) -> None:
        self.config = config or SanitizerConfig()

    def _settings(self, options: Mapping[str, Any] | None, overrides: dict[str, Any]) -> SanitizerConfig:
        return self.config.merge(**{**(options or {}), **overrides})

    def sanitize(
        self, text: str | bytes, options: Mapping[str, Any] | None = None, **overrides: Any,
    ) -> str | list[Change] | None:
        self._settings(options, overrides)
        return None

    def sanitize_result(
        self, text: str | bytes, options: Mapping[str, Any] | None = None, **overrides: Any,
    ) -> SanitizeResult:
        self._settings(options, overrides)
        return SanitizeResult(status=SanitizeStatus.CLEAN, text=repair_encoding(text))

    def find_cards(
        self, text: str | bytes, options: Mapping[str, Any] | None = None, **overrides: Any,
    ) -> list[CardMatch]:
        self._settings(options, overrides)
        return []


def load_config(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline).

    Raises ValueError for keys that are not sanitizer options.
    """
    # Support nested under "card_sanitizer" key or flat
    if "card_sanitizer" in data:
        data = data["card_sanitizer"] or {}

    unknown = set(data) - _OPTION_NAMES - {"enabled"}
    if unknown:
        raise ValueError(f"unknown card_sanitizer options: {', '.join(sorted(unknown))}")

    cfg: dict[str, Any] = {"enabled": bool(data.get("enabled", True))}
    cfg.update({name: data[name] for name in _OPTION_NAMES if name in data})
    return cfg


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml  # optional dependency
    with open(path, encoding="utf-8") as f:
        return load_config(yaml.safe_load(f) or {})


def create_sanitizer(config: dict[str, Any]) -> CardSanitizer | _NoopSanitizer:
    """Create a fully configured sanitizer from a config dict."""
    cfg = load_config(config)
    enabled = cfg.pop("enabled")
    settings = SanitizerConfig(**cfg)

    if not enabled:
        # Return a pass-through sanitizer (no redaction)
        return _NoopSanitizer(settings)

    return CardSanitizer(settings)
