"""Presidio integration — exposes the card scanner as an EntityRecognizer.

Lets an existing Presidio ``AnalyzerEngine`` use the same candidate
detection, Luhn, issuer and context checks as ``CardSanitizer``:

    from presidio_analyzer import AnalyzerEngine
    from card_sanitizer.presidio_layer import CardNumberRecognizer

    engine = AnalyzerEngine()
    engine.registry.add_recognizer(CardNumberRecognizer(parse_flanking=True))

Requires the ``presidio`` extra; nothing else in the package imports it.
"""

from __future__ import annotations
from typing import Any

from presidio_analyzer import AnalysisExplanation, EntityRecognizer, RecognizerResult

from .sanitizer import CardSanitizer, SanitizerConfig

ENTITY_TYPE = "CREDIT_CARD"


class CardNumberRecognizer(EntityRecognizer):
    """Reports validated card numbers as CREDIT_CARD results."""

    def __init__(
        self,
        *,
        config: SanitizerConfig | None = None,
        supported_language: str = "en",
        score: float = 1.0,
        **options: Any,
    ) -> None:
        self._sanitizer = CardSanitizer(config, **options)
        self._score = score
        super().__init__(
            supported_entities=[ENTITY_TYPE],
            name="CardNumberRecognizer",
            supported_language=supported_language,
        )

    def load(self) -> None:
        pass

    def analyze(
        self, text: str, entities: list[str], nlp_artifacts: Any = None,
    ) -> list[RecognizerResult]:
        if entities and ENTITY_TYPE not in entities:
            return []
        results: list[RecognizerResult] = []
        for card in self._sanitizer.find_cards(text):
            explanation = AnalysisExplanation(
                recognizer=self.name,
                original_score=self._score,
                textual_explanation=f"luhn-valid {card.company} number",
            )
            results.append(RecognizerResult(
                entity_type=ENTITY_TYPE,
                start=card.start,
                end=card.end,
                score=self._score,
                analysis_explanation=explanation,
            ))
        return results
