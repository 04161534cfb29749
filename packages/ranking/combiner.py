"""Weight, security-score and rank generator output."""
from __future__ import annotations

from typing import Iterable, List

from packages.language_packs.registry import LanguagePackRegistry
from packages.schema.models import GeneratorId, Suggestion
from packages.security.catalogue import SecurityCatalogue

MAX_SUGGESTIONS = 5
MAX_FALLBACK_KEYWORDS = 3
FALLBACK_CONFIDENCE = 0.5


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def weight_candidates(candidates: Iterable[Suggestion]) -> List[Suggestion]:
    return [
        candidate.model_copy(
            update={"confidence": _clamp(candidate.confidence * candidate.model.weight)}
        )
        for candidate in candidates
    ]


def attach_security_scores(
    candidates: Iterable[Suggestion], catalogue: SecurityCatalogue
) -> List[Suggestion]:
    """Replace each placeholder security score with the catalogue score."""

    return [
        candidate.model_copy(update={"security_score": _clamp(catalogue.score(candidate.text))})
        for candidate in candidates
    ]


def rank(candidates: Iterable[Suggestion], limit: int = MAX_SUGGESTIONS) -> List[Suggestion]:
    # sorted() is stable, so equal scores keep emission order
    ordered = sorted(candidates, key=lambda candidate: candidate.composite_score, reverse=True)
    return ordered[:limit]


def combine(candidates: Iterable[Suggestion], catalogue: SecurityCatalogue) -> List[Suggestion]:
    return rank(attach_security_scores(weight_candidates(candidates), catalogue))


def fallback_suggestions(
    packs: LanguagePackRegistry, language: str, prefix: str
) -> List[Suggestion]:
    """Plain keyword completions used when the pipeline fails."""

    pack = packs.get(language)
    if pack is None:
        return []

    needle = prefix.lower()
    return [
        Suggestion(
            text=keyword[len(prefix):],
            confidence=FALLBACK_CONFIDENCE,
            security_score=1.0,
            model=GeneratorId.FALLBACK,
            description="Fallback suggestion",
        )
        for keyword in pack.keywords[:MAX_FALLBACK_KEYWORDS]
        if keyword.startswith(needle)
    ]


__all__ = [
    "MAX_SUGGESTIONS",
    "attach_security_scores",
    "combine",
    "fallback_suggestions",
    "rank",
    "weight_candidates",
]
