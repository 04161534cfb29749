"""Suggestion engine facade used by editor integrations."""
from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from packages.generators.rules import GENERATORS, Generator, RandomSource
from packages.language_packs.registry import LanguagePackRegistry, default_registry
from packages.ranking.combiner import combine, fallback_suggestions
from packages.reporting.scanner import scan
from packages.schema.models import Position, SecurityReport, Suggestion
from packages.security.catalogue import SecurityCatalogue, default_catalogue

logger = logging.getLogger(__name__)


class SuggestionEngine:
    """Runs the generators, combines their output and scans documents.

    The engine holds no per-request state; the registries it is given are
    read-only, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        packs: Optional[LanguagePackRegistry] = None,
        catalogue: Optional[SecurityCatalogue] = None,
        rng: Optional[RandomSource] = None,
        generators: Optional[Sequence[Generator]] = None,
    ) -> None:
        self.packs = packs if packs is not None else default_registry()
        self.catalogue = catalogue if catalogue is not None else default_catalogue()
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.generators: Sequence[Generator] = tuple(generators) if generators is not None else tuple(GENERATORS)

    async def generate_suggestions(
        self, document: str, position: Position, language: str, prefix: str
    ) -> List[Suggestion]:
        try:
            candidates: List[Suggestion] = []
            for generator in self.generators:
                candidates.extend(
                    generator(
                        document,
                        position,
                        language,
                        prefix,
                        packs=self.packs,
                        rng=self.rng,
                    )
                )
            return combine(candidates, self.catalogue)
        except Exception:
            logger.warning(
                "Suggestion pipeline failed for language=%s; using fallback",
                language,
                exc_info=True,
            )
            return fallback_suggestions(self.packs, language, prefix)

    async def generate_security_report(self, document: str, language: str) -> SecurityReport:
        return scan(document, language, self.catalogue)


__all__ = ["SuggestionEngine"]
