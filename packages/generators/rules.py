"""Rule-based candidate generators.

Every generator takes the same inputs (document text, cursor position,
language tag, line prefix) plus the read-only pack registry and a random
source, and returns unweighted candidates. A missing language pack is not
an error; the generator simply has nothing to say.
"""
from __future__ import annotations

from typing import List, Protocol

from packages.analysis.context import analyze_context, line_at, split_lines
from packages.language_packs.registry import LanguagePackRegistry
from packages.schema.models import GeneratorId, Position, Suggestion

TEMPLATE_BASE_CONFIDENCE = 0.85
TEMPLATE_JITTER = 0.1
TEMPLATE_SECURITY_PLACEHOLDER = 0.9


class RandomSource(Protocol):
    def random(self) -> float: ...


class Generator(Protocol):
    def __call__(
        self,
        document: str,
        position: Position,
        language: str,
        prefix: str,
        *,
        packs: LanguagePackRegistry,
        rng: RandomSource,
    ) -> List[Suggestion]: ...


def template_trigger(
    document: str,
    position: Position,
    language: str,
    prefix: str,
    *,
    packs: LanguagePackRegistry,
    rng: RandomSource,
) -> List[Suggestion]:
    """Expand a pack template when the prefix ends with its trigger."""

    _ = (document, position)
    pack = packs.get(language)
    if pack is None:
        return []

    suggestions: List[Suggestion] = []
    for trigger, template in pack.completions.items():
        if prefix.endswith(trigger):
            suggestions.append(
                Suggestion(
                    text=template,
                    confidence=TEMPLATE_BASE_CONFIDENCE + rng.random() * TEMPLATE_JITTER,
                    security_score=TEMPLATE_SECURITY_PLACEHOLDER,
                    model=GeneratorId.TEMPLATE_TRIGGER,
                    description="Code generation suggestion",
                )
            )
    return suggestions


def adjacent_line(
    document: str,
    position: Position,
    language: str,
    prefix: str,
    *,
    packs: LanguagePackRegistry,
    rng: RandomSource,
) -> List[Suggestion]:
    """Placeholder body line right after a function header."""

    _ = (prefix, packs, rng)
    lines = split_lines(document)
    current_line = line_at(lines, position.line)
    previous_line = line_at(lines, position.line - 1)
    if current_line.strip():
        return []

    if language == "python" and "def " in previous_line:
        return [
            Suggestion(
                text='    """Function docstring"""',
                confidence=0.8,
                security_score=1.0,
                model=GeneratorId.ADJACENT_LINE,
                description="Docstring suggestion",
            )
        ]
    if language == "javascript" and "function" in previous_line:
        return [
            Suggestion(
                text="    // TODO: Implement function logic",
                confidence=0.75,
                security_score=1.0,
                model=GeneratorId.ADJACENT_LINE,
                description="Comment suggestion",
            )
        ]
    return []


def context_aware(
    document: str,
    position: Position,
    language: str,
    prefix: str,
    *,
    packs: LanguagePackRegistry,
    rng: RandomSource,
) -> List[Suggestion]:
    _ = (packs, rng)
    context = analyze_context(document, position, language)

    suggestions: List[Suggestion] = []
    if context.in_function and language == "python" and prefix.strip().endswith("return"):
        suggestions.append(
            Suggestion(
                text=" result",
                confidence=0.9,
                security_score=1.0,
                model=GeneratorId.CONTEXT_AWARE,
                description="Return statement completion",
            )
        )
    # in_class is only ever set for languages the analyzer understands
    if context.in_class and "self." in prefix:
        suggestions.append(
            Suggestion(
                text="attribute",
                confidence=0.85,
                security_score=1.0,
                model=GeneratorId.CONTEXT_AWARE,
                description="Class attribute suggestion",
            )
        )
    return suggestions


def prefix_keyword(
    document: str,
    position: Position,
    language: str,
    prefix: str,
    *,
    packs: LanguagePackRegistry,
    rng: RandomSource,
) -> List[Suggestion]:
    """Complete the rest of any pack keyword the prefix starts."""

    _ = (document, position, rng)
    pack = packs.get(language)
    if pack is None or not prefix:
        return []

    needle = prefix.lower()
    return [
        Suggestion(
            text=keyword[len(prefix):],
            confidence=0.7,
            security_score=1.0,
            model=GeneratorId.PREFIX_KEYWORD,
            description="Keyword completion",
        )
        for keyword in pack.keywords
        if keyword.startswith(needle)
    ]


GENERATORS: List[Generator] = [template_trigger, adjacent_line, context_aware, prefix_keyword]


__all__ = [
    "GENERATORS",
    "Generator",
    "RandomSource",
    "adjacent_line",
    "context_aware",
    "prefix_keyword",
    "template_trigger",
]
