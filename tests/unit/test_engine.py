
import asyncio
import logging

import pytest

from packages.engine.core import SuggestionEngine
from packages.language_packs.registry import default_registry
from packages.schema.models import GeneratorId, Position


class FixedRandom:
    def random(self) -> float:
        return 0.5


def _suggest(engine, document, line, column, language):
    prefix = document.split("\n")[line][:column]
    return asyncio.run(
        engine.generate_suggestions(document, Position(line=line, column=column), language, prefix)
    )


def test_python_def_yields_template_candidate():
    engine = SuggestionEngine(rng=FixedRandom())
    results = _suggest(engine, "def ", 0, 4, "python")

    expected = default_registry().get("python").completions["def "]
    matches = [r for r in results if r.text == expected]
    assert matches
    assert matches[0].model is GeneratorId.TEMPLATE_TRIGGER
    assert matches[0].confidence == pytest.approx(0.9 * 0.35)
    assert matches[0].security_score == pytest.approx(1.0)


def test_results_ranked_bounded_and_in_range():
    engine = SuggestionEngine(rng=FixedRandom())
    documents = [
        ("def f(x):\n    return", 1, 10, "python"),
        ("class A:\n    def m(self):\n        self.", 2, 13, "python"),
        ("e", 0, 1, "python"),
        ("p", 0, 1, "html"),
        ("pro", 0, 3, "typescript"),
        ("if (", 0, 4, "php"),
        ("function go() {\n", 1, 0, "javascript"),
    ]
    for document, line, column, language in documents:
        results = _suggest(engine, document, line, column, language)
        assert len(results) <= 5
        for result in results:
            assert 0.0 <= result.confidence <= 1.0
            assert 0.0 <= result.security_score <= 1.0
        composites = [r.composite_score for r in results]
        assert composites == sorted(composites, reverse=True)


def test_identical_inputs_give_identical_output():
    engine = SuggestionEngine(rng=FixedRandom())
    document = "def f(x):\n    return"

    first = _suggest(engine, document, 1, 10, "python")
    second = _suggest(engine, document, 1, 10, "python")
    assert [r.model_dump() for r in first] == [r.model_dump() for r in second]


def test_unknown_language_returns_empty():
    engine = SuggestionEngine(rng=FixedRandom())

    assert _suggest(engine, "local x = fu", 0, 12, "lua") == []


def test_empty_prefix_has_no_keyword_candidates():
    engine = SuggestionEngine(rng=FixedRandom())
    results = _suggest(engine, "def foo():\n", 1, 0, "python")

    assert [r.model for r in results] == [GeneratorId.ADJACENT_LINE]


def test_generator_failure_falls_back(caplog):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    engine = SuggestionEngine(rng=FixedRandom(), generators=[broken])
    with caplog.at_level(logging.WARNING, logger="packages.engine.core"):
        results = _suggest(engine, "d", 0, 1, "python")

    assert [r.text for r in results] == ["ef"]
    assert results[0].model is GeneratorId.FALLBACK
    assert any("fallback" in record.getMessage() for record in caplog.records)


def test_generator_failure_without_pack_is_empty():
    def broken(*args, **kwargs):
        raise KeyError("missing")

    engine = SuggestionEngine(generators=[broken])

    assert _suggest(engine, "x", 0, 1, "lua") == []


def test_concurrent_requests_match_sequential():
    engine = SuggestionEngine(rng=FixedRandom())
    requests = [
        ("def ", Position(line=0, column=4), "python", "def "),
        ("e", Position(line=0, column=1), "python", "e"),
        ("<div", Position(line=0, column=4), "html", "<div"),
    ]

    async def gather():
        return await asyncio.gather(*(engine.generate_suggestions(*req) for req in requests))

    concurrent = asyncio.run(gather())
    sequential = [asyncio.run(engine.generate_suggestions(*req)) for req in requests]
    assert concurrent == sequential


def test_security_report_delegates_to_scanner():
    engine = SuggestionEngine()
    report = asyncio.run(
        engine.generate_security_report("ok\nSELECT * FROM users WHERE id = $id", "php")
    )

    assert [(i.title, i.line) for i in report.issues] == [("Potential SQL Injection", 2)]
