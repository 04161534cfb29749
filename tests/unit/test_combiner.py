
import pytest

from packages.language_packs.registry import default_registry
from packages.ranking.combiner import (
    MAX_SUGGESTIONS,
    attach_security_scores,
    combine,
    fallback_suggestions,
    rank,
    weight_candidates,
)
from packages.schema.models import GeneratorId, Suggestion
from packages.security.catalogue import SecurityCategory, default_catalogue


CATALOGUE = default_catalogue()


def _suggestion(text="x", confidence=0.8, security=1.0, model=GeneratorId.TEMPLATE_TRIGGER):
    return Suggestion(text=text, confidence=confidence, security_score=security, model=model)


@pytest.mark.parametrize(
    "model,expected",
    [
        (GeneratorId.TEMPLATE_TRIGGER, 0.28),
        (GeneratorId.ADJACENT_LINE, 0.2),
        (GeneratorId.CONTEXT_AWARE, 0.2),
        (GeneratorId.PREFIX_KEYWORD, 0.12),
        (GeneratorId.FALLBACK, 0.8),
    ],
)
def test_weight_candidates_applies_generator_weight(model, expected):
    original = _suggestion(model=model)
    weighted = weight_candidates([original])

    assert weighted[0].confidence == pytest.approx(expected)
    assert original.confidence == pytest.approx(0.8)


def test_attach_security_scores_overwrites_placeholder():
    scored = attach_security_scores(
        [_suggestion(text="pass", security=0.9), _suggestion(text="eval(data)", security=1.0)],
        CATALOGUE,
    )

    assert scored[0].security_score == pytest.approx(1.0)
    # xss and code_injection both list eval(
    assert scored[1].security_score == pytest.approx(0.3)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("total = a + b", 1.0),
        ("SELECT * FROM t WHERE a = $x", 0.6),
        ("innerHTML = value", 0.7),
        ("../../etc/passwd", 0.7),
        ("system(cmd)", 0.6),
    ],
)
def test_catalogue_score_per_category(text, expected):
    assert CATALOGUE.score(text) == pytest.approx(expected)


def test_catalogue_penalises_category_once():
    # two xss patterns match but the category costs a single penalty
    assert CATALOGUE.matching_categories('<a onclick="go()">javascript:') == [SecurityCategory.XSS]
    assert CATALOGUE.score('<a onclick="go()">javascript:') == pytest.approx(0.7)


def test_catalogue_score_is_monotonic_and_floored():
    texts = [
        "value",
        "SELECT * FROM t WHERE a = $x",
        "SELECT * FROM t WHERE a = $x; innerHTML = 1",
        "SELECT * FROM t WHERE a = $x; innerHTML = 1; system(cmd)",
        "SELECT * FROM t WHERE a = $x; innerHTML = 1; system(cmd); ../../",
    ]
    scores = [CATALOGUE.score(text) for text in texts]

    assert scores == sorted(scores, reverse=True)
    assert scores[-1] == 0.0


def test_catalogue_get_unknown_category_is_empty():
    assert CATALOGUE.get("buffer_overflow") == ()
    assert len(CATALOGUE.get("path_traversal")) == 3


def test_rank_is_stable_on_ties_and_truncates():
    candidates = [_suggestion(text=str(i), confidence=0.5) for i in range(7)]
    ranked = rank(candidates)

    assert [c.text for c in ranked] == ["0", "1", "2", "3", "4"]
    assert len(ranked) == MAX_SUGGESTIONS


def test_rank_orders_by_composite_score():
    candidates = [
        _suggestion(text="low", confidence=0.1, security=1.0),
        _suggestion(text="risky", confidence=0.9, security=0.0),
        _suggestion(text="high", confidence=0.9, security=1.0),
    ]

    assert [c.text for c in rank(candidates)] == ["high", "risky", "low"]


def test_combine_keeps_scores_in_unit_range():
    candidates = [
        _suggestion(text="eval(x); system(y); ../..", confidence=0.95, model=GeneratorId.FALLBACK),
        _suggestion(text="ok", confidence=1.0, model=GeneratorId.PREFIX_KEYWORD),
    ]
    combined = combine(candidates, CATALOGUE)

    for candidate in combined:
        assert 0.0 <= candidate.confidence <= 1.0
        assert 0.0 <= candidate.security_score <= 1.0
    composites = [c.composite_score for c in combined]
    assert composites == sorted(composites, reverse=True)


def test_fallback_uses_first_three_keywords():
    packs = default_registry()

    assert [s.text for s in fallback_suggestions(packs, "python", "")] == ["def", "class", "if"]
    fallback = fallback_suggestions(packs, "python", "d")
    assert [s.text for s in fallback] == ["ef"]
    assert fallback[0].model is GeneratorId.FALLBACK
    assert fallback[0].confidence == pytest.approx(0.5)
    # "else" is the fourth keyword, outside the fallback window
    assert fallback_suggestions(packs, "python", "el") == []


def test_fallback_without_pack_is_empty():
    assert fallback_suggestions(default_registry(), "lua", "lo") == []
