"""Tests pour les métriques Prometheus.

Ce module teste que les appels d'outils, les caches et le fallback lexical incrémentent les
compteurs exposés dans le registre par défaut.
"""

from __future__ import annotations

import pytest
from prometheus_client import REGISTRY


def _value(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.mark.asyncio
async def test_tool_calls_counted_by_outcome(tools) -> None:
    """Teste le comptage des appels par outil et par issue."""
    labels = {"tool": "searchContent", "outcome": "empty"}
    before = _value("authoring_tool_calls_total", labels)
    await tools.invoke("searchContent", {"query": "nothing here"})
    assert _value("authoring_tool_calls_total", labels) == before + 1


@pytest.mark.asyncio
async def test_cache_and_fallback_counters(tools, seed) -> None:
    """Teste les compteurs de cache d'outils et de fallback lexical."""
    seed("document", "Growth Hacking Basics", embed=False)
    fallback = {"entity_type": "document"}
    hit = {"tool": "searchDocuments", "result": "hit"}
    fallback_before = _value("authoring_search_lexical_fallback_total", fallback)
    hit_before = _value("authoring_tool_cache_total", hit)

    await tools.search_documents("growth")
    await tools.search_documents("growth")

    assert _value("authoring_search_lexical_fallback_total", fallback) == fallback_before + 1
    assert _value("authoring_tool_cache_total", hit) == hit_before + 1


@pytest.mark.asyncio
async def test_dedup_decisions_counted(tools) -> None:
    questions = [
        {
            "type": "true_false",
            "questionText": "Budgets are plans.",
            "options": [
                {"optionText": "True", "isCorrect": True},
                {"optionText": "False", "isCorrect": False},
            ],
        }
    ]
    reused = {"entity_type": "quiz", "decision": "reused"}
    before = _value("authoring_dedup_decisions_total", reused)
    await tools.create_quiz("Finance quiz", questions)
    await tools.create_quiz("Finance quiz", questions)
    assert _value("authoring_dedup_decisions_total", reused) == before + 1
