"""
Tests des résultats typés des outils.

Ce module vérifie la sérialisation camelCase, la clé plurielle des recherches mono-type et le
libellé d'issue utilisé par les métriques.
"""

from __future__ import annotations

from pydantic import TypeAdapter

from backend.domain.retrieval_types import CompactResult
from backend.domain.tool_results import (
    EntitySearchResult,
    ErrorResult,
    ModuleFoundSimilarResult,
    ModuleItemsAddedResult,
    NoContentResult,
    QuizCreatedResult,
    ToolResult,
    outcome_of,
)

SIMILARITY = 0.91


def test_entity_search_payload_uses_plural_key() -> None:
    result = EntitySearchResult(
        entity_type="quiz",
        results=[CompactResult(id="q1", title="Quiz", similarity=SIMILARITY)],
        count=1,
    )
    assert result.to_payload() == {
        "type": "search_results",
        "quizzes": [{"id": "q1", "title": "Quiz", "similarity": SIMILARITY}],
        "count": 1,
    }


def test_module_found_similar_payload_is_camel_case() -> None:
    payload = ModuleFoundSimilarResult(
        id="m1",
        title="Marketing",
        requested_title="Intro to Marketing",
        items_count=3,
        similarity=SIMILARITY,
        message="exists",
    ).to_payload()
    assert payload["requestedTitle"] == "Intro to Marketing"
    assert payload["itemsCount"] == 3
    assert payload["alreadyExisted"] is True


def test_tool_result_union_discriminates_on_type() -> None:
    """Teste la désérialisation d'une charge utile vers la bonne variante."""
    adapter = TypeAdapter(ToolResult)
    parsed = adapter.validate_python({"type": "error", "error": "boom"})
    assert isinstance(parsed, ErrorResult)
    parsed = adapter.validate_python(
        {"type": "quiz_created", "id": "q", "title": "Q", "questionsCount": 0}
    )
    assert isinstance(parsed, QuizCreatedResult)


def test_outcome_of() -> None:
    """Teste les libellés d'issue (faible cardinalité)."""
    assert outcome_of(ErrorResult(error="x")) == "error"
    assert outcome_of(NoContentResult(query="q", message="m", suggestion="s")) == "empty"
    assert outcome_of(QuizCreatedResult(id="q", title="Q", questions_count=2)) == "created"
    assert (
        outcome_of(
            QuizCreatedResult(id="q", title="Q", questions_count=0, already_existed=True)
        )
        == "reused"
    )
    assert outcome_of(EntitySearchResult(entity_type="video", results=[], count=0)) == "ok"


def test_module_items_added_payload_and_outcome() -> None:
    result = ModuleItemsAddedResult(
        module_id="m1", module_title="Marketing", added_count=2, total_items=5
    )
    assert result.to_payload() == {
        "type": "module_items_added",
        "moduleId": "m1",
        "moduleTitle": "Marketing",
        "addedCount": 2,
        "totalItems": 5,
    }
    assert outcome_of(result) == "updated"
