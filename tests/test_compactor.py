"""
Tests de la mise en forme compacte des résultats.

Ce module vérifie que la description n'est jointe (et tronquée) que pour les résultats très
similaires.
"""

from __future__ import annotations

from backend.core.constants import DESCRIPTION_PREVIEW_CHARS
from backend.domain.compactor import compact_all, compact_result
from backend.domain.retrieval_types import SimilarityMatch

LONG_DESCRIPTION = "x" * 500
HIGH_SIMILARITY = 0.9
LOW_SIMILARITY = 0.3
BOUNDARY_SIMILARITY = 0.8


def test_high_similarity_keeps_truncated_description() -> None:
    """Teste la troncature de la description pour un résultat très similaire."""
    match = SimilarityMatch(
        id="v1", title="Intro", description=LONG_DESCRIPTION, similarity=HIGH_SIMILARITY
    )
    payload = compact_result(match).to_payload()
    assert len(payload["description"]) == DESCRIPTION_PREVIEW_CHARS
    assert payload["similarity"] == HIGH_SIMILARITY


def test_low_similarity_omits_description_key() -> None:
    """Teste que la clé `description` est absente pour un résultat peu similaire."""
    match = SimilarityMatch(
        id="v1", title="Intro", description=LONG_DESCRIPTION, similarity=LOW_SIMILARITY
    )
    assert compact_result(match).to_payload() == {
        "id": "v1",
        "title": "Intro",
        "similarity": LOW_SIMILARITY,
    }


def test_boundary_similarity_is_exclusive() -> None:
    match = SimilarityMatch(id="d1", title="Doc", description="d", similarity=BOUNDARY_SIMILARITY)
    assert compact_result(match).description is None


def test_compact_all_keeps_order_and_skips_missing_description() -> None:
    matches = [
        SimilarityMatch(id="a", title="A", description=None, similarity=HIGH_SIMILARITY),
        SimilarityMatch(id="b", title="B", description="short", similarity=0.0),
    ]
    compacted = compact_all(matches)
    assert [c.id for c in compacted] == ["a", "b"]
    assert all(c.description is None for c in compacted)
