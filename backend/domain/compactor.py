"""Mise en forme compacte des résultats de recherche pour l'agent."""

from __future__ import annotations

from backend.core.constants import DESCRIPTION_PREVIEW_CHARS, DESCRIPTION_SIMILARITY_MIN
from backend.domain.retrieval_types import CompactResult, SimilarityMatch


def compact_result(match: SimilarityMatch) -> CompactResult:
    """Réduit une correspondance à `id`, `title`, `similarity`.

    La description (tronquée) n'est jointe que pour les résultats très similaires, probables
    candidats pour l'agent.
    """
    description = None
    if match.similarity > DESCRIPTION_SIMILARITY_MIN and match.description:
        description = match.description[:DESCRIPTION_PREVIEW_CHARS]
    return CompactResult(
        id=match.id,
        title=match.title,
        similarity=match.similarity,
        description=description,
    )


def compact_all(matches: list[SimilarityMatch]) -> list[CompactResult]:
    return [compact_result(m) for m in matches]
