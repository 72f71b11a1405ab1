# ============================================================
# Module : backend/services/similarity_search.py
# Objet  : Recherche sémantique par tenant avec fallback lexical.
# Invariants :
#  - Seules les entités `published` du tenant sont renvoyées.
#  - Résultats vectoriels: similarité > seuil, triés par similarité décroissante.
#  - Résultats lexicaux: similarité 0, plus récents d'abord.
# ============================================================
"""Moteur de recherche par similarité pour les vidéos, documents, quiz et modules.

La recherche vectorielle peut ne rien renvoyer (embeddings pas encore calculés, corpus trop petit);
le fallback lexical garantit alors des candidats à l'agent, au prix du classement.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from backend.app.metrics import SEARCH_FALLBACKS
from backend.core.constants import SEARCH_SIMILARITY_THRESHOLD
from backend.domain.entities import CONTENT_TYPES, PLURALS, ContentType
from backend.domain.retrieval_types import MultiSearch, SimilarityMatch
from backend.infra.repo.content_repo import ContentRepository
from backend.infra.vecstores.base import SimilarityRanker

log = structlog.get_logger(__name__)


class SimilaritySearchEngine:
    """Classement cosinus des entités d'un tenant, avec seuil et repli lexical."""

    def __init__(
        self,
        repository: ContentRepository,
        ranker: SimilarityRanker,
        threshold: float = SEARCH_SIMILARITY_THRESHOLD,
        embedding_model: str | None = None,
    ) -> None:
        """Initialise le moteur.

        Args:
            repository: Dépôt des contenus.
            ranker: Implémentation du calcul de similarité (FAISS ou numpy).
            threshold: Seuil de recherche (exclusif).
            embedding_model: Modèle courant; les vecteurs d'un autre modèle sont ignorés.
        """
        self.repository = repository
        self.ranker = ranker
        self.threshold = threshold
        self.embedding_model = embedding_model

    def search(
        self,
        tenant_id: str,
        entity_type: ContentType,
        query_embedding: Sequence[float],
        limit: int,
        threshold: float | None = None,
    ) -> list[SimilarityMatch]:
        """Entités publiées du tenant avec `similarité > seuil`, triées, tronquées à `limit`.

        `threshold` surcharge le seuil de recherche (la déduplication passe son seuil strict).
        """
        floor = self.threshold if threshold is None else threshold
        candidates = self.repository.embedded_candidates(
            tenant_id, entity_type, self.embedding_model
        )
        if not candidates:
            return []
        ranked = self.ranker.rank(query_embedding, candidates)
        above = [(c, s) for c, s in ranked if s > floor]
        above.sort(key=lambda pair: pair[1], reverse=True)
        return [
            SimilarityMatch(
                id=c.id,
                title=c.title,
                description=c.description,
                similarity=s,
                created_at=c.created_at,
            )
            for c, s in above[:limit]
        ]

    def lexical_search(
        self, tenant_id: str, entity_type: ContentType, query: str, limit: int
    ) -> list[SimilarityMatch]:
        """Sous-chaîne insensible à la casse sur titre ou description (similarité 0)."""
        return self.repository.lexical_search(tenant_id, entity_type, query, limit)

    def search_with_fallback(
        self,
        tenant_id: str,
        entity_type: ContentType,
        query: str,
        query_embedding: Sequence[float],
        limit: int,
    ) -> tuple[list[SimilarityMatch], bool]:
        """Recherche vectorielle, puis lexicale si elle ne renvoie rien.

        Returns:
            tuple: (résultats, fallback utilisé)
        """
        matches = self.search(tenant_id, entity_type, query_embedding, limit)
        if matches:
            return matches, False
        SEARCH_FALLBACKS.labels(entity_type=entity_type).inc()
        log.info("search_lexical_fallback", entity_type=entity_type, query=query)
        return self.lexical_search(tenant_id, entity_type, query, limit), True

    async def search_all(
        self,
        tenant_id: str,
        query: str,
        query_embedding: Sequence[float],
        limit: int,
    ) -> MultiSearch:
        """Recherche les quatre types en parallèle avec le même vecteur.

        Le fallback lexical n'est lancé (lui aussi en parallèle) que si les quatre recherches
        vectorielles sont vides.
        """
        vector_results = await asyncio.gather(
            *(
                asyncio.to_thread(self.search, tenant_id, t, query_embedding, limit)
                for t in CONTENT_TYPES
            )
        )
        by_type = dict(zip(CONTENT_TYPES, vector_results, strict=True))
        fallback_used = False
        if not any(by_type.values()):
            fallback_used = True
            lexical_results = await asyncio.gather(
                *(
                    asyncio.to_thread(self.lexical_search, tenant_id, t, query, limit)
                    for t in CONTENT_TYPES
                )
            )
            by_type = dict(zip(CONTENT_TYPES, lexical_results, strict=True))
            for t in CONTENT_TYPES:
                SEARCH_FALLBACKS.labels(entity_type=t).inc()
            log.info("search_all_lexical_fallback", query=query)
        return MultiSearch(
            **{PLURALS[t]: matches for t, matches in by_type.items()},
            fallback_used=fallback_used,
        )
