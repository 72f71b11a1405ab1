"""Détection de doublons avant la création d'un module ou d'un quiz.

Une entité publiée du même type et du même tenant dont la similarité dépasse le seuil de
déduplication est considérée comme identique à celle demandée.

La vérification n'est pas atomique: deux sessions concurrentes peuvent toutes deux conclure à
l'absence de doublon et créer chacune leur entité.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from backend.core.constants import DEDUP_SIMILARITY_THRESHOLD
from backend.domain.entities import ContentType, embedding_text
from backend.domain.retrieval_types import SimilarityMatch
from backend.infra.embeddings.base import Embeddings
from backend.services.similarity_search import SimilaritySearchEngine

log = structlog.get_logger(__name__)


@dataclass
class DuplicateCheck:
    """Résultat d'une vérification: l'entité existante éventuelle et le vecteur calculé.

    Le vecteur est réutilisé tel quel pour l'entité créée quand aucun doublon n'est trouvé.
    """

    existing: SimilarityMatch | None
    embedding: list[float]
    text: str

    @property
    def found(self) -> bool:
        return self.existing is not None


class CreationDeduplicator:
    """Recherche, pour un type et un tenant, l'entité publiée la plus proche au-dessus du seuil."""

    def __init__(
        self,
        search_engine: SimilaritySearchEngine,
        embedder: Embeddings,
        threshold: float = DEDUP_SIMILARITY_THRESHOLD,
    ) -> None:
        self.search_engine = search_engine
        self.embedder = embedder
        self.threshold = threshold

    def find_duplicate(
        self,
        tenant_id: str,
        entity_type: ContentType,
        title: str,
        description: str | None,
    ) -> DuplicateCheck:
        # bypasses the session embedding cache
        text = embedding_text(title, description)
        embedding = self.embedder.embed_one(text)
        matches = self.search_engine.search(
            tenant_id, entity_type, embedding, limit=1, threshold=self.threshold
        )
        existing = matches[0] if matches else None
        if existing is not None:
            log.info(
                "dedup_found_existing",
                entity_type=entity_type,
                existing_id=existing.id,
                existing_title=existing.title,
                requested_title=title,
                similarity=existing.similarity,
            )
        return DuplicateCheck(existing=existing, embedding=embedding, text=text)
