"""Interface de base pour le classement vectoriel.

Un ranker reçoit le vecteur de la requête et les entités candidates (déjà filtrées par tenant,
statut et présence d'embedding) et renvoie leur similarité cosinus, triée par ordre décroissant.
Le seuil et la troncature restent l'affaire du moteur de recherche.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np
import structlog

from backend.domain.retrieval_types import EmbeddedEntity

log = structlog.get_logger(__name__)


class SimilarityRanker(ABC):
    """Interface abstraite pour les rankers de similarité cosinus."""

    backend: str = "abstract"

    @abstractmethod
    def rank(
        self, query: Sequence[float], candidates: Sequence[EmbeddedEntity]
    ) -> list[tuple[EmbeddedEntity, float]]:
        """Classe les candidats par similarité cosinus décroissante."""
        raise NotImplementedError

    def _matrix(
        self, query: Sequence[float], candidates: Sequence[EmbeddedEntity]
    ) -> tuple[np.ndarray, np.ndarray, list[EmbeddedEntity]]:
        """Construit (requête, matrice des candidats) en float32.

        Les candidats dont la dimension diffère de celle de la requête sont écartés: ils viennent
        d'un autre modèle et ne sont pas comparables.
        """
        q = np.asarray(query, dtype="float32").reshape(1, -1)
        dim = q.shape[1]
        kept = [c for c in candidates if len(c.embedding) == dim]
        skipped = len(candidates) - len(kept)
        if skipped:
            log.warning(
                "ranker_dimension_mismatch", backend=self.backend, expected=dim, skipped=skipped
            )
        if not kept:
            return q, np.zeros((0, dim), dtype="float32"), kept
        xb = np.asarray([c.embedding for c in kept], dtype="float32")
        return q, xb, kept
