"""
FAISS-backed similarity ranker.

Requires `faiss-cpu` and `numpy`. Vectors are L2-normalised, so the inner product computed by an
exact `IndexFlatIP` equals the cosine similarity `1 - cosine_distance`.
"""

from __future__ import annotations

import time
from collections.abc import Sequence

import faiss
import numpy as np

from backend.app.metrics import RANKER_LATENCY
from backend.domain.retrieval_types import EmbeddedEntity
from backend.infra.vecstores.base import SimilarityRanker


class FaissRanker(SimilarityRanker):
    """
    Classement exact par produit scalaire sur vecteurs normalisés.

    L'index est reconstruit à chaque appel à partir des candidats du tenant: les contenus d'un
    tenant restent peu nombreux et la base reste la source de vérité.
    """

    backend = "faiss"

    def rank(
        self, query: Sequence[float], candidates: Sequence[EmbeddedEntity]
    ) -> list[tuple[EmbeddedEntity, float]]:
        """
        Classe les candidats par similarité cosinus décroissante.

        Args:
            query: Vecteur de la requête.
            candidates: Entités candidates avec leur embedding.

        Returns:
            list[tuple[EmbeddedEntity, float]]: Couples (entité, similarité), triés.
        """
        start = time.perf_counter()
        qx, xb, kept = self._matrix(query, candidates)
        if not kept:
            return []
        # zero vectors stay zero after normalize_L2, giving similarity 0
        faiss.normalize_L2(qx)
        faiss.normalize_L2(xb)
        index = faiss.IndexFlatIP(xb.shape[1])
        index.add(xb)
        scores, indices = index.search(qx, len(kept))
        results: list[tuple[EmbeddedEntity, float]] = []
        for score, idx in zip(scores[0], indices[0], strict=True):
            if idx == -1:
                continue
            results.append((kept[idx], float(np.clip(score, -1.0, 1.0))))
        RANKER_LATENCY.labels(backend=self.backend).observe(time.perf_counter() - start)
        return results
