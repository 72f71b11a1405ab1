"""
In-memory numpy similarity ranker.

Lightweight alternative to FAISS (`VECSTORE_BACKEND=memory`), with identical semantics: cosine
similarity, descending order, zero-norm vectors scored 0.
"""

from __future__ import annotations

import time
from collections.abc import Sequence

import numpy as np

from backend.app.metrics import RANKER_LATENCY
from backend.domain.retrieval_types import EmbeddedEntity
from backend.infra.vecstores.base import SimilarityRanker


class NumpyRanker(SimilarityRanker):
    """Cosinus calculé directement avec numpy."""

    backend = "memory"

    def rank(
        self, query: Sequence[float], candidates: Sequence[EmbeddedEntity]
    ) -> list[tuple[EmbeddedEntity, float]]:
        start = time.perf_counter()
        qx, xb, kept = self._matrix(query, candidates)
        if not kept:
            return []
        q = qx[0]
        q_norm = float(np.linalg.norm(q))
        norms = np.linalg.norm(xb, axis=1)
        denom = norms * q_norm
        dots = xb @ q
        sims = np.divide(dots, denom, out=np.zeros_like(dots), where=denom > 0)
        order = np.argsort(-sims, kind="stable")
        RANKER_LATENCY.labels(backend=self.backend).observe(time.perf_counter() - start)
        return [(kept[i], float(np.clip(sims[i], -1.0, 1.0))) for i in order]
