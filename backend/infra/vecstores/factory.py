"""Sélection du ranker selon `VECSTORE_BACKEND`."""

from __future__ import annotations

import structlog

from backend.infra.vecstores.base import SimilarityRanker


def build_ranker(backend: str | None) -> SimilarityRanker:
    """Retourne le ranker FAISS (défaut) ou numpy (`memory`)."""
    name = (backend or "faiss").lower()
    if name == "memory":
        from backend.infra.vecstores.memory_adapter import NumpyRanker

        structlog.get_logger(__name__).warning("vecstore_memory_backend", backend=name)
        return NumpyRanker()
    if name == "faiss":
        from backend.infra.vecstores.faiss_store import FaissRanker

        return FaissRanker()
    raise ValueError(f"unknown vecstore backend: {backend}")
