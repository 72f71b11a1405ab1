# ============================================================
# Module : backend/services/caches.py
# Objet  : Caches mémoire d'une session d'édition (embeddings, résultats d'outils).
# Invariants :
#  - Éviction FIFO (ordre d'insertion), jamais au-delà de max_size.
#  - Un hit ne rafraîchit pas la position de l'entrée.
#  - Aucun partage entre sessions: chaque ToolContext possède ses caches.
# ============================================================
"""Caches bornés d'une session d'édition de cours.

`EmbeddingCache` mémorise le vecteur brut d'une requête; `ToolCallCache` mémorise le résultat final
d'un outil (après recherche et compaction), avec une durée de vie courte. Un hit sur ce dernier
évite à la fois l'appel au fournisseur d'embeddings et la requête en base.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Hashable
from typing import Any, Generic, TypeVar

import structlog

from backend.app.metrics import EMBEDDING_CACHE_EVENTS, TOOL_CACHE_EVENTS
from backend.core.constants import MAX_CACHE_SIZE, TOOL_CACHE_TTL_SECONDS
from backend.infra.embeddings.base import Embeddings

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

log = structlog.get_logger(__name__)


def normalize_query(text: str) -> str:
    """Clé de cache d'une requête: minuscules, espaces de bord retirés."""
    return text.lower().strip()


class BoundedFifoCache(Generic[K, V]):
    """Dictionnaire borné, éviction de l'entrée la plus anciennement insérée."""

    def __init__(self, max_size: int = MAX_CACHE_SIZE) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self.max_size = max_size
        self._data: dict[K, V] = {}

    def get(self, key: K) -> V | None:
        return self._data.get(key)

    def put(self, key: K, value: V) -> K | None:
        """Insère `value`; retourne la clé évincée s'il y en a une."""
        evicted: K | None = None
        if key in self._data:
            del self._data[key]
        elif len(self._data) >= self.max_size:
            evicted = next(iter(self._data))
            del self._data[evicted]
        self._data[key] = value
        return evicted

    def pop(self, key: K) -> V | None:
        return self._data.pop(key, None)

    def keys(self) -> list[K]:
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class EmbeddingCache:
    """Mémoïsation des embeddings de requêtes courtes (pas de documents entiers).

    Pas d'expiration temporelle: une entrée vit jusqu'à son éviction ou la fin de la session.
    """

    def __init__(self, embedder: Embeddings, max_size: int = MAX_CACHE_SIZE) -> None:
        self.embedder = embedder
        self._cache: BoundedFifoCache[str, list[float]] = BoundedFifoCache(max_size)

    def get_embedding(self, text: str) -> list[float]:
        """Retourne l'embedding de `text`, depuis le cache si possible.

        Les erreurs du fournisseur remontent sans être mises en cache.
        """
        key = normalize_query(text)
        cached = self._cache.get(key)
        if cached is not None:
            EMBEDDING_CACHE_EVENTS.labels(result="hit").inc()
            log.info("embedding_cache_hit", query=key)
            return cached
        EMBEDDING_CACHE_EVENTS.labels(result="miss").inc()
        embedding = self.embedder.embed_one(text)
        evicted = self._cache.put(key, embedding)
        if evicted is not None:
            log.debug("embedding_cache_evicted", query=evicted)
        return embedding

    def __contains__(self, text: object) -> bool:
        return isinstance(text, str) and normalize_query(text) in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()


class ToolCallCache:
    """Cache des résultats d'outils, clé `(opération, requête normalisée, limite)`, TTL court."""

    def __init__(
        self,
        ttl_seconds: float = TOOL_CACHE_TTL_SECONDS,
        max_size: int = MAX_CACHE_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: BoundedFifoCache[tuple[str, str, int], tuple[float, Any]] = (
            BoundedFifoCache(max_size)
        )

    @staticmethod
    def key(operation: str, query: str, limit: int) -> tuple[str, str, int]:
        return (operation, normalize_query(query), limit)

    def get(self, operation: str, query: str, limit: int) -> Any | None:
        key = self.key(operation, query, limit)
        entry = self._cache.get(key)
        if entry is None:
            TOOL_CACHE_EVENTS.labels(tool=operation, result="miss").inc()
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            self._cache.pop(key)
            TOOL_CACHE_EVENTS.labels(tool=operation, result="expired").inc()
            return None
        TOOL_CACHE_EVENTS.labels(tool=operation, result="hit").inc()
        log.info("tool_cache_hit", tool=operation, query=key[1])
        return value

    def put(self, operation: str, query: str, limit: int, value: Any) -> None:
        self._cache.put(self.key(operation, query, limit), (self._clock(), value))

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()
