"""
Métriques Prometheus des outils d'édition de cours.

Ce module définit les métriques exposées par la couche d'outils: appels d'outils, caches de
session, fallback lexical et décisions de déduplication. Aucune métrique n'est labellisée par
tenant (cardinalité).
"""

from prometheus_client import Counter, Histogram

TOOL_CALLS = Counter(
    "authoring_tool_calls_total",
    "Total authoring tool invocations",
    ["tool", "outcome"],
)
TOOL_LATENCY = Histogram(
    "authoring_tool_latency_seconds",
    "Latency of authoring tool invocations",
    ["tool"],
)

EMBEDDING_CACHE_EVENTS = Counter(
    "authoring_embedding_cache_total",
    "Embedding cache lookups",
    ["result"],  # hit | miss
)
TOOL_CACHE_EVENTS = Counter(
    "authoring_tool_cache_total",
    "Tool result cache lookups",
    ["tool", "result"],  # hit | miss | expired
)

SEARCH_FALLBACKS = Counter(
    "authoring_search_lexical_fallback_total",
    "Similarity searches that fell back to lexical matching",
    ["entity_type"],
)
DEDUP_DECISIONS = Counter(
    "authoring_dedup_decisions_total",
    "Create-or-reuse decisions",
    ["entity_type", "decision"],  # created | reused | backfilled
)

RANKER_LATENCY = Histogram(
    "authoring_ranker_latency_seconds",
    "Latency of in-process similarity ranking",
    ["backend"],
)
