"""Constantes partagées par les outils d'édition de cours.

Les seuils sont des valeurs par défaut; `Settings` permet de les surcharger par environnement.
"""

from __future__ import annotations

# Similarité cosinus minimale (exclusive) pour qu'un contenu apparaisse dans une recherche.
SEARCH_SIMILARITY_THRESHOLD = 0.55
# Similarité minimale (exclusive) pour considérer deux entités comme identiques à la création.
DEDUP_SIMILARITY_THRESHOLD = 0.85

MAX_CACHE_SIZE = 100
TOOL_CACHE_TTL_SECONDS = 5 * 60

DEFAULT_SEARCH_LIMIT = 5
DEFAULT_LIST_LIMIT = 20

# Compaction des résultats renvoyés à l'agent
DESCRIPTION_SIMILARITY_MIN = 0.8
DESCRIPTION_PREVIEW_CHARS = 100

LEXICAL_FALLBACK_SIMILARITY = 0.0
