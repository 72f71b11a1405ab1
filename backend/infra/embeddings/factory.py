"""Sélection de l'embedder selon la configuration."""

from __future__ import annotations

from backend.core.settings import Settings
from backend.infra.embeddings.base import Embeddings


def build_embedder(settings: Settings, api_key: str | None = None) -> Embeddings:
    """Construit l'embedder configuré par `EMBEDDINGS_PROVIDER`.

    `sentence-transformers` n'est importé que pour le fournisseur local (dépendance optionnelle).

    Raises:
        ValueError: fournisseur inconnu.
    """
    provider = settings.EMBEDDINGS_PROVIDER.lower()
    if provider == "openai":
        from backend.infra.embeddings.openai_embedder import OpenAIEmbedder

        return OpenAIEmbedder(
            api_key=api_key or settings.OPENAI_API_KEY,
            model=settings.EMBEDDINGS_MODEL,
            dimensions=settings.EMBEDDINGS_DIMENSIONS,
        )
    if provider == "local":
        from backend.infra.embeddings.local_embedder import LocalEmbedder

        return LocalEmbedder(settings.LOCAL_EMBEDDINGS_MODEL)
    raise ValueError(f"unknown embeddings provider: {settings.EMBEDDINGS_PROVIDER}")
