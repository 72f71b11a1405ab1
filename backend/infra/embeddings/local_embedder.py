"""Embedder local utilisant Sentence Transformers.

Ce module implémente un embedder local (384 dimensions avec `all-MiniLM-L6-v2`). Le modèle est
chargé une seule fois par processus et partagé entre instances.
"""

from __future__ import annotations

from sentence_transformers import SentenceTransformer

from backend.infra.embeddings.base import Embeddings


class LocalEmbedder(Embeddings):
    """Embedder local utilisant Sentence Transformers."""

    _models: dict[str, SentenceTransformer] = {}

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        """Initialise l'embedder local avec le modèle spécifié.

        Args:
            model_name: Nom du modèle Sentence Transformers à utiliser.
        """
        if model_name not in LocalEmbedder._models:
            LocalEmbedder._models[model_name] = SentenceTransformer(model_name)
        self.model = LocalEmbedder._models[model_name]
        self.model_name = model_name

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Génère des embeddings vectoriels pour une liste de textes.

        Args:
            texts: Liste des textes à convertir en embeddings.

        Returns:
            list[list[float]]: Liste des vecteurs d'embedding.
        """
        if not texts:
            return []
        return self.model.encode(texts, convert_to_numpy=True).tolist()
