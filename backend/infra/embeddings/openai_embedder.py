"""
Embedder OpenAI pour la génération d'embeddings.

Ce module implémente un embedder utilisant l'API OpenAI. Les erreurs réseau ou d'API ne sont pas
rattrapées ici: elles remontent jusqu'à la boucle d'agent.
"""

from __future__ import annotations

from openai import OpenAI

from backend.infra.embeddings.base import Embeddings


class OpenAIEmbedder(Embeddings):
    """
    Embedder OpenAI pour la génération d'embeddings.

    Utilise l'API OpenAI `embeddings.create`; la dimension peut être réduite via `dimensions` pour
    les modèles `text-embedding-3-*`.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        dimensions: int | None = None,
        client: OpenAI | None = None,
    ):
        """
        Initialise l'embedder OpenAI.

        Args:
            api_key: Clé API (None: variable d'environnement OPENAI_API_KEY).
            model: Modèle d'embedding.
            dimensions: Dimension de sortie optionnelle.
            client: Client déjà construit (tests).
        """
        self.client = client or OpenAI(api_key=api_key or None)
        self.model_name = model
        self.dimensions = dimensions

    def embed(self, texts: list[str]) -> list[list[float]]:
        """
        Génère des embeddings vectoriels via l'API OpenAI.

        Args:
            texts: Liste des textes à convertir en embeddings.

        Returns:
            list[list[float]]: Liste des vecteurs d'embedding, dans l'ordre des textes.
        """
        if not texts:
            return []
        kwargs = {"model": self.model_name, "input": texts}
        if self.dimensions:
            kwargs["dimensions"] = self.dimensions
        resp = self.client.embeddings.create(**kwargs)
        ordered = sorted(resp.data, key=lambda d: d.index)
        return [list(d.embedding) for d in ordered]
