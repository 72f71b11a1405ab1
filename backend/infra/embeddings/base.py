"""
Interface de base pour les générateurs d'embeddings.

Ce module définit l'interface abstraite que doivent implémenter tous les générateurs d'embeddings
vectoriels. La dimension des vecteurs est fixée par le modèle: mélanger deux modèles dans une même
table sans réindexation dégrade silencieusement la similarité.
"""

from abc import ABC, abstractmethod


class Embeddings(ABC):
    """Interface abstraite pour les générateurs d'embeddings."""

    model_name: str = "unknown"

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Génère des embeddings vectoriels pour une liste de textes."""
        ...

    def embed_one(self, text: str) -> list[float]:
        """Génère l'embedding d'un seul texte."""
        return self.embed([text])[0]
