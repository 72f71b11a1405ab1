"""
Fakes pour les tests unitaires.

Ce module fournit une implémentation factice de l'interface Embeddings au comportement
déterministe: chaque dimension compte les mots d'un vocabulaire fixe, si bien que deux textes
partageant les mêmes mots-clés ont une similarité cosinus de 1 et deux textes sans mot commun une
similarité de 0.
"""

from __future__ import annotations

import re

from backend.infra.embeddings.base import Embeddings

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"

VOCABULARY = ("marketing", "seo", "growth", "python", "cooking", "finance")


class FakeEmbeddings(Embeddings):
    """
    Implémentation factice d'Embeddings pour les tests.

    Les textes de `overrides` (comparaison insensible à la casse) reçoivent le vecteur fourni; les
    autres un vecteur de comptage de mots-clés. Chaque appel à `embed` est enregistré dans `calls`.
    """

    model_name = "fake-embedding"

    def __init__(self, overrides: dict[str, list[float]] | None = None) -> None:
        self.overrides = {k.lower().strip(): v for k, v in (overrides or {}).items()}
        self.calls: list[list[str]] = []

    def vector(self, text: str) -> list[float]:
        """Vecteur d'un texte, sans enregistrer d'appel."""
        key = text.lower().strip()
        if key in self.overrides:
            return list(self.overrides[key])
        words = re.findall(r"[a-z]+", key)
        return [float(sum(1 for w in words if w.startswith(v))) for v in VOCABULARY]

    def embed(self, texts: list[str]) -> list[list[float]]:
        """
        Génère des embeddings factices déterministes.

        Args:
            texts: Liste des textes à convertir en embeddings.

        Returns:
            list[list[float]]: Liste des vecteurs d'embedding factices.
        """
        self.calls.append(list(texts))
        return [self.vector(t) for t in texts]

    @property
    def call_count(self) -> int:
        return len(self.calls)


class FailingEmbeddings(Embeddings):
    """Embedder dont chaque appel échoue (fournisseur indisponible)."""

    model_name = "failing"

    def embed(self, texts: list[str]) -> list[list[float]]:
        raise ConnectionError("embedding provider unavailable")
