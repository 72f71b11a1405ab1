"""
Types de données pour la recherche de contenus.

Ce module définit les modèles Pydantic des correspondances de similarité (éphémères, jamais
persistées) et de leur forme compacte renvoyée à l'agent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel

from backend.domain.entities import AgentModel


class SimilarityMatch(BaseModel):
    """
    Correspondance entre une requête et une entité stockée.

    `similarity` vaut `1 - distance cosinus` (dans [-1, 1]), ou 0 pour un résultat issu du
    fallback lexical.
    """

    id: str
    title: str
    description: str | None = None
    similarity: float
    created_at: datetime | None = None


class CompactResult(AgentModel):
    """Forme minimale d'un résultat pour l'agent; `description` seulement si pertinente."""

    id: str
    title: str
    similarity: float
    description: str | None = None


@dataclass(frozen=True)
class EmbeddedEntity:
    """Entité publiée candidate au classement vectoriel."""

    id: str
    title: str
    description: str | None
    embedding: list[float]
    created_at: datetime | None = None


@dataclass(frozen=True)
class EntityRef:
    id: str
    title: str


@dataclass
class MultiSearch:
    """Résultats d'une recherche multi-types (vidéos, documents, quiz, modules)."""

    videos: list[SimilarityMatch] = field(default_factory=list)
    documents: list[SimilarityMatch] = field(default_factory=list)
    quizzes: list[SimilarityMatch] = field(default_factory=list)
    modules: list[SimilarityMatch] = field(default_factory=list)
    fallback_used: bool = False

    @property
    def total_count(self) -> int:
        return len(self.videos) + len(self.documents) + len(self.quizzes) + len(self.modules)

    def is_empty(self) -> bool:
        return self.total_count == 0
