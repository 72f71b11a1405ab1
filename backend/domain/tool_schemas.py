"""
Schémas d'entrée des outils d'édition de cours.

Chaque outil valide ses arguments avec l'un de ces modèles avant toute requête. Les noms camelCase
envoyés par l'agent (`isPreview`, `questionText`, ...) sont acceptés tout comme le snake_case.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from backend.core.constants import DEFAULT_LIST_LIMIT, DEFAULT_SEARCH_LIMIT
from backend.domain.entities import AgentModel, ContentStatus, ItemContentType


class SearchInput(AgentModel):
    """Recherche par titre ou description; `limit` s'applique à chaque type de contenu."""

    query: str = Field(min_length=1)
    limit: int = Field(default=DEFAULT_SEARCH_LIMIT, ge=1, le=50)


class ListContentInput(AgentModel):
    """Listing d'un type de contenu, filtrable par titre et statut."""

    limit: int = Field(default=DEFAULT_LIST_LIMIT, ge=1, le=100)
    search: str | None = None
    status: ContentStatus | None = None


class ModuleItemInput(AgentModel):
    """Élément d'un module: l'identifiant doit provenir d'un résultat de recherche."""

    type: ItemContentType
    id: str
    order: int
    is_preview: bool = False


class CreateModuleInput(AgentModel):
    title: str = Field(min_length=1)
    description: str | None = None
    items: list[ModuleItemInput]


class QuizOptionInput(AgentModel):
    option_text: str
    is_correct: bool


class QuizQuestionInput(AgentModel):
    type: Literal["multiple_choice", "true_false"]
    question_text: str
    explanation: str | None = None
    options: list[QuizOptionInput]


class CreateQuizInput(AgentModel):
    title: str = Field(min_length=1)
    description: str | None = None
    questions: list[QuizQuestionInput]


class GetModuleInput(AgentModel):
    module_id: str


class GetQuizInput(AgentModel):
    quiz_id: str


class ModuleItemAppendInput(ModuleItemInput):
    """Élément ajouté à un module existant; sans `order`, il est placé après le dernier."""

    order: int | None = None


class UpdateModuleItemsInput(AgentModel):
    """Ajout d'éléments à un module existant (seul le mode `add` est exposé)."""

    module_id: str
    items: list[ModuleItemAppendInput] = Field(min_length=1)
    mode: Literal["add"] = "add"
