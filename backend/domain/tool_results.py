"""
Résultats des outils d'édition de cours (union discriminée par `type`).

Chaque issue d'un outil est un modèle distinct; l'appelant distingue les cas par le champ `type`
au lieu d'inspecter la forme du dictionnaire.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field

from backend.domain.entities import (
    PLURALS,
    AgentModel,
    ContentStatus,
    ContentType,
    ItemContentType,
)
from backend.domain.retrieval_types import CompactResult


class ContentSearchResult(AgentModel):
    type: Literal["content_results"] = "content_results"
    videos: list[CompactResult]
    documents: list[CompactResult]
    quizzes: list[CompactResult]
    modules: list[CompactResult]
    total_count: int


class NoContentResult(AgentModel):
    """Aucun contenu trouvé: succès structuré avec une consigne actionnable pour l'agent."""

    type: Literal["no_content"] = "no_content"
    query: str
    total_count: int = 0
    videos: list[CompactResult] = Field(default_factory=list)
    documents: list[CompactResult] = Field(default_factory=list)
    quizzes: list[CompactResult] = Field(default_factory=list)
    modules: list[CompactResult] = Field(default_factory=list)
    message: str
    suggestion: str


class EntitySearchResult(AgentModel):
    """Résultat d'une recherche mono-type, exposé sous la clé plurielle du type."""

    type: Literal["search_results"] = "search_results"
    entity_type: ContentType
    results: list[CompactResult]
    count: int

    def to_payload(self) -> dict:
        return {
            "type": self.type,
            PLURALS[self.entity_type]: [r.to_payload() for r in self.results],
            "count": self.count,
        }


class ContentSummary(AgentModel):
    id: str
    title: str
    description: str | None = None
    status: ContentStatus
    duration: int | None = None


class ContentListResult(AgentModel):
    type: Literal["content_list"] = "content_list"
    entity_type: ContentType
    items: list[ContentSummary]
    count: int

    def to_payload(self) -> dict:
        return {
            "type": self.type,
            PLURALS[self.entity_type]: [i.to_payload() for i in self.items],
            "count": self.count,
        }


class ModuleCreatedResult(AgentModel):
    type: Literal["module_created"] = "module_created"
    id: str
    title: str
    items_count: int


class ModuleReusedResult(AgentModel):
    """Module similaire existant, vide, auquel les éléments demandés ont été ajoutés."""

    type: Literal["module_reused"] = "module_reused"
    id: str
    title: str
    items_count: int
    already_existed: bool = True
    items_added: bool = True
    message: str


class ModuleFoundSimilarResult(AgentModel):
    """Module similaire existant renvoyé tel quel (éléments demandés ignorés)."""

    type: Literal["module_found_similar"] = "module_found_similar"
    id: str
    title: str
    requested_title: str
    items_count: int
    already_existed: bool = True
    similarity: float
    message: str


class QuizCreatedResult(AgentModel):
    """Quiz créé, ou quiz similaire existant (`already_existed`, `questions_count` à 0)."""

    type: Literal["quiz_created"] = "quiz_created"
    id: str
    title: str
    questions_count: int
    already_existed: bool | None = None


class ModuleItemDetail(AgentModel):
    id: str
    content_type: ItemContentType
    content_id: str
    order: int
    is_preview: bool
    title: str


class ModuleDetails(AgentModel):
    id: str
    title: str
    description: str | None = None
    status: ContentStatus
    items: list[ModuleItemDetail]


class ModuleDetailsResult(AgentModel):
    type: Literal["module_details"] = "module_details"
    module: ModuleDetails


class ModuleItemsAddedResult(AgentModel):
    """Éléments ajoutés à la fin d'un module existant."""

    type: Literal["module_items_added"] = "module_items_added"
    module_id: str
    module_title: str
    added_count: int
    total_items: int


class QuizOptionDetail(AgentModel):
    id: str
    option_text: str
    is_correct: bool
    order: int


class QuizQuestionDetail(AgentModel):
    id: str
    type: str
    question_text: str
    explanation: str | None = None
    order: int
    options: list[QuizOptionDetail]


class QuizDetails(AgentModel):
    id: str
    title: str
    description: str | None = None
    status: ContentStatus
    questions: list[QuizQuestionDetail]


class QuizDetailsResult(AgentModel):
    type: Literal["quiz_details"] = "quiz_details"
    quiz: QuizDetails


class ErrorResult(AgentModel):
    type: Literal["error"] = "error"
    error: str


ToolResult = Annotated[
    Union[
        ContentSearchResult,
        NoContentResult,
        EntitySearchResult,
        ContentListResult,
        ModuleCreatedResult,
        ModuleReusedResult,
        ModuleFoundSimilarResult,
        QuizCreatedResult,
        ModuleDetailsResult,
        ModuleItemsAddedResult,
        QuizDetailsResult,
        ErrorResult,
    ],
    Field(discriminator="type"),
]


def outcome_of(result: ToolResult) -> str:
    """Libellé d'issue (faible cardinalité) pour les métriques et les logs."""
    match result.type:
        case "error":
            return "error"
        case "no_content":
            return "empty"
        case "module_reused" | "module_found_similar":
            return "reused"
        case "quiz_created":
            return "reused" if result.already_existed else "created"
        case "module_created":
            return "created"
        case "module_items_added":
            return "updated"
        case (
            "content_results"
            | "search_results"
            | "content_list"
            | "module_details"
            | "quiz_details"
        ):
            return "ok"
    raise ValueError(f"unhandled tool result type: {result.type}")
