"""
Entités du domaine métier.

Ce module définit les types de contenu pédagogique manipulés par les outils d'édition de cours.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ContentType = Literal["video", "document", "quiz", "module"]
ItemContentType = Literal["video", "document", "quiz"]
ContentStatus = Literal["draft", "published"]
QuestionType = Literal["multiple_choice", "multiple_select", "true_false"]

CONTENT_TYPES: tuple[ContentType, ...] = ("video", "document", "quiz", "module")

PLURALS: dict[str, str] = {
    "video": "videos",
    "document": "documents",
    "quiz": "quizzes",
    "module": "modules",
}


class AgentModel(BaseModel):
    """Modèle échangé avec l'agent: champs snake_case côté Python, camelCase côté agent."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        """Sérialise le modèle tel que l'agent le reçoit."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def embedding_text(title: str, description: str | None) -> str:
    """Texte source de l'empreinte sémantique d'une entité (titre + description)."""
    return f"{title} {description or ''}".strip()
