"""SQLAlchemy models for persistence layer (contenus pédagogiques par tenant).

Chaque table de contenu porte une colonne vecteur nullable (`embedding`, liste JSON de flottants) et
le nom du modèle qui l'a produite (`embedding_model`): un vecteur n'est comparable qu'à des vecteurs
du même modèle et de même dimension.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class ContentMixin:
    """Colonnes communes aux vidéos, documents, quiz et modules."""

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default="draft", index=True)
    embedding = Column(JSON(none_as_null=True), nullable=True)
    embedding_model = Column(String(128), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class VideoORM(ContentMixin, Base):
    """Modèle ORM pour les vidéos."""

    __tablename__ = "videos"

    duration = Column(Integer, nullable=True)


class DocumentORM(ContentMixin, Base):
    """Modèle ORM pour les documents."""

    __tablename__ = "documents"


class QuizORM(ContentMixin, Base):
    """Modèle ORM pour les quiz."""

    __tablename__ = "quizzes"

    questions = relationship(
        "QuizQuestionORM",
        cascade="all, delete-orphan",
        order_by="QuizQuestionORM.order",
    )


class QuizQuestionORM(Base):
    __tablename__ = "quiz_questions"

    id = Column(String(36), primary_key=True, default=_uuid)
    quiz_id = Column(
        String(36), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tenant_id = Column(String(64), nullable=False)
    type = Column(String(32), nullable=False)
    question_text = Column(Text, nullable=False)
    explanation = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0)

    options = relationship(
        "QuizOptionORM",
        cascade="all, delete-orphan",
        order_by="QuizOptionORM.order",
    )


class QuizOptionORM(Base):
    __tablename__ = "quiz_options"

    id = Column(String(36), primary_key=True, default=_uuid)
    question_id = Column(
        String(36),
        ForeignKey("quiz_questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    option_text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    order = Column(Integer, nullable=False, default=0)


class ModuleORM(ContentMixin, Base):
    """Modèle ORM pour les modules (liste ordonnée d'éléments)."""

    __tablename__ = "modules"

    items = relationship(
        "ModuleItemORM",
        cascade="all, delete-orphan",
        order_by="ModuleItemORM.order",
    )


class ModuleItemORM(Base):
    """Élément d'un module: référence vers une vidéo, un document ou un quiz du même tenant."""

    __tablename__ = "module_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    module_id = Column(
        String(36), ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content_type = Column(String(16), nullable=False)
    content_id = Column(String(36), nullable=False)
    order = Column(Integer, nullable=False, default=0)
    is_preview = Column(Boolean, nullable=False, default=False)


CONTENT_MODELS: dict[str, type[ContentMixin]] = {
    "video": VideoORM,
    "document": DocumentORM,
    "quiz": QuizORM,
    "module": ModuleORM,
}
