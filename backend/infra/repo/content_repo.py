# ============================================================
# Module : backend/infra/repo/content_repo.py
# Objet  : Accès SQL aux contenus (vidéos, documents, quiz, modules).
# Notes  : toutes les requêtes sont filtrées par tenant_id.
# ============================================================
"""Dépôt SQLAlchemy des contenus pédagogiques d'un tenant.

Chaque méthode ouvre sa propre session (`session_scope`), ce qui permet d'appeler le dépôt depuis
plusieurs threads en parallèle. Les erreurs SQL remontent telles quelles.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import and_, func, or_, select
from sqlalchemy.engine import Engine

from backend.core.constants import LEXICAL_FALLBACK_SIMILARITY
from backend.domain.entities import ContentStatus, ContentType, embedding_text
from backend.domain.retrieval_types import EmbeddedEntity, EntityRef, SimilarityMatch
from backend.domain.tool_results import (
    ContentSummary,
    ModuleDetails,
    ModuleItemDetail,
    QuizDetails,
    QuizOptionDetail,
    QuizQuestionDetail,
)
from backend.domain.tool_schemas import ModuleItemInput, QuizQuestionInput
from backend.infra.repo.db import session_scope
from backend.infra.repo.models import (
    CONTENT_MODELS,
    ModuleItemORM,
    ModuleORM,
    QuizOptionORM,
    QuizORM,
    QuizQuestionORM,
    VideoORM,
)


def _model(entity_type: str):
    try:
        return CONTENT_MODELS[entity_type]
    except KeyError as err:
        raise ValueError(f"unknown content type: {entity_type}") from err


def _question_type(question: QuizQuestionInput) -> str:
    if question.type == "true_false":
        return "true_false"
    correct = sum(1 for o in question.options if o.is_correct)
    return "multiple_select" if correct > 1 else "multiple_choice"


class ContentRepository:
    """Lecture/écriture des entités de contenu, toujours bornée à un tenant."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    # ---- lecture pour la recherche ----

    def embedded_candidates(
        self,
        tenant_id: str,
        entity_type: ContentType,
        embedding_model: str | None = None,
    ) -> list[EmbeddedEntity]:
        """Entités publiées du tenant ayant un embedding.

        Si `embedding_model` est fourni, les vecteurs produits par un autre modèle sont exclus; les
        vecteurs sans modèle enregistré (lignes historiques) sont conservés.
        """
        model = _model(entity_type)
        stmt = select(model).where(
            model.tenant_id == tenant_id,
            model.status == "published",
            model.embedding.is_not(None),
        )
        if embedding_model:
            stmt = stmt.where(
                or_(model.embedding_model == embedding_model, model.embedding_model.is_(None))
            )
        with session_scope(self._engine) as session:
            rows = session.execute(stmt).scalars().all()
            return [
                EmbeddedEntity(
                    id=r.id,
                    title=r.title,
                    description=r.description,
                    embedding=list(r.embedding),
                    created_at=r.created_at,
                )
                for r in rows
            ]

    def lexical_search(
        self, tenant_id: str, entity_type: ContentType, query: str, limit: int
    ) -> list[SimilarityMatch]:
        """Recherche ILIKE sur titre OU description, plus récents d'abord, similarité 0."""
        model = _model(entity_type)
        stmt = (
            select(model)
            .where(
                model.tenant_id == tenant_id,
                model.status == "published",
                or_(
                    model.title.icontains(query, autoescape=True),
                    model.description.icontains(query, autoescape=True),
                ),
            )
            .order_by(model.created_at.desc())
            .limit(limit)
        )
        with session_scope(self._engine) as session:
            rows = session.execute(stmt).scalars().all()
            return [
                SimilarityMatch(
                    id=r.id,
                    title=r.title,
                    description=r.description,
                    similarity=LEXICAL_FALLBACK_SIMILARITY,
                    created_at=r.created_at,
                )
                for r in rows
            ]

    def existing_ids(
        self, tenant_id: str, entity_type: ContentType, ids: Iterable[str]
    ) -> set[str]:
        """Sous-ensemble des `ids` qui existent pour ce tenant et ce type (tout statut)."""
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return set()
        model = _model(entity_type)
        stmt = select(model.id).where(model.tenant_id == tenant_id, model.id.in_(wanted))
        with session_scope(self._engine) as session:
            return set(session.execute(stmt).scalars().all())

    def list_content(
        self,
        tenant_id: str,
        entity_type: ContentType,
        limit: int,
        search: str | None = None,
        status: ContentStatus | None = None,
    ) -> list[ContentSummary]:
        model = _model(entity_type)
        stmt = select(model).where(model.tenant_id == tenant_id)
        if search:
            stmt = stmt.where(model.title.icontains(search, autoescape=True))
        if status:
            stmt = stmt.where(model.status == status)
        stmt = stmt.order_by(model.created_at.desc()).limit(limit)
        with session_scope(self._engine) as session:
            rows = session.execute(stmt).scalars().all()
            return [
                ContentSummary(
                    id=r.id,
                    title=r.title,
                    description=r.description,
                    status=r.status,
                    duration=r.duration if isinstance(r, VideoORM) else None,
                )
                for r in rows
            ]

    # ---- modules ----

    def count_module_items(self, module_id: str) -> int:
        stmt = select(func.count(ModuleItemORM.id)).where(ModuleItemORM.module_id == module_id)
        with session_scope(self._engine) as session:
            return int(session.execute(stmt).scalar_one())

    def module_ref(self, tenant_id: str, module_id: str) -> EntityRef | None:
        stmt = select(ModuleORM.id, ModuleORM.title).where(
            ModuleORM.tenant_id == tenant_id, ModuleORM.id == module_id
        )
        with session_scope(self._engine) as session:
            row = session.execute(stmt).one_or_none()
            return EntityRef(id=row.id, title=row.title) if row else None

    def max_module_item_order(self, module_id: str) -> int | None:
        """Plus grand `order` des éléments du module (None si le module est vide)."""
        stmt = select(func.max(ModuleItemORM.order)).where(ModuleItemORM.module_id == module_id)
        with session_scope(self._engine) as session:
            return session.execute(stmt).scalar_one()

    def insert_module(
        self, tenant_id: str, title: str, description: str | None, status: str = "published"
    ) -> EntityRef:
        with session_scope(self._engine) as session:
            row = ModuleORM(
                tenant_id=tenant_id, title=title, description=description, status=status
            )
            session.add(row)
            session.flush()
            return EntityRef(id=row.id, title=row.title)

    def add_module_items(self, module_id: str, items: list[ModuleItemInput]) -> int:
        with session_scope(self._engine) as session:
            for item in items:
                session.add(
                    ModuleItemORM(
                        module_id=module_id,
                        content_type=item.type,
                        content_id=item.id,
                        order=item.order,
                        is_preview=item.is_preview,
                    )
                )
        return len(items)

    def get_module(self, tenant_id: str, module_id: str) -> ModuleDetails | None:
        """Module et ses éléments (ordonnés), chaque élément titré d'après son contenu."""
        with session_scope(self._engine) as session:
            module = session.execute(
                select(ModuleORM).where(
                    ModuleORM.tenant_id == tenant_id, ModuleORM.id == module_id
                )
            ).scalar_one_or_none()
            if module is None:
                return None
            titles: dict[str, str] = {}
            for content_type in ("video", "document", "quiz"):
                ids = [i.content_id for i in module.items if i.content_type == content_type]
                if not ids:
                    continue
                model = _model(content_type)
                for row_id, title in session.execute(
                    select(model.id, model.title).where(model.id.in_(ids))
                ):
                    titles[row_id] = title
            return ModuleDetails(
                id=module.id,
                title=module.title,
                description=module.description,
                status=module.status,
                items=[
                    ModuleItemDetail(
                        id=i.id,
                        content_type=i.content_type,
                        content_id=i.content_id,
                        order=i.order,
                        is_preview=i.is_preview,
                        title=titles.get(i.content_id, "Unknown"),
                    )
                    for i in module.items
                ],
            )

    # ---- quiz ----

    def get_quiz(self, tenant_id: str, quiz_id: str) -> QuizDetails | None:
        """Quiz avec ses questions et leurs options, dans l'ordre enregistré."""
        with session_scope(self._engine) as session:
            quiz = session.execute(
                select(QuizORM).where(QuizORM.tenant_id == tenant_id, QuizORM.id == quiz_id)
            ).scalar_one_or_none()
            if quiz is None:
                return None
            return QuizDetails(
                id=quiz.id,
                title=quiz.title,
                description=quiz.description,
                status=quiz.status,
                questions=[
                    QuizQuestionDetail(
                        id=q.id,
                        type=q.type,
                        question_text=q.question_text,
                        explanation=q.explanation,
                        order=q.order,
                        options=[
                            QuizOptionDetail(
                                id=o.id,
                                option_text=o.option_text,
                                is_correct=o.is_correct,
                                order=o.order,
                            )
                            for o in q.options
                        ],
                    )
                    for q in quiz.questions
                ],
            )

    def insert_quiz(
        self, tenant_id: str, title: str, description: str | None, status: str = "published"
    ) -> EntityRef:
        with session_scope(self._engine) as session:
            row = QuizORM(tenant_id=tenant_id, title=title, description=description, status=status)
            session.add(row)
            session.flush()
            return EntityRef(id=row.id, title=row.title)

    def add_quiz_questions(
        self, quiz_id: str, tenant_id: str, questions: list[QuizQuestionInput]
    ) -> int:
        """Insère questions et options dans l'ordre reçu."""
        with session_scope(self._engine) as session:
            for i, q in enumerate(questions):
                question = QuizQuestionORM(
                    quiz_id=quiz_id,
                    tenant_id=tenant_id,
                    type=_question_type(q),
                    question_text=q.question_text,
                    explanation=q.explanation,
                    order=i,
                )
                question.options = [
                    QuizOptionORM(option_text=o.option_text, is_correct=o.is_correct, order=j)
                    for j, o in enumerate(q.options)
                ]
                session.add(question)
        return len(questions)

    # ---- embeddings ----

    def set_embedding(
        self,
        entity_type: ContentType,
        entity_id: str,
        embedding: list[float],
        embedding_model: str | None,
    ) -> None:
        model = _model(entity_type)
        with session_scope(self._engine) as session:
            row = session.get(model, entity_id)
            if row is None:
                raise LookupError(f"{entity_type} {entity_id} not found")
            row.embedding = list(embedding)
            row.embedding_model = embedding_model

    def missing_embeddings(
        self,
        entity_type: ContentType,
        tenant_id: str | None = None,
        embedding_model: str | None = None,
    ) -> list[tuple[str, str]]:
        """Lignes à (ré)indexer pour le job de rattrapage: `(id, texte source)`, tout statut.

        Sans `embedding_model`, seules les lignes sans embedding sont retenues. Avec
        `embedding_model`, les lignes dont le vecteur provient d'un autre modèle enregistré le
        sont aussi; les lignes sans modèle enregistré restent considérées comme compatibles.
        """
        model = _model(entity_type)
        stale = model.embedding.is_(None)
        if embedding_model:
            stale = or_(
                stale,
                and_(
                    model.embedding_model.is_not(None),
                    model.embedding_model != embedding_model,
                ),
            )
        stmt = select(model).where(stale)
        if tenant_id:
            stmt = stmt.where(model.tenant_id == tenant_id)
        stmt = stmt.order_by(model.created_at)
        with session_scope(self._engine) as session:
            return [
                (r.id, embedding_text(r.title, r.description))
                for r in session.execute(stmt).scalars().all()
            ]
