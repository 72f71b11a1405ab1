# ============================================================
# Module : backend/services/content_creation.py
# Objet  : Création « créer ou réutiliser » des modules et des quiz.
# Invariants :
#  - Les éléments d'un module appartiennent au tenant du module.
#  - Création: insertion, puis stockage de l'embedding, puis enfants.
#  - Un doublon non vide n'est jamais modifié.
# ============================================================
"""Création de modules et de quiz protégée par la déduplication sémantique."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from backend.app.metrics import DEDUP_DECISIONS
from backend.domain.tool_results import (
    ErrorResult,
    ModuleCreatedResult,
    ModuleFoundSimilarResult,
    ModuleItemsAddedResult,
    ModuleReusedResult,
    QuizCreatedResult,
)
from backend.domain.tool_schemas import ModuleItemInput, QuizQuestionInput
from backend.infra.repo.content_repo import ContentRepository
from backend.services.deduplicator import CreationDeduplicator

log = structlog.get_logger(__name__)

NO_VALID_ITEMS_ERROR = (
    "No valid content IDs provided. Use the actual IDs returned by "
    "searchContent/searchVideos/searchDocuments/searchQuizzes."
)


@dataclass
class ItemValidation:
    """Partition des éléments demandés entre références valides et rejetées."""

    valid: list[ModuleItemInput] = field(default_factory=list)
    rejected: list[ModuleItemInput] = field(default_factory=list)


def validate_module_items(
    repository: ContentRepository, tenant_id: str, items: list[ModuleItemInput]
) -> ItemValidation:
    """Vérifie que chaque élément référence un contenu existant du tenant, du type annoncé."""
    known: dict[str, set[str]] = {}
    for content_type in ("video", "document", "quiz"):
        ids = [i.id for i in items if i.type == content_type]
        known[content_type] = repository.existing_ids(tenant_id, content_type, ids)
    result = ItemValidation()
    for item in items:
        if item.id in known[item.type]:
            result.valid.append(item)
        else:
            result.rejected.append(item)
    return result


class ContentCreator:
    """Crée modules et quiz, ou réutilise une entité existante quasi identique."""

    def __init__(
        self,
        repository: ContentRepository,
        deduplicator: CreationDeduplicator,
        embedding_model: str | None = None,
    ) -> None:
        self.repository = repository
        self.deduplicator = deduplicator
        self.embedding_model = embedding_model

    def create_module(
        self,
        tenant_id: str,
        title: str,
        description: str | None,
        items: list[ModuleItemInput],
    ) -> ModuleCreatedResult | ModuleReusedResult | ModuleFoundSimilarResult | ErrorResult:
        """Crée un module publié, ou renvoie le module similaire existant.

        Si le doublon n'a aucun élément, les éléments valides demandés lui sont ajoutés. S'il en a
        déjà, les éléments demandés sont ignorés.
        """
        validation = validate_module_items(self.repository, tenant_id, items)
        if validation.rejected:
            log.warning(
                "create_module_filtered_invalid_items",
                title=title,
                total_items=len(items),
                valid_items=len(validation.valid),
                invalid_count=len(validation.rejected),
            )
        if not validation.valid:
            log.error("create_module_no_valid_items", title=title)
            return ErrorResult(error=NO_VALID_ITEMS_ERROR)
        valid = validation.valid

        check = self.deduplicator.find_duplicate(tenant_id, "module", title, description)
        if check.existing is not None:
            existing = check.existing
            existing_count = self.repository.count_module_items(existing.id)
            if existing_count == 0:
                self.repository.add_module_items(existing.id, valid)
                DEDUP_DECISIONS.labels(entity_type="module", decision="backfilled").inc()
                log.info(
                    "create_module_backfilled_existing",
                    module_id=existing.id,
                    item_count=len(valid),
                )
                return ModuleReusedResult(
                    id=existing.id,
                    title=existing.title,
                    items_count=len(valid),
                    message=(
                        f'Reused the existing module "{existing.title}" '
                        f"and added {len(valid)} items to it."
                    ),
                )
            DEDUP_DECISIONS.labels(entity_type="module", decision="reused").inc()
            return ModuleFoundSimilarResult(
                id=existing.id,
                title=existing.title,
                requested_title=title,
                items_count=existing_count,
                similarity=existing.similarity,
                message=(
                    f'A very similar module already exists: "{existing.title}". '
                    "Use it, or create a new one with a different title."
                ),
            )

        module = self.repository.insert_module(tenant_id, title, description)
        self.repository.set_embedding("module", module.id, check.embedding, self.embedding_model)
        self.repository.add_module_items(module.id, valid)
        DEDUP_DECISIONS.labels(entity_type="module", decision="created").inc()
        log.info("create_module_executed", module_id=module.id, item_count=len(valid))
        return ModuleCreatedResult(id=module.id, title=module.title, items_count=len(valid))

    def append_module_items(
        self, tenant_id: str, module_id: str, items: list[ModuleItemInput]
    ) -> ModuleItemsAddedResult | ErrorResult:
        """Ajoute des éléments à la fin d'un module existant du tenant.

        Les éléments invalides sont écartés comme à la création. Un élément sans `order` est placé
        après le dernier élément du module, dans l'ordre reçu.
        """
        module = self.repository.module_ref(tenant_id, module_id)
        if module is None:
            return ErrorResult(error="Module not found")

        validation = validate_module_items(self.repository, tenant_id, items)
        if validation.rejected:
            log.warning(
                "update_module_items_filtered_invalid_items",
                module_id=module_id,
                invalid_count=len(validation.rejected),
            )
        existing_count = self.repository.count_module_items(module_id)
        max_order = self.repository.max_module_item_order(module_id)
        last_order = -1 if max_order is None else max_order
        placed: list[ModuleItemInput] = []
        for offset, item in enumerate(validation.valid, start=1):
            order = item.order if item.order is not None else last_order + offset
            placed.append(
                ModuleItemInput(type=item.type, id=item.id, order=order, is_preview=item.is_preview)
            )
        if placed:
            self.repository.add_module_items(module_id, placed)
        log.info("update_module_items_added", module_id=module_id, added_count=len(placed))
        return ModuleItemsAddedResult(
            module_id=module_id,
            module_title=module.title,
            added_count=len(placed),
            total_items=existing_count + len(placed),
        )

    def create_quiz(
        self,
        tenant_id: str,
        title: str,
        description: str | None,
        questions: list[QuizQuestionInput],
    ) -> QuizCreatedResult:
        """Crée un quiz publié avec ses questions, ou renvoie le quiz similaire existant.

        Un quiz réutilisé est renvoyé avec `questions_count=0`: ses questions ne sont ni
        recomptées ni complétées.
        """
        check = self.deduplicator.find_duplicate(tenant_id, "quiz", title, description)
        if check.existing is not None:
            DEDUP_DECISIONS.labels(entity_type="quiz", decision="reused").inc()
            return QuizCreatedResult(
                id=check.existing.id,
                title=check.existing.title,
                questions_count=0,
                already_existed=True,
            )

        quiz = self.repository.insert_quiz(tenant_id, title, description)
        self.repository.set_embedding("quiz", quiz.id, check.embedding, self.embedding_model)
        self.repository.add_quiz_questions(quiz.id, tenant_id, questions)
        DEDUP_DECISIONS.labels(entity_type="quiz", decision="created").inc()
        log.info("create_quiz_executed", quiz_id=quiz.id, question_count=len(questions))
        return QuizCreatedResult(id=quiz.id, title=quiz.title, questions_count=len(questions))
