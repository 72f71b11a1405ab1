# ============================================================
# Module : backend/services/authoring_tools.py
# Objet  : Outils appelés par l'agent d'édition de cours.
# Notes  : un ToolContext par session (tenant, caches propres).
# ============================================================
"""Outils de l'assistant d'édition de cours.

Chaque outil renvoie un résultat typé (union discriminée par `type`). `AuthoringTools.invoke` est
le point d'entrée de la boucle d'agent: validation des arguments, exécution, sérialisation.

Les erreurs de validation (identifiants invalides, aucun résultat) deviennent des résultats;
les erreurs du fournisseur d'embeddings ou de la base remontent sous forme d'exceptions.
"""

from __future__ import annotations

import asyncio
import functools
import time
from dataclasses import dataclass
from typing import Any

import structlog

from backend.app.metrics import TOOL_CALLS, TOOL_LATENCY
from backend.app.tracing import get_tracer
from backend.core.container import Container, container
from backend.core.errors import UnknownToolError
from backend.domain.compactor import compact_all
from backend.domain.entities import AgentModel, ContentStatus, ContentType
from backend.domain.tenancy import require_tenant
from backend.domain.tool_results import (
    ContentListResult,
    ContentSearchResult,
    EntitySearchResult,
    ErrorResult,
    ModuleCreatedResult,
    ModuleDetailsResult,
    ModuleFoundSimilarResult,
    ModuleItemsAddedResult,
    ModuleReusedResult,
    NoContentResult,
    QuizCreatedResult,
    QuizDetailsResult,
    outcome_of,
)
from backend.domain.tool_schemas import (
    CreateModuleInput,
    CreateQuizInput,
    GetModuleInput,
    GetQuizInput,
    ListContentInput,
    ModuleItemAppendInput,
    ModuleItemInput,
    QuizQuestionInput,
    SearchInput,
    UpdateModuleItemsInput,
)
from backend.infra.repo.content_repo import ContentRepository
from backend.services.caches import EmbeddingCache, ToolCallCache
from backend.services.content_creation import ContentCreator
from backend.services.deduplicator import CreationDeduplicator
from backend.services.similarity_search import SimilaritySearchEngine

log = structlog.get_logger(__name__)

SEARCH_TOOLS: dict[str, ContentType] = {
    "searchVideos": "video",
    "searchDocuments": "document",
    "searchQuizzes": "quiz",
    "searchModules": "module",
}
LIST_TOOLS: dict[str, ContentType] = {
    "listVideos": "video",
    "listDocuments": "document",
    "listQuizzes": "quiz",
    "listModules": "module",
}


@dataclass
class ToolContext:
    """État d'une session d'édition: tenant, services et caches propres à la session.

    Construit à l'ouverture de la session, abandonné à sa fermeture: rien n'est partagé entre
    tenants ni entre sessions.
    """

    tenant_id: str
    user_id: str | None
    repository: ContentRepository
    search_engine: SimilaritySearchEngine
    creator: ContentCreator
    embedding_cache: EmbeddingCache
    tool_cache: ToolCallCache

    @classmethod
    def open(
        cls,
        tenant_id: str,
        user_id: str | None = None,
        deps: Container | None = None,
    ) -> ToolContext:
        """Ouvre une session pour `tenant_id` avec les dépendances du conteneur.

        Raises:
            TenantScopeError: identifiant de tenant invalide.
        """
        deps = deps or container
        settings = deps.settings
        embedder = deps.embedder
        model_name = getattr(embedder, "model_name", None) or settings.embedding_model_name
        repository = ContentRepository(deps.engine)
        search_engine = SimilaritySearchEngine(
            repository,
            deps.ranker,
            threshold=settings.SEARCH_SIMILARITY_THRESHOLD,
            embedding_model=model_name,
        )
        deduplicator = CreationDeduplicator(
            search_engine, embedder, threshold=settings.DEDUP_SIMILARITY_THRESHOLD
        )
        return cls(
            tenant_id=require_tenant(tenant_id),
            user_id=user_id,
            repository=repository,
            search_engine=search_engine,
            creator=ContentCreator(repository, deduplicator, embedding_model=model_name),
            embedding_cache=EmbeddingCache(embedder, max_size=settings.EMBEDDING_CACHE_MAX_SIZE),
            tool_cache=ToolCallCache(
                ttl_seconds=settings.TOOL_CACHE_TTL_SECONDS,
                max_size=settings.TOOL_CACHE_MAX_SIZE,
            ),
        )

    def close(self) -> None:
        self.embedding_cache.clear()
        self.tool_cache.clear()


def authoring_tool(name: str):
    """Enveloppe un outil: span OpenTelemetry, latence et issue dans Prometheus."""

    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(self: AuthoringTools, *args: Any, **kwargs: Any):
            with get_tracer().start_as_current_span(f"authoring_tool.{name}") as span:
                span.set_attribute("authoring.tenant_id", self.ctx.tenant_id)
                start = time.perf_counter()
                try:
                    result = await fn(self, *args, **kwargs)
                except Exception:
                    TOOL_CALLS.labels(tool=name, outcome="exception").inc()
                    raise
                finally:
                    TOOL_LATENCY.labels(tool=name).observe(time.perf_counter() - start)
                outcome = outcome_of(result)
                TOOL_CALLS.labels(tool=name, outcome=outcome).inc()
                span.set_attribute("authoring.outcome", outcome)
                return result

        return wrapper

    return decorator


class AuthoringTools:
    """Outils exposés à l'agent pour une session donnée."""

    def __init__(self, ctx: ToolContext) -> None:
        self.ctx = ctx
        self._dispatch: dict[str, tuple[type[AgentModel], Any]] = {
            "searchContent": (SearchInput, self.search_content),
            "searchVideos": (SearchInput, self.search_videos),
            "searchDocuments": (SearchInput, self.search_documents),
            "searchQuizzes": (SearchInput, self.search_quizzes),
            "searchModules": (SearchInput, self.search_modules),
            "listVideos": (ListContentInput, self.list_videos),
            "listDocuments": (ListContentInput, self.list_documents),
            "listQuizzes": (ListContentInput, self.list_quizzes),
            "listModules": (ListContentInput, self.list_modules),
            "getModule": (GetModuleInput, self.get_module),
            "getQuiz": (GetQuizInput, self.get_quiz),
            "createModule": (CreateModuleInput, self.create_module),
            "updateModuleItems": (UpdateModuleItemsInput, self.update_module_items),
            "createQuiz": (CreateQuizInput, self.create_quiz),
        }

    @property
    def names(self) -> list[str]:
        return list(self._dispatch)

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """Valide les arguments, exécute l'outil `name` et renvoie la charge utile de l'agent.

        Raises:
            UnknownToolError: outil inconnu.
            pydantic.ValidationError: arguments invalides.
        """
        try:
            schema, tool = self._dispatch[name]
        except KeyError as err:
            raise UnknownToolError(name) from err
        params = schema.model_validate(arguments or {})
        kwargs = {field: getattr(params, field) for field in type(params).model_fields}
        result = await tool(**kwargs)
        return result.to_payload()

    # ---- recherche ----

    @authoring_tool("searchContent")
    async def search_content(
        self, query: str, limit: int = 5
    ) -> ContentSearchResult | NoContentResult:
        """Recherche vidéos, documents, quiz et modules en un seul appel."""
        cached = self.ctx.tool_cache.get("searchContent", query, limit)
        if cached is not None:
            return cached

        embedding = await asyncio.to_thread(self.ctx.embedding_cache.get_embedding, query)
        found = await self.ctx.search_engine.search_all(
            self.ctx.tenant_id, query, embedding, limit
        )
        result: ContentSearchResult | NoContentResult
        if found.is_empty():
            result = NoContentResult(
                query=query,
                message=(
                    f'No content found about "{query}". The user must upload videos or '
                    "documents first from the Content panel."
                ),
                suggestion=(
                    "Ask the user whether they have content on this topic or want to upload it."
                ),
            )
            log.info("search_content_no_results", query=query)
        else:
            result = ContentSearchResult(
                videos=compact_all(found.videos),
                documents=compact_all(found.documents),
                quizzes=compact_all(found.quizzes),
                modules=compact_all(found.modules),
                total_count=found.total_count,
            )
            log.info(
                "search_content_executed",
                query=query,
                videos=len(found.videos),
                documents=len(found.documents),
                quizzes=len(found.quizzes),
                modules=len(found.modules),
                fallback=found.fallback_used,
            )
        self.ctx.tool_cache.put("searchContent", query, limit, result)
        return result

    async def _search_entity(
        self, operation: str, entity_type: ContentType, query: str, limit: int
    ) -> EntitySearchResult:
        cached = self.ctx.tool_cache.get(operation, query, limit)
        if cached is not None:
            return cached

        embedding = await asyncio.to_thread(self.ctx.embedding_cache.get_embedding, query)
        matches, fallback = await asyncio.to_thread(
            self.ctx.search_engine.search_with_fallback,
            self.ctx.tenant_id,
            entity_type,
            query,
            embedding,
            limit,
        )
        result = EntitySearchResult(
            entity_type=entity_type, results=compact_all(matches), count=len(matches)
        )
        self.ctx.tool_cache.put(operation, query, limit, result)
        log.info(
            "search_entity_executed",
            tool=operation,
            query=query,
            count=len(matches),
            fallback=fallback,
        )
        return result

    @authoring_tool("searchVideos")
    async def search_videos(self, query: str, limit: int = 5) -> EntitySearchResult:
        return await self._search_entity("searchVideos", "video", query, limit)

    @authoring_tool("searchDocuments")
    async def search_documents(self, query: str, limit: int = 5) -> EntitySearchResult:
        return await self._search_entity("searchDocuments", "document", query, limit)

    @authoring_tool("searchQuizzes")
    async def search_quizzes(self, query: str, limit: int = 5) -> EntitySearchResult:
        return await self._search_entity("searchQuizzes", "quiz", query, limit)

    @authoring_tool("searchModules")
    async def search_modules(self, query: str, limit: int = 5) -> EntitySearchResult:
        return await self._search_entity("searchModules", "module", query, limit)

    # ---- listing ----

    async def _list(
        self,
        entity_type: ContentType,
        limit: int,
        search: str | None,
        status: ContentStatus | None,
    ) -> ContentListResult:
        items = await asyncio.to_thread(
            self.ctx.repository.list_content,
            self.ctx.tenant_id,
            entity_type,
            limit,
            search,
            status,
        )
        return ContentListResult(entity_type=entity_type, items=items, count=len(items))

    @authoring_tool("listVideos")
    async def list_videos(
        self, limit: int = 20, search: str | None = None, status: ContentStatus | None = None
    ) -> ContentListResult:
        return await self._list("video", limit, search, status)

    @authoring_tool("listDocuments")
    async def list_documents(
        self, limit: int = 20, search: str | None = None, status: ContentStatus | None = None
    ) -> ContentListResult:
        return await self._list("document", limit, search, status)

    @authoring_tool("listQuizzes")
    async def list_quizzes(
        self, limit: int = 20, search: str | None = None, status: ContentStatus | None = None
    ) -> ContentListResult:
        return await self._list("quiz", limit, search, status)

    @authoring_tool("listModules")
    async def list_modules(
        self, limit: int = 20, search: str | None = None, status: ContentStatus | None = None
    ) -> ContentListResult:
        return await self._list("module", limit, search, status)

    @authoring_tool("getModule")
    async def get_module(self, module_id: str) -> ModuleDetailsResult | ErrorResult:
        module = await asyncio.to_thread(
            self.ctx.repository.get_module, self.ctx.tenant_id, module_id
        )
        if module is None:
            return ErrorResult(error="Module not found")
        log.info("get_module_executed", module_id=module_id, items_count=len(module.items))
        return ModuleDetailsResult(module=module)

    @authoring_tool("getQuiz")
    async def get_quiz(self, quiz_id: str) -> QuizDetailsResult | ErrorResult:
        quiz = await asyncio.to_thread(self.ctx.repository.get_quiz, self.ctx.tenant_id, quiz_id)
        if quiz is None:
            return ErrorResult(error="Quiz not found")
        log.info("get_quiz_executed", quiz_id=quiz_id, questions_count=len(quiz.questions))
        return QuizDetailsResult(quiz=quiz)

    # ---- création ----

    @authoring_tool("createModule")
    async def create_module(
        self,
        title: str,
        items: list[ModuleItemInput | dict],
        description: str | None = None,
    ) -> ModuleCreatedResult | ModuleReusedResult | ModuleFoundSimilarResult | ErrorResult:
        """Crée un module publié, sauf si un module quasi identique existe déjà."""
        parsed = [ModuleItemInput.model_validate(i) for i in items]
        return await asyncio.to_thread(
            self.ctx.creator.create_module, self.ctx.tenant_id, title, description, parsed
        )

    @authoring_tool("updateModuleItems")
    async def update_module_items(
        self,
        module_id: str,
        items: list[ModuleItemAppendInput | dict],
        mode: str = "add",
    ) -> ModuleItemsAddedResult | ErrorResult:
        """Ajoute des éléments à un module existant.

        Permet de compléter le module renvoyé par `createModule` avec `module_found_similar`.
        """
        if mode != "add":
            return ErrorResult(error=f"Unsupported mode: {mode}")
        parsed = [ModuleItemAppendInput.model_validate(i) for i in items]
        return await asyncio.to_thread(
            self.ctx.creator.append_module_items, self.ctx.tenant_id, module_id, parsed
        )

    @authoring_tool("createQuiz")
    async def create_quiz(
        self,
        title: str,
        questions: list[QuizQuestionInput | dict],
        description: str | None = None,
    ) -> QuizCreatedResult:
        """Crée un quiz publié, sauf si un quiz quasi identique existe déjà."""
        parsed = [QuizQuestionInput.model_validate(q) for q in questions]
        return await asyncio.to_thread(
            self.ctx.creator.create_quiz, self.ctx.tenant_id, title, description, parsed
        )
