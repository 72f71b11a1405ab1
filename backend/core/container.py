"""
Conteneur d'injection de dépendances et configuration application.

Instancie paresseusement les composants centraux (settings, moteur SQL, embedder, ranker) et expose
un singleton `container` utilisé par les scripts et la boucle d'agent. Les caches de session ne
vivent pas ici: ils appartiennent à chaque `ToolContext`.
"""

import os

from sqlalchemy.engine import Engine

from backend.core.settings import Settings, get_settings
from backend.infra.embeddings.base import Embeddings
from backend.infra.embeddings.factory import build_embedder
from backend.infra.repo.db import get_engine
from backend.infra.vecstores.base import SimilarityRanker
from backend.infra.vecstores.factory import build_ranker


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._engine: Engine | None = None
        self._embedder: Embeddings | None = None
        self._ranker: SimilarityRanker | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = get_engine(self.settings.DATABASE_URL)
        return self._engine

    @property
    def embedder(self) -> Embeddings:
        if self._embedder is None:
            self._embedder = build_embedder(
                self.settings, api_key=self.resolve_secret("OPENAI_API_KEY")
            )
        return self._embedder

    @property
    def ranker(self) -> SimilarityRanker:
        if self._ranker is None:
            backend = os.getenv("VECSTORE_BACKEND") or self.settings.VECSTORE_BACKEND
            self._ranker = build_ranker(backend)
        return self._ranker

    def resolve_secret(self, key: str) -> str:
        """Résolution d'un secret: env → settings.

        Ne journalise jamais la valeur du secret.
        """
        env_val = os.getenv(key)
        if env_val:
            return env_val
        return getattr(self.settings, key, "") or ""


container = Container()
