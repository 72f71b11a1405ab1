"""Configuration de test pour pytest avec gestion des chemins.

Ce module configure pytest pour résoudre les imports backend en ajoutant la racine du projet au
sys.path, et fournit une base SQLite fichier par test, un embedder déterministe et un conteneur
câblé sur ces deux composants.
"""

import os
import sys
from collections.abc import Callable
from datetime import datetime

import pytest

# Ensure project root is on sys.path so that
# imports like `from backend...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from backend.core.container import Container  # noqa: E402
from backend.core.settings import Settings  # noqa: E402
from backend.infra.repo.content_repo import ContentRepository  # noqa: E402
from backend.infra.repo.db import get_engine, session_scope  # noqa: E402
from backend.infra.repo.models import CONTENT_MODELS, Base  # noqa: E402
from backend.infra.vecstores.memory_adapter import NumpyRanker  # noqa: E402
from backend.services.authoring_tools import AuthoringTools, ToolContext  # noqa: E402
from tests.fakes import TENANT, FakeEmbeddings  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    """Base SQLite fichier (partagée entre les threads de `asyncio.to_thread`)."""
    eng = get_engine(f"sqlite+pysqlite:///{tmp_path / 'lms.db'}")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def repository(engine) -> ContentRepository:
    return ContentRepository(engine)


@pytest.fixture
def fake_embedder() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture
def seed(engine, fake_embedder) -> Callable[..., str]:
    """Insère une ligne de contenu et retourne son identifiant.

    Par défaut la ligne est publiée et son embedding est calculé par l'embedder factice à partir du
    titre et de la description; `embedding=None` avec `embed=False` simule une ligne historique.
    """

    def _seed(
        content_type: str,
        title: str,
        description: str | None = None,
        tenant_id: str = TENANT,
        status: str = "published",
        embedding: list[float] | None = None,
        embed: bool = True,
        embedding_model: str | None = FakeEmbeddings.model_name,
        created_at: datetime | None = None,
        **extra,
    ) -> str:
        if embedding is None and embed:
            embedding = fake_embedder.vector(f"{title} {description or ''}")
        model = CONTENT_MODELS[content_type]
        fields = dict(
            tenant_id=tenant_id,
            title=title,
            description=description,
            status=status,
            embedding=embedding,
            embedding_model=embedding_model if embedding is not None else None,
            **extra,
        )
        if created_at is not None:
            fields["created_at"] = created_at
        with session_scope(engine) as session:
            row = model(**fields)
            session.add(row)
            session.flush()
            return row.id

    return _seed


@pytest.fixture
def deps(engine, fake_embedder) -> Container:
    """Conteneur câblé sur la base de test, l'embedder factice et le ranker numpy."""
    settings = Settings(_env_file=None, VECSTORE_BACKEND="memory", OTLP_ENDPOINT=None)
    container = Container(settings)
    container._engine = engine
    container._embedder = fake_embedder
    container._ranker = NumpyRanker()
    return container


@pytest.fixture
def tools(deps) -> AuthoringTools:
    return AuthoringTools(ToolContext.open(TENANT, "user-1", deps))
