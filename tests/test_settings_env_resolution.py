"""
Tests pour la résolution des variables d'environnement.

Ce module teste le chargement des settings à partir de fichiers .env personnalisés, les valeurs
par défaut des seuils et l'installation conditionnelle du tracing.
"""

from __future__ import annotations

import importlib
from pathlib import Path

from backend.app.tracing import setup_tracing
from backend.core.constants import (
    DEDUP_SIMILARITY_THRESHOLD,
    MAX_CACHE_SIZE,
    SEARCH_SIMILARITY_THRESHOLD,
    TOOL_CACHE_TTL_SECONDS,
)
from backend.core.settings import Settings

CUSTOM_SEARCH_THRESHOLD = 0.7


def test_settings_reads_env_file(tmp_path: Path, monkeypatch) -> None:
    """
    Teste que les settings lisent correctement les fichiers d'environnement.

    Vérifie que les variables d'environnement définies dans un fichier .env personnalisé sont
    correctement chargées et appliquées aux settings.
    """
    env = tmp_path / ".env.custom"
    env.write_text(
        f"SEARCH_SIMILARITY_THRESHOLD={CUSTOM_SEARCH_THRESHOLD}\nVECSTORE_BACKEND=memory\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("ENV_FILE", str(env))
    monkeypatch.delenv("SEARCH_SIMILARITY_THRESHOLD", raising=False)
    monkeypatch.delenv("VECSTORE_BACKEND", raising=False)

    # Reload settings module to pick up new ENV_FILE
    settings_mod = importlib.import_module("backend.core.settings")
    importlib.reload(settings_mod)
    s = settings_mod.get_settings()
    assert s.SEARCH_SIMILARITY_THRESHOLD == CUSTOM_SEARCH_THRESHOLD
    assert s.VECSTORE_BACKEND == "memory"

    monkeypatch.delenv("ENV_FILE")
    importlib.reload(settings_mod)


def test_settings_defaults() -> None:
    """Teste les valeurs par défaut des seuils et des caches."""
    s = Settings(_env_file=None)
    assert s.SEARCH_SIMILARITY_THRESHOLD == SEARCH_SIMILARITY_THRESHOLD
    assert s.DEDUP_SIMILARITY_THRESHOLD == DEDUP_SIMILARITY_THRESHOLD
    assert s.EMBEDDING_CACHE_MAX_SIZE == MAX_CACHE_SIZE
    assert s.TOOL_CACHE_TTL_SECONDS == TOOL_CACHE_TTL_SECONDS


def test_embedding_model_name_follows_provider() -> None:
    assert Settings(_env_file=None, EMBEDDINGS_PROVIDER="openai").embedding_model_name == (
        "text-embedding-3-small"
    )
    local = Settings(_env_file=None, EMBEDDINGS_PROVIDER="local")
    assert local.embedding_model_name == local.LOCAL_EMBEDDINGS_MODEL


def test_tracing_disabled_without_endpoint() -> None:
    assert setup_tracing(Settings(_env_file=None, OTLP_ENDPOINT=None)) is False
