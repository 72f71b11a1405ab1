"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from backend.core.constants import (
    DEDUP_SIMILARITY_THRESHOLD,
    MAX_CACHE_SIZE,
    SEARCH_SIMILARITY_THRESHOLD,
    TOOL_CACHE_TTL_SECONDS,
)

# Détermination du fichier .env à utiliser avec priorité:
# 1) ENV_FILE (chemin explicite)
# 2) .env.{APP_ENV} si présent
# 3) .env (défaut)
_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "lms-authoring-backend"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True

    DATABASE_URL: str | None = None

    # Embeddings
    OPENAI_API_KEY: str | None = None
    EMBEDDINGS_PROVIDER: str = "openai"  # "openai" | "local"
    EMBEDDINGS_MODEL: str = "text-embedding-3-small"
    EMBEDDINGS_DIMENSIONS: int | None = None
    LOCAL_EMBEDDINGS_MODEL: str = "all-MiniLM-L6-v2"
    VECSTORE_BACKEND: str = "faiss"  # "faiss" | "memory"

    # Seuils de similarité (cosinus)
    SEARCH_SIMILARITY_THRESHOLD: float = SEARCH_SIMILARITY_THRESHOLD
    DEDUP_SIMILARITY_THRESHOLD: float = DEDUP_SIMILARITY_THRESHOLD

    # Caches de session
    EMBEDDING_CACHE_MAX_SIZE: int = MAX_CACHE_SIZE
    TOOL_CACHE_MAX_SIZE: int = MAX_CACHE_SIZE
    TOOL_CACHE_TTL_SECONDS: float = TOOL_CACHE_TTL_SECONDS

    OTLP_ENDPOINT: str | None = None

    @property
    def embedding_model_name(self) -> str:
        """Nom du modèle qui produit les vecteurs stockés en base."""
        if self.EMBEDDINGS_PROVIDER.lower() == "local":
            return self.LOCAL_EMBEDDINGS_MODEL
        return self.EMBEDDINGS_MODEL


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
