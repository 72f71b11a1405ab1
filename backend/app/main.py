"""
Point d'entrée de la boucle d'agent d'édition de cours.

Ce module assemble les composants transverses avant la première session: logging structuré,
tracing, conteneur de dépendances.

Responsabilités du module:
- Initialiser le logging structuré (JSON hors développement)
- Installer l'exporteur OTLP si configuré
- Ouvrir une session d'outils par tenant authentifié
"""

from __future__ import annotations

from typing import Any

import structlog

from backend.app.tracing import setup_tracing
from backend.core.container import Container, container
from backend.core.logging import setup_logging
from backend.domain.tenancy import tenant_from_claims
from backend.services.authoring_tools import AuthoringTools, ToolContext

log = structlog.get_logger(__name__)

_bootstrapped = False


def bootstrap(deps: Container | None = None) -> Container:
    """
    Configure logging et tracing (une seule fois par processus) et retourne le conteneur.

    Étapes:
    - Configure le logging structuré (structlog)
    - Installe le tracing OpenTelemetry si `OTLP_ENDPOINT` est défini
    """
    global _bootstrapped
    deps = deps or container
    if not _bootstrapped:
        settings = deps.settings
        setup_logging(json_logs=settings.APP_ENV != "dev")
        tracing = setup_tracing(settings)
        log.info(
            "authoring_bootstrap", app=settings.APP_NAME, env=settings.APP_ENV, tracing=tracing
        )
        _bootstrapped = True
    return deps


def open_session(claims: dict[str, Any], deps: Container | None = None) -> AuthoringTools:
    """Ouvre une session d'outils pour l'utilisateur authentifié décrit par `claims`.

    Le tenant provient exclusivement des claims, jamais des arguments de l'agent.

    Raises:
        TenantScopeError: claims sans tenant valide.
    """
    deps = bootstrap(deps)
    tenant_id = tenant_from_claims(claims)
    user_id = claims.get("userId") or claims.get("sub")
    structlog.contextvars.bind_contextvars(tenant_id=tenant_id)
    return AuthoringTools(ToolContext.open(tenant_id, user_id, deps))
