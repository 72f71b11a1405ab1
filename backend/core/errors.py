"""Exceptions applicatives de la couche d'outils.

Les erreurs de validation côté agent ne passent pas par ces exceptions: elles sont renvoyées sous
forme de résultat `{"type": "error"}`. Les exceptions ci-dessous signalent une mauvaise utilisation
du code hôte (boucle d'agent, scripts).
"""

from __future__ import annotations


class AuthoringError(RuntimeError):
    """Erreur de base de la couche d'outils."""


class UnknownToolError(AuthoringError):
    """Nom d'outil inconnu lors d'un dispatch."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown tool: {name}")
        self.name = name


class TenantScopeError(AuthoringError):
    """Identifiant de tenant absent ou invalide à l'ouverture d'un contexte."""
