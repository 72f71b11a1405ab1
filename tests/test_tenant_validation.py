"""
Tests pour la validation des tenants.

Ce module teste les fonctions de validation et de normalisation des identifiants de tenants dans
l'application.
"""

from __future__ import annotations

import pytest

from backend.core.errors import TenantScopeError
from backend.domain.tenancy import normalize_tenant, require_tenant, tenant_from_claims

TENANT_UUID = "7f3c2a9e-5b1d-4c8e-9a2f-1e6d4b3c2a10"


def test_normalize_tenant_valid_and_invalid() -> None:
    """Teste la normalisation des identifiants de tenants (sans changement de casse)."""
    assert normalize_tenant(" Tenant_01 ") == "Tenant_01"
    assert normalize_tenant(TENANT_UUID) == TENANT_UUID
    assert normalize_tenant("") is None
    assert normalize_tenant(None) is None
    assert normalize_tenant("..") is None
    assert normalize_tenant("A" * 65) is None


def test_require_tenant_raises_on_invalid() -> None:
    """Teste que les tenants invalides lèvent une erreur de périmètre."""
    assert require_tenant("acme") == "acme"
    with pytest.raises(TenantScopeError):
        require_tenant("acme corp")


def test_tenant_from_claims() -> None:
    """Teste l'extraction du tenant depuis les claims authentifiées."""
    assert tenant_from_claims({"tenantId": TENANT_UUID}) == TENANT_UUID
    assert tenant_from_claims({"tenant_id": "acme"}) == "acme"
    with pytest.raises(TenantScopeError):
        tenant_from_claims({"sub": "user-1"})
    with pytest.raises(TenantScopeError):
        tenant_from_claims(None)
