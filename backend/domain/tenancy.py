"""Tenancy utilities.

Every search and write of the authoring tools is scoped by a tenant id. Tenant ids are opaque
(usually UUIDs): they are trimmed and checked against a safe pattern, never lowercased, since the
datastore compares them verbatim. Derive the tenant from authenticated claims, never from
free-form agent input.
"""

from __future__ import annotations

import re
from typing import Any

from backend.core.errors import TenantScopeError

_SAFE_TENANT_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def normalize_tenant(value: str | None) -> str | None:
    """Return the trimmed tenant id if it matches the safe pattern, else None."""
    if not value:
        return None
    t = value.strip()
    if _SAFE_TENANT_RE.match(t):
        return t
    return None


def require_tenant(value: str | None) -> str:
    """Return a normalized tenant id or raise TenantScopeError."""
    tenant = normalize_tenant(value)
    if tenant is None:
        raise TenantScopeError(f"invalid tenant id: {value!r}")
    return tenant


def tenant_from_claims(claims: dict[str, Any] | None) -> str:
    """Extract the tenant id from authenticated user claims (`tenantId` or `tenant_id`)."""
    claims = claims or {}
    raw = claims.get("tenantId") or claims.get("tenant_id")
    return require_tenant(raw if isinstance(raw, str) else None)
