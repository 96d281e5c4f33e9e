from __future__ import annotations

from typing import Any

from capwire._internal.scope import Scope

CAPTURED_SCOPE_ATTR = "__capwire_scope__"


def capture_scope(owner: Any, scope: Scope) -> None:
    """Store ``scope`` on ``owner`` so its ``Dependency`` attributes resolve from it."""
    owner.__dict__[CAPTURED_SCOPE_ATTR] = scope


def scope_of(source: Scope | Any) -> Scope | None:
    """Return ``source`` itself for scopes, or the scope an object captured."""
    if isinstance(source, Scope):
        return source
    owner_dict = getattr(source, "__dict__", None)
    if owner_dict is None:
        return None
    return owner_dict.get(CAPTURED_SCOPE_ATTR)


__all__ = ["CAPTURED_SCOPE_ATTR", "capture_scope", "scope_of"]
