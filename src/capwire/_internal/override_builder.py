from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from capwire._internal.capture import scope_of
from capwire._internal.keys import CapabilityId
from capwire._internal.scope import Scope
from capwire.exceptions import CapwireScopeNotSetError


class OverrideBuilder:
    """Derive child scopes for new activation contexts.

    Deriving never resolves anything: the child only records the overrides
    and a pointer to its parent. Derived capabilities are therefore built
    at resolution time and see the overrides of the scope they are
    resolved from. All overrides of one call land in the child at once.
    """

    __slots__ = ()

    def derive(
        self,
        from_scope: Scope | Any,
        overrides: Mapping[CapabilityId, Any] | None = None,
    ) -> Scope:
        """Return a child of ``from_scope`` with ``overrides`` installed.

        Args:
            from_scope: A ``Scope``, or an object that captured one (see
                ``captures_scope``), whose capabilities the child inherits.
            overrides: Identifiers mapped to concrete implementations or to
                ``Factory`` wrappers.

        Raises:
            CapwireScopeNotSetError: If ``from_scope`` is an object that never
                captured a scope.
            CapwireInvalidOverrideError: If ``overrides`` is malformed.

        """
        parent = scope_of(from_scope)
        if parent is None:
            msg = (
                f"Cannot derive overrides from {from_scope!r}: it is not a Scope and did not "
                "capture one."
            )
            raise CapwireScopeNotSetError(msg)
        return parent.child(overrides)


__all__ = ["OverrideBuilder"]
