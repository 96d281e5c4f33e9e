from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, TypeVar, overload

from capwire._internal.keys import CapabilityId, CapabilityKey
from capwire._internal.override_builder import OverrideBuilder
from capwire._internal.scope import Scope
from capwire.exceptions import CapwireScopeNotSetError

T = TypeVar("T")


class ScopeContext:
    """Task/thread-safe holder of the ambient scope.

    The bound scope lives in a ``ContextVar``: every thread starts unbound and
    every asyncio task inherits a snapshot of its creator's binding, so
    rebinding inside one task never leaks into another. When nothing is bound
    the fallback root configured with ``set_root`` is used.

    Binding a scope only decides where resolution *starts*; factories still
    receive the requesting scope explicitly and never read this context.
    """

    __slots__ = ("_current_scope_var", "_fallback_root", "_override_builder")

    def __init__(self) -> None:
        self._current_scope_var: ContextVar[Scope | None] = ContextVar(
            "capwire_scope_context_scope",
            default=None,
        )
        self._fallback_root: Scope | None = None
        self._override_builder = OverrideBuilder()

    def set_root(self, scope: Scope | None) -> None:
        """Set the scope used when no scope is bound; ``None`` clears it."""
        self._fallback_root = scope

    def current_or_none(self) -> Scope | None:
        """Return the bound scope, the fallback root, or ``None``."""
        scope = self._current_scope_var.get()
        if scope is not None:
            return scope
        return self._fallback_root

    def current(self) -> Scope:
        """Return the bound scope, or the fallback root.

        Raises:
            CapwireScopeNotSetError: If neither is available.

        """
        scope = self.current_or_none()
        if scope is None:
            msg = (
                "No scope is bound for scope_context. Call scope_context.set_root(...) during "
                "startup or enter scope_context.use(scope)."
            )
            raise CapwireScopeNotSetError(msg)
        return scope

    @contextmanager
    def use(self, scope: Scope) -> Iterator[Scope]:
        """Bind ``scope`` as the ambient scope for the duration of the block."""
        token = self._current_scope_var.set(scope)
        try:
            yield scope
        finally:
            self._current_scope_var.reset(token)

    @contextmanager
    def with_overrides(
        self,
        overrides: Mapping[CapabilityId, Any] | None = None,
        *,
        from_: Scope | Any | None = None,
    ) -> Iterator[Scope]:
        """Derive a child scope and bind it for the duration of the block.

        Objects built inside the block with ``captures_scope`` keep the child
        scope after the block exits.

        Args:
            overrides: Identifiers mapped to implementations or ``Factory``
                wrappers.
            from_: Scope, or object that captured one, to derive from.
                Defaults to the current scope.

        Examples:
            .. code-block:: python

                with scope_context.with_overrides({NAMES: mock_names}, from_=self):
                    child_model = ChildViewModel()

        """
        parent = self.current() if from_ is None else from_
        child = self._override_builder.derive(parent, overrides)
        with self.use(child):
            yield child

    @overload
    def resolve(self, key: CapabilityKey[T]) -> T: ...

    @overload
    def resolve(self, key: CapabilityId) -> Any: ...

    def resolve(self, key: CapabilityId) -> Any:
        """Resolve ``key`` from the current scope."""
        return self.current().resolve(key)


scope_context = ScopeContext()


__all__ = ["ScopeContext", "scope_context"]
