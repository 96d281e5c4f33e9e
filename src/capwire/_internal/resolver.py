from __future__ import annotations

import logging
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar, overload

from capwire._internal.bindings import MISSING, Factory
from capwire._internal.keys import CapabilityId, CapabilityKey, describe_key
from capwire.exceptions import CapwireCyclicResolutionError, CapwireUnknownCapabilityError

if TYPE_CHECKING:
    from capwire._internal.scope import Scope

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _ResolutionFrame:
    key: CapabilityId
    owner: Scope


# Bindings whose factories are currently running in this thread or asyncio
# task, outermost first. A binding is identified by its key and the scope that
# holds it.
_in_progress: ContextVar[tuple[_ResolutionFrame, ...]] = ContextVar(
    "capwire_resolution_in_progress",
    default=(),
)


class Resolver:
    """Produce the effective implementation of a capability for a scope.

    Resolution walks from the requesting scope towards the root and stops at
    the first scope holding a binding for the key. Concrete bindings are
    returned as they are. Factory bindings are invoked on every resolution,
    with the requesting scope passed in as the ambient scope, so a derived
    capability registered at the root still observes overrides of the
    capabilities it is built on when resolved from a descendant scope.

    The resolver keeps no cache and no per-instance state; one instance can be
    shared freely between threads.
    """

    __slots__ = ()

    @overload
    def resolve(self, scope: Scope, key: CapabilityKey[T]) -> T: ...

    @overload
    def resolve(self, scope: Scope, key: CapabilityId) -> Any: ...

    def resolve(self, scope: Scope, key: CapabilityId) -> Any:
        """Resolve ``key`` starting from ``scope``.

        Args:
            scope: The requesting scope. It is the ambient scope of the
                factory that produces the value, and of every nested
                resolution that factory performs.
            key: Capability identifier.

        Raises:
            CapwireUnknownCapabilityError: If no scope in the chain binds
                ``key`` and the registry has no default for it.
            CapwireCyclicResolutionError: If the binding found for ``key`` is
                already running further up the call stack, whichever scope
                it was requested from.

        """
        owner, binding = self._find_binding(scope, key)
        if not isinstance(binding, Factory):
            return binding

        frames = _in_progress.get()
        if any(frame.key == key and frame.owner is owner for frame in frames):
            path = [frame.key for frame in frames]
            path.append(key)
            logger.debug("Cyclic resolution detected for %s", describe_key(key))
            raise CapwireCyclicResolutionError(key, path)

        token = _in_progress.set((*frames, _ResolutionFrame(key=key, owner=owner)))
        try:
            return binding(scope)
        finally:
            _in_progress.reset(token)

    def binding_owner(self, scope: Scope, key: CapabilityId) -> Scope:
        """Return the nearest scope in the chain that binds ``key``.

        Raises:
            CapwireUnknownCapabilityError: If nothing in the chain binds ``key``.

        """
        owner, _ = self._find_binding(scope, key)
        return owner

    def _find_binding(self, scope: Scope, key: CapabilityId) -> tuple[Scope, Any]:
        for candidate in scope.lineage():
            binding = candidate.local_binding(key)
            if binding is not MISSING:
                return candidate, binding
        logger.debug(
            "Capability %s not found from scope at depth %d",
            describe_key(key),
            scope.depth,
        )
        raise CapwireUnknownCapabilityError(key)


default_resolver = Resolver()
"""Resolver used by ``Scope.resolve`` and ``scope_context``."""


__all__ = ["Resolver", "default_resolver"]
