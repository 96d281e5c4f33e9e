from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, NoReturn, TypeVar, overload

from capwire._internal.bindings import MISSING, Factory, ResolutionMode
from capwire._internal.keys import CapabilityId, CapabilityKey, describe_key
from capwire._internal.registry import CapabilityRegistry
from capwire._internal.resolver import default_resolver
from capwire.exceptions import CapwireInvalidOverrideError

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Scope:
    """Represent one immutable node of the override hierarchy.

    A root scope is backed by a sealed ``CapabilityRegistry``. Every other
    scope holds exactly the overrides it was created with plus a strong
    reference to its parent; parents know nothing about their children.
    Lookups that miss locally fall back to the parent lazily, so nothing is
    copied or resolved when a child is created.

    Overrides map identifiers to concrete implementations, or to ``Factory``
    wrappers that build the implementation from the ambient scope at
    resolution time.

    Examples:
        .. code-block:: python

            root = Scope.root(registry)
            child = root.child({NAMES: NamesClient(lambda: ["Mock"])})
            child.resolve(GET_ALL_NAMES).get_all_names()  # ["Mock"]

    """

    __slots__ = ("__weakref__", "_bindings", "_depth", "_mode", "_parent", "_registry")

    _bindings: Mapping[CapabilityId, Any]
    _depth: int
    _mode: ResolutionMode
    _parent: Scope | None
    _registry: CapabilityRegistry | None

    def __init__(
        self,
        *,
        bindings: Mapping[CapabilityId, Any],
        parent: Scope | None,
        registry: CapabilityRegistry | None = None,
        mode: ResolutionMode = ResolutionMode.LIVE,
    ) -> None:
        object.__setattr__(self, "_bindings", MappingProxyType(dict(bindings)))
        object.__setattr__(self, "_parent", parent)
        object.__setattr__(self, "_registry", registry)
        object.__setattr__(self, "_mode", parent.mode if parent is not None else mode)
        object.__setattr__(self, "_depth", parent.depth + 1 if parent is not None else 0)

    @classmethod
    def root(
        cls,
        registry: CapabilityRegistry,
        *,
        mode: ResolutionMode = ResolutionMode.LIVE,
    ) -> Scope:
        """Build a root scope deferring to the registry defaults.

        The registry is sealed first: registering defaults after a scope that
        can resolve them exists is not allowed.

        Args:
            registry: Registry providing the default factories.
            mode: ``LIVE`` uses live factories, ``MOCK`` prefers the mock
                factories registered alongside them.

        """
        registry.seal()
        logger.debug("Created root scope over %r in %s mode", registry, mode.value)
        return cls(bindings={}, parent=None, registry=registry, mode=mode)

    def child(self, overrides: Mapping[CapabilityId, Any] | None = None) -> Scope:
        """Return a new scope whose parent is this one.

        The child's own bindings are exactly ``overrides``; the mapping is
        copied once, so later changes to the caller's dict are not observed.

        Raises:
            CapwireInvalidOverrideError: If ``overrides`` is not a mapping or
                holds unhashable identifiers.

        """
        bindings = _validated_overrides(overrides)
        child = type(self)(bindings=bindings, parent=self)
        logger.debug(
            "Derived scope at depth %d overriding %s",
            child.depth,
            ", ".join(describe_key(key) for key in bindings) or "nothing",
        )
        return child

    @property
    def parent(self) -> Scope | None:
        return self._parent

    @property
    def depth(self) -> int:
        """Number of ancestors; the root has depth 0."""
        return self._depth

    @property
    def mode(self) -> ResolutionMode:
        return self._mode

    @property
    def bindings(self) -> Mapping[CapabilityId, Any]:
        """Read-only view of the overrides installed on this node."""
        return self._bindings

    @property
    def root_scope(self) -> Scope:
        scope = self
        while scope._parent is not None:
            scope = scope._parent
        return scope

    def lineage(self) -> Iterator[Scope]:
        """Iterate from this scope up to the root, inclusive."""
        scope: Scope | None = self
        while scope is not None:
            yield scope
            scope = scope._parent

    def local_binding(self, key: CapabilityId) -> Any:
        """Return the binding installed on this node, or ``MISSING``.

        The root reports registry defaults as ``Factory`` bindings.
        """
        binding = self._bindings.get(key, MISSING)
        if binding is not MISSING or self._registry is None:
            return binding
        if key not in self._registry:
            return MISSING
        if self._mode is ResolutionMode.MOCK:
            return Factory(self._registry.mock_factory(key))
        return Factory(self._registry.default_factory(key))

    def overrides(self, key: CapabilityId) -> bool:
        """Whether this node itself overrides ``key``."""
        return key in self._bindings

    @overload
    def resolve(self, key: CapabilityKey[T]) -> T: ...

    @overload
    def resolve(self, key: CapabilityId) -> Any: ...

    def resolve(self, key: CapabilityId) -> Any:
        """Resolve ``key`` with this scope as the ambient scope."""
        return default_resolver.resolve(self, key)

    def __contains__(self, key: object) -> bool:
        return any(scope.local_binding(key) is not MISSING for scope in self.lineage())

    def __setattr__(self, name: str, value: object) -> NoReturn:
        msg = f"{type(self).__name__} is immutable; use child() to override capabilities."
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> NoReturn:
        msg = f"{type(self).__name__} is immutable."
        raise AttributeError(msg)

    def __repr__(self) -> str:
        keys = ", ".join(describe_key(key) for key in self._bindings)
        return f"Scope(depth={self._depth}, overrides=[{keys}])"


def _validated_overrides(overrides: Mapping[CapabilityId, Any] | None) -> dict[CapabilityId, Any]:
    if overrides is None:
        return {}
    if not isinstance(overrides, Mapping):
        msg = f"Overrides must be a mapping of capability identifiers, got {type(overrides).__name__}."
        raise CapwireInvalidOverrideError(msg)
    for key in overrides:
        if not isinstance(key, Hashable):
            msg = f"Capability identifier {key!r} is not hashable."
            raise CapwireInvalidOverrideError(msg)
    return dict(overrides)


__all__ = ["Scope"]
