from __future__ import annotations

from collections.abc import Hashable, Sequence


class CapwireError(Exception):
    """Represent a base class for all capwire-specific failures.

    Catch this type when you want to handle any capwire error path without
    matching each concrete exception class individually.
    """


class CapwireDuplicateRegistrationError(CapwireError):
    """Signal a second default factory for an already registered capability.

    Raised by ``CapabilityRegistry.register`` and ``CapabilityRegistry.provides``.
    This is a bootstrap misconfiguration and is never recoverable at runtime.

    Typical fix is removing the duplicate registration, or installing the
    alternative implementation as an override on a child scope instead.
    """

    def __init__(self, key: Hashable) -> None:
        self.key = key
        super().__init__(f"Capability {key!r} already has a default factory registered.")


class CapwireRegistrySealedError(CapwireError):
    """Signal a registration attempt after the registration phase ended.

    Raised by ``CapabilityRegistry.register`` once ``seal()`` was called, which
    also happens implicitly when ``Scope.root`` builds a root scope.

    Typical fix is moving all registrations into application bootstrap, before
    the first root scope is created.
    """

    def __init__(self, key: Hashable) -> None:
        self.key = key
        super().__init__(
            f"Cannot register capability {key!r}: the registry is sealed. "
            "Register every default before calling Scope.root(registry).",
        )


class CapwireUnknownCapabilityError(CapwireError):
    """Signal that a capability has no binding in any scope of the chain.

    Raised by ``Resolver.resolve`` (and ``Scope.resolve``) when neither the
    requesting scope, its ancestors, nor the registry provide ``key``, and by
    ``CapabilityRegistry.default_factory`` for keys that were never registered.

    Typical fixes include registering a default factory during bootstrap or
    checking that the identifier used for lookup is the one used at
    registration.
    """

    def __init__(self, key: Hashable) -> None:
        self.key = key
        super().__init__(f"Capability {key!r} is not registered and no scope overrides it.")


class CapwireCyclicResolutionError(CapwireError):
    """Signal a capability whose factory depends on itself.

    Raised by ``Resolver.resolve`` when a factory, directly or transitively,
    requests a capability whose binding is already being resolved. A binding
    is the key together with the scope holding it, so asking for the same key
    again through a freshly derived child scope is still a cycle. ``path``
    lists the identifiers from the outermost resolution down to the repeated
    one.

    Typical fix is breaking the cycle, for example by resolving the wrapped
    implementation from ``scope.parent`` inside a decorating override.
    """

    def __init__(self, key: Hashable, path: Sequence[Hashable]) -> None:
        self.key = key
        self.path = tuple(path)
        rendered = " -> ".join(repr(step) for step in self.path)
        super().__init__(f"Cyclic resolution of capability {key!r}: {rendered}")


class CapwireInvalidOverrideError(CapwireError):
    """Signal a malformed override set.

    Raised by ``Scope.child`` and ``OverrideBuilder.derive`` when overrides are
    not a mapping or contain unhashable identifiers, and by ``Factory`` when it
    wraps something that is not callable.
    """


class CapwireScopeNotSetError(CapwireError):
    """Signal use of ``scope_context`` before any scope is bound.

    Raised by ``ScopeContext.current`` and everything built on it
    (``resolve``, ``with_overrides``, ``Dependency`` descriptors) when no scope
    is active and no fallback root was configured.

    Typical fix is calling ``scope_context.set_root(Scope.root(registry))``
    during application startup.
    """
