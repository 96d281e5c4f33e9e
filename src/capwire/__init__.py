from capwire._internal.bindings import Factory, ResolutionMode
from capwire._internal.capture import scope_of
from capwire._internal.dependency import Dependency, captures_scope
from capwire._internal.keys import CapabilityKey
from capwire._internal.override_builder import OverrideBuilder
from capwire._internal.registry import CapabilityRegistry
from capwire._internal.resolver import Resolver
from capwire._internal.scope import Scope
from capwire._internal.scope_context import ScopeContext, scope_context
from capwire.exceptions import (
    CapwireCyclicResolutionError,
    CapwireDuplicateRegistrationError,
    CapwireError,
    CapwireInvalidOverrideError,
    CapwireRegistrySealedError,
    CapwireScopeNotSetError,
    CapwireUnknownCapabilityError,
)

__all__ = [
    "CapabilityKey",
    "CapabilityRegistry",
    "CapwireCyclicResolutionError",
    "CapwireDuplicateRegistrationError",
    "CapwireError",
    "CapwireInvalidOverrideError",
    "CapwireRegistrySealedError",
    "CapwireScopeNotSetError",
    "CapwireUnknownCapabilityError",
    "Dependency",
    "Factory",
    "OverrideBuilder",
    "ResolutionMode",
    "Resolver",
    "Scope",
    "ScopeContext",
    "captures_scope",
    "scope_context",
    "scope_of",
]
