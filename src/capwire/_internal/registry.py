from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

from capwire._internal.bindings import FactoryFunction
from capwire._internal.keys import CapabilityId, describe_key
from capwire.exceptions import (
    CapwireDuplicateRegistrationError,
    CapwireInvalidOverrideError,
    CapwireRegistrySealedError,
    CapwireUnknownCapabilityError,
)

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CapabilityRegistration:
    """Default factories registered for one capability."""

    key: CapabilityId
    live: FactoryFunction
    mock: FactoryFunction | None = None


class CapabilityRegistry:
    """Hold the process-wide defaults for every capability.

    The registry has two phases. While open, ``register`` installs live (and
    optionally mock) factories. ``seal`` ends the registration phase, after
    which the registry is read-only and safe to share between threads without
    locking. ``Scope.root`` seals the registry it is built from, so no
    registration can happen after the first resolution.

    Factories take the ambient scope as their single argument. A derived
    capability resolves the capabilities it is built on from that argument,
    never from a scope captured when the factory was defined.
    """

    __slots__ = ("_lock", "_registrations", "_sealed")

    def __init__(self) -> None:
        self._registrations: dict[CapabilityId, CapabilityRegistration] = {}
        self._lock = threading.Lock()
        self._sealed = False

    @property
    def sealed(self) -> bool:
        """Whether the registration phase is over."""
        return self._sealed

    def register(
        self,
        key: CapabilityId,
        factory: FactoryFunction,
        *,
        mock: FactoryFunction | None = None,
    ) -> None:
        """Install the default factory for ``key``.

        Args:
            key: Capability identifier; any hashable token.
            factory: Callable producing the live implementation from the
                ambient scope.
            mock: Optional callable producing the implementation used by root
                scopes built in ``ResolutionMode.MOCK``.

        Raises:
            CapwireDuplicateRegistrationError: If ``key`` is already registered.
            CapwireRegistrySealedError: If the registry was sealed.

        """
        for candidate in (factory, mock):
            if candidate is not None and not callable(candidate):
                msg = f"Factory for capability {key!r} must be callable, got {candidate!r}."
                raise CapwireInvalidOverrideError(msg)

        with self._lock:
            if self._sealed:
                raise CapwireRegistrySealedError(key)
            if key in self._registrations:
                raise CapwireDuplicateRegistrationError(key)
            self._registrations[key] = CapabilityRegistration(key=key, live=factory, mock=mock)

        logger.debug(
            "Registered capability %s (mock=%s)",
            describe_key(key),
            mock is not None,
        )

    def provides(
        self,
        key: CapabilityId,
        *,
        mock: FactoryFunction | None = None,
    ) -> Callable[[F], F]:
        """Register the decorated function as the live factory for ``key``.

        Examples:
            .. code-block:: python

                @registry.provides(NAMES, mock=lambda scope: NamesClient(lambda: ["Mock"]))
                def live_names(scope: Scope) -> NamesClient:
                    return NamesClient(lambda: ["All", "names"])

        """

        def decorator(func: F) -> F:
            self.register(key, func, mock=mock)
            return func

        return decorator

    def seal(self) -> None:
        """End the registration phase. Calling it again is a no-op."""
        with self._lock:
            if self._sealed:
                return
            self._sealed = True
        logger.debug("Sealed capability registry with %d capabilities", len(self._registrations))

    def default_factory(self, key: CapabilityId) -> FactoryFunction:
        """Return the live factory registered for ``key``.

        Raises:
            CapwireUnknownCapabilityError: If ``key`` was never registered.

        """
        return self._registration(key).live

    def mock_factory(self, key: CapabilityId) -> FactoryFunction:
        """Return the mock factory for ``key``, or the live one when none was given.

        Raises:
            CapwireUnknownCapabilityError: If ``key`` was never registered.

        """
        registration = self._registration(key)
        if registration.mock is None:
            logger.debug("No mock registered for %s, using live factory", describe_key(key))
            return registration.live
        return registration.mock

    def keys(self) -> Iterator[CapabilityId]:
        """Snapshot of the registered identifiers, in registration order."""
        return iter(tuple(self._registrations))

    def _registration(self, key: CapabilityId) -> CapabilityRegistration:
        try:
            return self._registrations[key]
        except KeyError:
            raise CapwireUnknownCapabilityError(key) from None

    def __contains__(self, key: object) -> bool:
        return key in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)

    def __repr__(self) -> str:
        state = "sealed" if self._sealed else "open"
        return f"CapabilityRegistry({len(self._registrations)} capabilities, {state})"


__all__ = ["CapabilityRegistration", "CapabilityRegistry"]
