from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CapabilityKey(Generic[T]):
    """Name a capability with a stable, comparable token.

    Equality and hashing use ``name`` only, so two keys created independently
    with the same name address the same capability. The type parameter is for
    type checkers: ``scope.resolve(NAMES)`` is typed as ``NamesClient`` when
    ``NAMES = CapabilityKey[NamesClient]("names_client")``.

    Examples:
        .. code-block:: python

            NAMES = CapabilityKey[NamesClient]("names_client")
            registry.register(NAMES, lambda scope: NamesClient.live())

    """

    name: str

    def __repr__(self) -> str:
        return f"CapabilityKey({self.name!r})"


CapabilityId: TypeAlias = Hashable
"""Any hashable token accepted as a capability identifier."""


def describe_key(key: CapabilityId) -> str:
    """Return a short human readable label for logs."""
    if isinstance(key, CapabilityKey):
        return key.name
    if isinstance(key, type):
        return key.__qualname__
    return repr(key)


__all__ = ["CapabilityId", "CapabilityKey", "describe_key"]
