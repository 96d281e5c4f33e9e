from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeAlias, TypeVar

from capwire.exceptions import CapwireInvalidOverrideError

if TYPE_CHECKING:
    from capwire._internal.scope import Scope

T = TypeVar("T")

FactoryFunction: TypeAlias = Callable[["Scope"], Any]
"""A callable receiving the ambient scope and returning a capability value."""


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()
"""Sentinel for "no binding here"; ``None`` is a valid concrete capability."""


class ResolutionMode(str, Enum):
    """Select which registry factory backs a root scope."""

    LIVE = "live"
    """Use the live factory of every registered capability."""

    MOCK = "mock"
    """Use the mock factory where one was registered, the live one otherwise."""


@dataclass(frozen=True)
class Factory(Generic[T]):
    """Mark an override as a factory instead of a concrete value.

    Override mappings treat plain values as ready implementations. Wrap a
    callable in ``Factory`` when the implementation must be built at
    resolution time from other capabilities. The callable receives the
    ambient scope, which is the scope the resolution was requested from.

    Examples:
        .. code-block:: python

            child = root.child(
                {
                    GET_ALL_NAMES: Factory(
                        lambda scope: GetAllNamesClient(scope.resolve(NAMES).get_all_names),
                    ),
                },
            )

    """

    func: Callable[[Scope], T]

    def __post_init__(self) -> None:
        if not callable(self.func):
            msg = f"Factory expects a callable taking the ambient scope, got {self.func!r}."
            raise CapwireInvalidOverrideError(msg)

    def __call__(self, scope: Scope) -> T:
        return self.func(scope)


__all__ = ["MISSING", "Factory", "FactoryFunction", "ResolutionMode"]
