from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, Generic, TypeVar, overload

from typing_extensions import Self

from capwire._internal.capture import capture_scope, scope_of
from capwire._internal.keys import CapabilityId, CapabilityKey
from capwire._internal.scope_context import ScopeContext, scope_context

T = TypeVar("T")
C = TypeVar("C", bound=type[Any])


class Dependency(Generic[T]):
    """Expose a capability as an attribute resolved from the owner's scope.

    The owner object resolves from the scope it captured, either at
    construction (see ``captures_scope``) or on the first attribute access,
    whichever comes first. Each access resolves again; nothing is cached on
    the instance apart from the captured scope.

    Owners must have a ``__dict__``.

    Examples:
        .. code-block:: python

            @captures_scope
            class ChildViewModel:
                get_all_names_client = Dependency(GET_ALL_NAMES)

                def get_all_names(self) -> list[str]:
                    return self.get_all_names_client.get_all_names()

    """

    __slots__ = ("_context", "key", "name")

    def __init__(
        self,
        key: CapabilityKey[T] | CapabilityId,
        *,
        context: ScopeContext | None = None,
    ) -> None:
        self.key = key
        self.name: str | None = None
        self._context = context if context is not None else scope_context

    def __set_name__(self, owner: type[Any], name: str) -> None:
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type[Any] | None = None) -> Self: ...

    @overload
    def __get__(self, instance: object, owner: type[Any] | None = None) -> T: ...

    def __get__(self, instance: object | None, owner: type[Any] | None = None) -> Any:
        if instance is None:
            return self
        scope = scope_of(instance)
        if scope is None:
            scope = self._context.current()
            capture_scope(instance, scope)
        return scope.resolve(self.key)

    def __set__(self, instance: object, value: object) -> None:
        msg = f"Dependency attribute {self.name!r} is read-only; override it on a child scope."
        raise AttributeError(msg)

    def __repr__(self) -> str:
        return f"Dependency({self.key!r})"


@overload
def captures_scope(cls: C) -> C: ...


@overload
def captures_scope(
    cls: None = None,
    *,
    context: ScopeContext | None = None,
) -> Callable[[C], C]: ...


def captures_scope(
    cls: C | None = None,
    *,
    context: ScopeContext | None = None,
) -> C | Callable[[C], C]:
    """Make instances capture the ambient scope when they are constructed.

    The scope is captured before the original ``__init__`` runs, so the
    initializer may already use ``Dependency`` attributes.
    """
    active_context = context if context is not None else scope_context

    def decorator(target: C) -> C:
        original_init = target.__init__

        @functools.wraps(original_init)
        def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
            if scope_of(self) is None:
                capture_scope(self, active_context.current())
            original_init(self, *args, **kwargs)

        target.__init__ = __init__  # type: ignore[misc]
        return target

    if cls is None:
        return decorator
    return decorator(cls)


__all__ = ["Dependency", "captures_scope"]
