"""View models capture the ambient scope when they are constructed.

``ViewModel.go_to_child_*`` builds a ``ChildViewModel`` inside
``scope_context.with_overrides(..., from_=self)``. The child keeps the derived
scope after the block ends, so both navigation paths show the mock names.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from capwire import (
    CapabilityKey,
    CapabilityRegistry,
    Dependency,
    Scope,
    captures_scope,
    scope_context,
)


@dataclass(frozen=True, slots=True)
class NamesClient:
    get_all_names: Callable[[], list[str]]


@dataclass(frozen=True, slots=True)
class GetAllNamesClient:
    get_all_names: Callable[[], list[str]]


NAMES = CapabilityKey[NamesClient]("names_client")
GET_ALL_NAMES = CapabilityKey[GetAllNamesClient]("get_all_names_client")


@dataclass(frozen=True, slots=True)
class NoDestination:
    pass


@dataclass(frozen=True, slots=True)
class ShowChild:
    view_model: ChildViewModel


Destination = NoDestination | ShowChild


@captures_scope
class ChildViewModel:
    get_all_names_client = Dependency(GET_ALL_NAMES)

    def __init__(self) -> None:
        self.names: list[str] = []

    def get_all_names(self) -> None:
        self.names = self.get_all_names_client.get_all_names()


@captures_scope
class ViewModel:
    get_all_names_client = Dependency(GET_ALL_NAMES)

    def __init__(self) -> None:
        self.names: list[str] = []
        self.destination: Destination = NoDestination()

    def get_all_names(self) -> None:
        self.names = self.get_all_names_client.get_all_names()

    def go_to_child_with_get_all_names_client_override(self) -> None:
        mock = GetAllNamesClient(get_all_names=lambda: ["mock"])
        with scope_context.with_overrides({GET_ALL_NAMES: mock}, from_=self):
            self.destination = ShowChild(ChildViewModel())

    def go_to_child_with_names_client_override(self) -> None:
        mock = NamesClient(get_all_names=lambda: ["Mock"])
        with scope_context.with_overrides({NAMES: mock}, from_=self):
            self.destination = ShowChild(ChildViewModel())


def child_names(destination: Destination) -> list[str]:
    match destination:
        case ShowChild(view_model=child):
            child.get_all_names()
            return child.names
        case NoDestination():
            return []


def main() -> None:
    registry = CapabilityRegistry()
    registry.register(NAMES, lambda scope: NamesClient(get_all_names=lambda: ["All", "names"]))
    registry.register(
        GET_ALL_NAMES,
        lambda scope: GetAllNamesClient(get_all_names=lambda: scope.resolve(NAMES).get_all_names()),
    )
    scope_context.set_root(Scope.root(registry))

    view_model = ViewModel()
    view_model.get_all_names()
    print(f"parent={view_model.names}")  # => parent=['All', 'names']

    view_model.go_to_child_with_get_all_names_client_override()
    print(f"derived_override={child_names(view_model.destination)}")  # => derived_override=['mock']

    view_model.go_to_child_with_names_client_override()
    print(f"base_override={child_names(view_model.destination)}")  # => base_override=['Mock']

    view_model.get_all_names()
    print(f"parent_after={view_model.names}")  # => parent_after=['All', 'names']


if __name__ == "__main__":
    main()
