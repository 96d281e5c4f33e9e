"""Derived capabilities: overriding the base client propagates.

``GetAllNamesClient`` is implemented in terms of ``NamesClient``. Its factory
receives the scope the resolution was requested from, so overriding only
``NamesClient`` on a child scope changes what ``GetAllNamesClient`` returns
there. Overriding ``GetAllNamesClient`` directly bypasses ``NamesClient``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from capwire import CapabilityKey, CapabilityRegistry, Factory, OverrideBuilder, Scope


@dataclass(frozen=True, slots=True)
class NamesClient:
    get_all_names: Callable[[], list[str]]


@dataclass(frozen=True, slots=True)
class GetAllNamesClient:
    get_all_names: Callable[[], list[str]]


NAMES = CapabilityKey[NamesClient]("names_client")
GET_ALL_NAMES = CapabilityKey[GetAllNamesClient]("get_all_names_client")


def live_get_all_names(scope: Scope) -> GetAllNamesClient:
    return GetAllNamesClient(get_all_names=lambda: scope.resolve(NAMES).get_all_names())


def main() -> None:
    registry = CapabilityRegistry()
    registry.register(NAMES, lambda scope: NamesClient(get_all_names=lambda: ["All", "names"]))
    registry.register(GET_ALL_NAMES, live_get_all_names)

    root = Scope.root(registry)
    builder = OverrideBuilder()

    base_override = builder.derive(root, {NAMES: NamesClient(get_all_names=lambda: ["Mock"])})
    derived_override = builder.derive(
        root,
        {GET_ALL_NAMES: GetAllNamesClient(get_all_names=lambda: ["mock"])},
    )
    wrapped = builder.derive(
        root,
        {
            GET_ALL_NAMES: Factory(
                lambda scope: GetAllNamesClient(
                    get_all_names=lambda: sorted(scope.resolve(NAMES).get_all_names()),
                ),
            ),
        },
    )

    print(f"root={root.resolve(GET_ALL_NAMES).get_all_names()}")  # => root=['All', 'names']
    print(
        f"base_override={base_override.resolve(GET_ALL_NAMES).get_all_names()}",
    )  # => base_override=['Mock']
    print(
        f"derived_override={derived_override.resolve(GET_ALL_NAMES).get_all_names()}",
    )  # => derived_override=['mock']
    print(f"wrapped={wrapped.resolve(GET_ALL_NAMES).get_all_names()}")  # => wrapped=['All', 'names']


if __name__ == "__main__":
    main()
