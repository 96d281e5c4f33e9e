"""Quickstart: register defaults, build a root scope, override in a child.

Overrides live on child scopes only; the parent keeps resolving the live
implementation.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from capwire import CapabilityKey, CapabilityRegistry, Scope


@dataclass(frozen=True, slots=True)
class NamesClient:
    get_all_names: Callable[[], list[str]]


NAMES = CapabilityKey[NamesClient]("names_client")


def main() -> None:
    registry = CapabilityRegistry()
    registry.register(NAMES, lambda scope: NamesClient(get_all_names=lambda: ["All", "names"]))

    root = Scope.root(registry)
    child = root.child({NAMES: NamesClient(get_all_names=lambda: ["Mock"])})

    print(f"root={root.resolve(NAMES).get_all_names()}")  # => root=['All', 'names']
    print(f"child={child.resolve(NAMES).get_all_names()}")  # => child=['Mock']
    print(f"sealed={registry.sealed}")  # => sealed=True


if __name__ == "__main__":
    main()
