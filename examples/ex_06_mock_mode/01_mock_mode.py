"""Mock mode: a root scope backed by the registry's mock factories.

Capabilities registered without a mock keep their live factory, so a
derived capability built on a mocked one picks the mock up as well.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from capwire import CapabilityKey, CapabilityRegistry, ResolutionMode, Scope


@dataclass(frozen=True, slots=True)
class NamesClient:
    get_all_names: Callable[[], list[str]]


@dataclass(frozen=True, slots=True)
class GreetingClient:
    greet_all: Callable[[], str]


NAMES = CapabilityKey[NamesClient]("names_client")
GREETING = CapabilityKey[GreetingClient]("greeting_client")


def live_greeting(scope: Scope) -> GreetingClient:
    names = scope.resolve(NAMES)
    return GreetingClient(greet_all=lambda: "hello " + " & ".join(names.get_all_names()))


def main() -> None:
    registry = CapabilityRegistry()
    registry.register(
        NAMES,
        lambda scope: NamesClient(get_all_names=lambda: ["Ada", "Grace"]),
        mock=lambda scope: NamesClient(get_all_names=lambda: ["Mock"]),
    )
    registry.register(GREETING, live_greeting)

    live_root = Scope.root(registry)
    mock_root = Scope.root(registry, mode=ResolutionMode.MOCK)

    print(live_root.resolve(GREETING).greet_all())  # => hello Ada & Grace
    print(mock_root.resolve(GREETING).greet_all())  # => hello Mock
    print(f"child_mode={mock_root.child().mode.value}")  # => child_mode=mock


if __name__ == "__main__":
    main()
