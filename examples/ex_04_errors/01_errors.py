"""Errors: duplicate registration, sealed registry, unknown and cyclic capabilities."""

from __future__ import annotations

from capwire import (
    CapabilityKey,
    CapabilityRegistry,
    CapwireCyclicResolutionError,
    CapwireDuplicateRegistrationError,
    CapwireError,
    CapwireRegistrySealedError,
    CapwireUnknownCapabilityError,
    Factory,
    Scope,
)

GREETING = CapabilityKey[str]("greeting")
FAREWELL = CapabilityKey[str]("farewell")
MISSING = CapabilityKey[str]("missing")


def main() -> None:
    registry = CapabilityRegistry()
    registry.register(GREETING, lambda scope: "hello")

    try:
        registry.register(GREETING, lambda scope: "hi")
    except CapwireDuplicateRegistrationError as error:
        print(f"duplicate={type(error).__name__}")  # => duplicate=CapwireDuplicateRegistrationError

    root = Scope.root(registry)

    try:
        registry.register(FAREWELL, lambda scope: "bye")
    except CapwireRegistrySealedError as error:
        print(f"sealed={type(error).__name__}")  # => sealed=CapwireRegistrySealedError

    try:
        root.resolve(MISSING)
    except CapwireUnknownCapabilityError as error:
        print(f"unknown={error.key.name}")  # => unknown=missing

    looping = root.child({GREETING: Factory(lambda scope: scope.resolve(GREETING) + "!")})
    try:
        looping.resolve(GREETING)
    except CapwireCyclicResolutionError as error:
        print(f"cycle_path_length={len(error.path)}")  # => cycle_path_length=2

    decorating = root.child(
        {GREETING: Factory(lambda scope: scope.parent.resolve(GREETING) + "!")},
    )
    print(f"decorated={decorating.resolve(GREETING)}")  # => decorated=hello!

    print(f"catch_all={issubclass(CapwireCyclicResolutionError, CapwireError)}")  # => catch_all=True


if __name__ == "__main__":
    main()
