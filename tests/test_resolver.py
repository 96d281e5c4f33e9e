"""Tests for capability resolution across scope chains."""

from __future__ import annotations

from typing import Any

import pytest

from capwire import (
    CapabilityKey,
    CapabilityRegistry,
    CapwireCyclicResolutionError,
    CapwireUnknownCapabilityError,
    Factory,
    Resolver,
    Scope,
)
from tests.names_clients import (
    GET_ALL_NAMES,
    MOCK_GET_ALL_NAMES_CLIENT,
    MOCK_NAMES_CLIENT,
    NAMES,
    GetAllNamesClient,
    NamesClient,
)


@pytest.fixture()
def resolver() -> Resolver:
    return Resolver()


class TestDirectOverrides:
    def test_child_override_is_visible_from_child(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        child = root_scope.child({NAMES: MOCK_NAMES_CLIENT})

        assert resolver.resolve(child, NAMES) is MOCK_NAMES_CLIENT

    def test_parent_keeps_live_default(self, resolver: Resolver, root_scope: Scope) -> None:
        root_scope.child({NAMES: MOCK_NAMES_CLIENT})

        assert resolver.resolve(root_scope, NAMES).get_all_names() == ["All", "names"]

    def test_nearest_override_wins(self, resolver: Resolver, root_scope: Scope) -> None:
        outer = NamesClient(get_all_names=lambda: ["outer"])
        inner = NamesClient(get_all_names=lambda: ["inner"])

        grandchild = root_scope.child({NAMES: outer}).child({NAMES: inner})

        assert resolver.resolve(grandchild, NAMES) is inner

    def test_unrelated_child_inherits_parent_override(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        child = root_scope.child({NAMES: MOCK_NAMES_CLIENT})
        grandchild = child.child({"unrelated": 1})

        assert resolver.resolve(grandchild, NAMES) is MOCK_NAMES_CLIENT

    def test_none_is_a_valid_concrete_override(self, resolver: Resolver, root_scope: Scope) -> None:
        child = root_scope.child({NAMES: None})

        assert resolver.resolve(child, NAMES) is None


class TestDerivedCapabilityPropagation:
    def test_overriding_base_propagates_to_derived_capability(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        child = root_scope.child({NAMES: MOCK_NAMES_CLIENT})

        client = resolver.resolve(child, GET_ALL_NAMES)

        assert client.get_all_names() == ["Mock"]

    def test_derived_capability_from_root_uses_live_base(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        root_scope.child({NAMES: MOCK_NAMES_CLIENT})

        assert resolver.resolve(root_scope, GET_ALL_NAMES).get_all_names() == ["All", "names"]

    def test_propagation_through_several_generations(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        child = root_scope.child({NAMES: MOCK_NAMES_CLIENT})
        great_grandchild = child.child({}).child({})

        assert resolver.resolve(great_grandchild, GET_ALL_NAMES).get_all_names() == ["Mock"]

    def test_propagation_through_two_levels_of_derivation(self) -> None:
        base = CapabilityKey[list[str]]("base")
        middle = CapabilityKey[list[str]]("middle")
        top = CapabilityKey[list[str]]("top")
        registry = CapabilityRegistry()
        registry.register(base, lambda scope: ["All", "names"])
        registry.register(middle, lambda scope: [*scope.resolve(base)])
        registry.register(top, lambda scope: [name.upper() for name in scope.resolve(middle)])

        child = Scope.root(registry).child({base: ["Mock"]})

        assert child.resolve(top) == ["MOCK"]

    def test_override_factory_receives_requesting_scope(self, root_scope: Scope) -> None:
        seen: list[Scope] = []

        def factory(scope: Scope) -> NamesClient:
            seen.append(scope)
            return MOCK_NAMES_CLIENT

        child = root_scope.child({NAMES: Factory(factory)})
        grandchild = child.child({})

        grandchild.resolve(NAMES)

        assert seen == [grandchild]

    def test_registry_factory_receives_requesting_scope(
        self,
        empty_registry: CapabilityRegistry,
    ) -> None:
        seen: list[Scope] = []
        empty_registry.register("value", lambda scope: seen.append(scope) or 1)
        child = Scope.root(empty_registry).child({})

        assert child.resolve("value") == 1
        assert seen == [child]

    def test_derived_factory_is_invoked_on_every_resolution(self, root_scope: Scope) -> None:
        first = root_scope.resolve(GET_ALL_NAMES)
        second = root_scope.resolve(GET_ALL_NAMES)

        assert first is not second


class TestDerivedCapabilityOverride:
    def test_direct_override_of_derived_capability_wins(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        child = root_scope.child({GET_ALL_NAMES: MOCK_GET_ALL_NAMES_CLIENT})

        assert resolver.resolve(child, GET_ALL_NAMES).get_all_names() == ["mock"]

    def test_direct_override_ignores_base_override(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        child = root_scope.child(
            {
                NAMES: NamesClient(get_all_names=lambda: ["ignored"]),
                GET_ALL_NAMES: MOCK_GET_ALL_NAMES_CLIENT,
            },
        )

        assert resolver.resolve(child, GET_ALL_NAMES).get_all_names() == ["mock"]

    def test_decorating_override_can_wrap_parent_implementation(self, root_scope: Scope) -> None:
        def shouting(scope: Scope) -> GetAllNamesClient:
            parent = scope.parent
            assert parent is not None
            inner = parent.resolve(GET_ALL_NAMES)
            return GetAllNamesClient(
                get_all_names=lambda: [name.upper() for name in inner.get_all_names()],
            )

        child = root_scope.child({GET_ALL_NAMES: Factory(shouting)})

        assert child.resolve(GET_ALL_NAMES).get_all_names() == ["ALL", "NAMES"]


class TestNonLeakage:
    def test_child_override_not_visible_from_sibling(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        root_scope.child({NAMES: MOCK_NAMES_CLIENT})
        sibling = root_scope.child({})

        assert resolver.resolve(sibling, GET_ALL_NAMES).get_all_names() == ["All", "names"]

    def test_grandchild_override_not_visible_from_child(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        child = root_scope.child({})
        child.child({NAMES: MOCK_NAMES_CLIENT})

        assert resolver.resolve(child, NAMES).get_all_names() == ["All", "names"]


class TestUnknownCapability:
    def test_unregistered_key_raises(self, resolver: Resolver, root_scope: Scope) -> None:
        with pytest.raises(CapwireUnknownCapabilityError) as exc_info:
            resolver.resolve(root_scope, "missing")

        assert exc_info.value.key == "missing"

    def test_key_only_overridden_in_child_is_unknown_at_root(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        child = root_scope.child({"extra": 1})

        assert resolver.resolve(child, "extra") == 1
        with pytest.raises(CapwireUnknownCapabilityError):
            resolver.resolve(root_scope, "extra")

    def test_derived_factory_missing_dependency_propagates(
        self,
        empty_registry: CapabilityRegistry,
    ) -> None:
        empty_registry.register("derived", lambda scope: scope.resolve("base"))
        root = Scope.root(empty_registry)

        with pytest.raises(CapwireUnknownCapabilityError) as exc_info:
            root.resolve("derived")

        assert exc_info.value.key == "base"

    def test_binding_owner_reports_nearest_scope(
        self,
        resolver: Resolver,
        root_scope: Scope,
    ) -> None:
        child = root_scope.child({NAMES: MOCK_NAMES_CLIENT})
        grandchild = child.child({})

        assert resolver.binding_owner(grandchild, NAMES) is child
        assert resolver.binding_owner(grandchild, GET_ALL_NAMES) is root_scope
        with pytest.raises(CapwireUnknownCapabilityError):
            resolver.binding_owner(grandchild, "missing")


class TestCycleDetection:
    def test_self_referencing_factory_raises(self, empty_registry: CapabilityRegistry) -> None:
        empty_registry.register("a", lambda scope: scope.resolve("a"))
        root = Scope.root(empty_registry)

        with pytest.raises(CapwireCyclicResolutionError) as exc_info:
            root.resolve("a")

        assert exc_info.value.key == "a"
        assert exc_info.value.path == ("a", "a")

    def test_transitive_cycle_raises_with_path(self, empty_registry: CapabilityRegistry) -> None:
        empty_registry.register("a", lambda scope: scope.resolve("b"))
        empty_registry.register("b", lambda scope: scope.resolve("c"))
        empty_registry.register("c", lambda scope: scope.resolve("a"))
        root = Scope.root(empty_registry)

        with pytest.raises(CapwireCyclicResolutionError) as exc_info:
            root.resolve("b")

        assert exc_info.value.path == ("b", "c", "a", "b")
        assert "'b' -> 'c' -> 'a' -> 'b'" in str(exc_info.value)

    def test_cycle_introduced_by_child_override(
        self,
        empty_registry: CapabilityRegistry,
    ) -> None:
        empty_registry.register("base", lambda scope: 1)
        empty_registry.register("derived", lambda scope: scope.resolve("base") + 1)
        root = Scope.root(empty_registry)
        child = root.child({"base": Factory(lambda scope: scope.resolve("derived"))})

        assert root.resolve("derived") == 2
        with pytest.raises(CapwireCyclicResolutionError) as exc_info:
            child.resolve("derived")

        assert exc_info.value.path == ("derived", "base", "derived")

    def test_self_reference_through_fresh_child_scope_raises(
        self,
        empty_registry: CapabilityRegistry,
    ) -> None:
        empty_registry.register("a", lambda scope: scope.child({}).resolve("a"))
        root = Scope.root(empty_registry)

        with pytest.raises(CapwireCyclicResolutionError) as exc_info:
            root.resolve("a")

        assert exc_info.value.path == ("a", "a")

    def test_override_resolving_itself_through_fresh_child_raises(self, root_scope: Scope) -> None:
        child = root_scope.child(
            {NAMES: Factory(lambda scope: scope.child({"unrelated": 1}).resolve(NAMES))},
        )

        with pytest.raises(CapwireCyclicResolutionError) as exc_info:
            child.resolve(NAMES)

        assert exc_info.value.path == (NAMES, NAMES)

    def test_same_key_from_child_that_rebinds_it_is_not_a_cycle(
        self,
        empty_registry: CapabilityRegistry,
    ) -> None:
        empty_registry.register("a", lambda scope: scope.child({"a": 1}).resolve("a") + 1)

        assert Scope.root(empty_registry).resolve("a") == 2

    def test_decorating_override_chain_is_not_a_cycle(self, root_scope: Scope) -> None:
        def suffixed(scope: Scope) -> NamesClient:
            parent = scope.parent
            assert parent is not None
            inner = parent.resolve(NAMES)
            return NamesClient(get_all_names=lambda: [*inner.get_all_names(), "!"])

        grandchild = root_scope.child({NAMES: Factory(suffixed)}).child({NAMES: Factory(suffixed)})

        assert grandchild.resolve(NAMES).get_all_names() == ["All", "names", "!", "!"]

    def test_state_is_cleared_after_cycle_error(self, empty_registry: CapabilityRegistry) -> None:
        calls: list[str] = []

        def flaky(scope: Scope) -> Any:
            calls.append("flaky")
            if len(calls) == 1:
                return scope.resolve("flaky")
            return "ok"

        empty_registry.register("flaky", flaky)
        root = Scope.root(empty_registry)

        with pytest.raises(CapwireCyclicResolutionError):
            root.resolve("flaky")

        assert root.resolve("flaky") == "ok"

    def test_resolving_same_key_twice_in_one_factory_is_not_a_cycle(
        self,
        empty_registry: CapabilityRegistry,
    ) -> None:
        empty_registry.register("leaf", lambda scope: 1)
        empty_registry.register("sum", lambda scope: scope.resolve("leaf") + scope.resolve("leaf"))

        assert Scope.root(empty_registry).resolve("sum") == 2

    def test_factory_errors_propagate_unchanged(self, empty_registry: CapabilityRegistry) -> None:
        def broken(scope: Scope) -> Any:
            msg = "boom"
            raise ValueError(msg)

        empty_registry.register("broken", broken)

        with pytest.raises(ValueError, match="boom"):
            Scope.root(empty_registry).resolve("broken")
