from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

import pytest

from capwire._internal.bindings import ResolutionMode
from capwire._internal.override_builder import OverrideBuilder
from capwire._internal.registry import CapabilityRegistry
from capwire._internal.scope import Scope
from capwire._internal.scope_context import scope_context

_OVERRIDES_MARKER = "capwire_overrides"
_OVERRIDE_BUILDER = OverrideBuilder()


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``capwire_overrides`` marker."""
    config.addinivalue_line(
        "markers",
        f"{_OVERRIDES_MARKER}(overrides, *, mode=ResolutionMode.LIVE): capability overrides "
        "installed on the capwire_scope fixture; mode selects the root scope factories.",
    )


@pytest.fixture()
def capwire_registry() -> CapabilityRegistry:
    """Fixture hook for the registry backing plugin-managed scopes.

    Users must override this fixture in their own test suite and return a
    registry with every default registered.

    """
    msg = (
        "The capwire pytest plugin requires overriding the 'capwire_registry' fixture in your "
        "test suite. Define @pytest.fixture() def capwire_registry() -> CapabilityRegistry: ... "
        "and return a populated registry."
    )
    raise RuntimeError(msg)


@pytest.fixture()
def capwire_root_scope(
    request: pytest.FixtureRequest,
    capwire_registry: CapabilityRegistry,
) -> Scope:
    """Root scope over ``capwire_registry``, in the mode requested by the marker."""
    _, mode = _marker_arguments(request)
    return Scope.root(capwire_registry, mode=mode)


@pytest.fixture()
def capwire_scope(
    request: pytest.FixtureRequest,
    capwire_root_scope: Scope,
) -> Iterator[Scope]:
    """Child of the root scope carrying the marker overrides, bound for the test.

    While the test runs, ``scope_context`` and ``Dependency`` attributes
    resolve from this scope.

    """
    overrides, _ = _marker_arguments(request)
    scope = _OVERRIDE_BUILDER.derive(capwire_root_scope, overrides)
    with scope_context.use(scope):
        yield scope


def _marker_arguments(
    request: pytest.FixtureRequest,
) -> tuple[Mapping[Any, Any], ResolutionMode]:
    marker = request.node.get_closest_marker(_OVERRIDES_MARKER)
    if marker is None:
        return {}, ResolutionMode.LIVE
    overrides = marker.args[0] if marker.args else marker.kwargs.get("overrides", {})
    mode = marker.kwargs.get("mode", ResolutionMode.LIVE)
    return overrides, ResolutionMode(mode)
