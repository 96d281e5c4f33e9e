"""Shared pytest fixtures for capwire tests."""

from collections.abc import Iterator

import pytest

from capwire import CapabilityRegistry, Scope, scope_context
from tests.names_clients import GET_ALL_NAMES, NAMES, GetAllNamesClient, NamesClient


@pytest.fixture()
def registry() -> CapabilityRegistry:
    """Open registry with the names clients registered."""
    registry = CapabilityRegistry()
    registry.register(NAMES, NamesClient.live_factory, mock=NamesClient.mock_factory)
    registry.register(
        GET_ALL_NAMES,
        GetAllNamesClient.live_factory,
        mock=GetAllNamesClient.mock_factory,
    )
    return registry


@pytest.fixture()
def empty_registry() -> CapabilityRegistry:
    """Open registry without registrations."""
    return CapabilityRegistry()


@pytest.fixture()
def root_scope(registry: CapabilityRegistry) -> Scope:
    """Live root scope over the names registry."""
    return Scope.root(registry)


@pytest.fixture(autouse=True)
def _reset_scope_context() -> Iterator[None]:
    """Keep the module-level scope_context fallback isolated between tests."""
    scope_context.set_root(None)
    yield
    scope_context.set_root(None)
