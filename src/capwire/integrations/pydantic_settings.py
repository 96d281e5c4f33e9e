from __future__ import annotations

import functools
import inspect
from typing import Any

from pydantic_settings import BaseSettings

from capwire._internal.keys import CapabilityId
from capwire._internal.registry import CapabilityRegistry
from capwire.exceptions import CapwireInvalidOverrideError


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether ``candidate`` is a ``pydantic_settings.BaseSettings`` subclass.

    Args:
        candidate: Object to test.

    """
    return inspect.isclass(candidate) and issubclass(candidate, BaseSettings)


def register_settings(
    registry: CapabilityRegistry,
    key: CapabilityId,
    settings_cls: type[BaseSettings],
    *,
    mock: BaseSettings | None = None,
) -> None:
    """Expose a settings model as a capability.

    The live factory instantiates ``settings_cls`` once, on first resolution,
    so the environment is read lazily and only once per registry. ``mock``
    is returned as is by root scopes built in ``ResolutionMode.MOCK``.

    Raises:
        CapwireInvalidOverrideError: If ``settings_cls`` is not a settings model.

    """
    if not is_pydantic_settings_subclass(settings_cls):
        msg = f"{settings_cls!r} is not a pydantic_settings.BaseSettings subclass."
        raise CapwireInvalidOverrideError(msg)

    @functools.cache
    def load() -> BaseSettings:
        return settings_cls()

    def live(_scope: Any) -> BaseSettings:
        return load()

    def mock_factory(_scope: Any) -> BaseSettings | None:
        return mock

    registry.register(key, live, mock=mock_factory if mock is not None else None)


__all__ = ["is_pydantic_settings_subclass", "register_settings"]
