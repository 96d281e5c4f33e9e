"""Pydantic settings as a capability.

``register_settings`` loads the settings model once, on first resolution.
A child scope can still swap in a hand-built settings object.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from capwire import CapabilityKey, CapabilityRegistry, Scope
from capwire.integrations.pydantic_settings import register_settings


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CAPWIRE_EXAMPLE_")

    value: str = "settings"


SETTINGS = CapabilityKey[AppSettings]("app_settings")


def main() -> None:
    registry = CapabilityRegistry()
    register_settings(registry, SETTINGS, AppSettings)
    root = Scope.root(registry)

    first = root.resolve(SETTINGS)
    second = root.resolve(SETTINGS)
    child = root.child({SETTINGS: AppSettings(value="override")})

    print(f"settings_loaded_once={first is second}")  # => settings_loaded_once=True
    print(f"settings_value={first.value}")  # => settings_value=settings
    print(f"child_value={child.resolve(SETTINGS).value}")  # => child_value=override


if __name__ == "__main__":
    main()
