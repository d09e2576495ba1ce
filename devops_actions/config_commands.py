"""Configuration commands for the devops-actions CLI."""

from typing import Any

from cyclopts import App

from devops_actions.config import REQUIRED_KEYS, Config, get_config

config_app = App(name="config", help="Manage configuration")

SECRET_MARKERS = ("token", "secret")


def display_value(key: str, value: Any) -> str:
    """Mask secrets so they don't end up in CI logs."""
    if any(marker in key.lower() for marker in SECRET_MARKERS) and value:
        return "****" + str(value)[-4:] if len(str(value)) > 8 else "****"
    return str(value)


@config_app.command
def set(key: str, value: str, global_: bool = False) -> None:
    """Set a configuration setting.

    Args:
        key: Configuration key, e.g. github.organization
        value: Configuration value
        global_: If True, set in global config. If False, set in local config.
    """
    config = get_config(use_global=global_)
    config.set(key, value)
    scope = "global" if global_ else "local"
    print(f"Set {key} = {display_value(key, value)} ({scope})")


@config_app.command
def unset(key: str, global_: bool = False) -> None:
    """Unset a configuration setting."""
    config = get_config(use_global=global_)
    config.unset(key)
    scope = "global" if global_ else "local"
    print(f"Unset {key} ({scope})")


@config_app.command
def get(key: str, global_: bool = False) -> None:
    """Get the value of a configuration setting, including environment overrides."""
    config = get_config(use_global=global_)
    value = config.get(key)
    if value is None:
        print(f"{key} is not set (env {Config.env_name(key)})")
    else:
        print(f"{key} = {display_value(key, value)}")


@config_app.command(name="list")
def list_config(global_: bool = False) -> None:
    """List all configuration settings and any required keys that are missing."""
    config = get_config(use_global=global_)
    settings = config.list()

    if settings:
        scope = "Global" if global_ else "Configuration"
        print(f"{scope} settings:\n")
        for key, value in settings.items():
            print(f"{key} = {display_value(key, value)}")
    else:
        scope = "global" if global_ else "local"
        print(f"No {scope} configuration settings")

    missing = [key for key in REQUIRED_KEYS if not config.get(key)]
    if missing:
        print("\nMissing required settings:")
        for key in missing:
            print(f"  {key} (or env {Config.env_name(key)})")
