"""Temporal client construction."""
import os
import pathlib
import platform

from temporalio.client import Client
from temporalio.envconfig import ClientConfig

from minisweeper import config

# Per-OS location of temporal.toml, relative to the base directory
_CONFIG_DIRS = {
    "Darwin": lambda: pathlib.Path.home() / "Library/Application Support",
    "Windows": lambda: _required_env("AppData"),
}


async def get_temporal_client() -> Client:
    """Connect using the named profile when one is configured, else address/namespace."""
    profile_file = get_config_file_path()
    if config.TEMPORAL_PROFILE and profile_file.is_file():
        connect_config = ClientConfig.load_client_connect_config(
            profile=config.TEMPORAL_PROFILE,
            config_file=str(profile_file),
        )
        return await Client.connect(**connect_config)
    return await Client.connect(config.TEMPORAL_ADDRESS, namespace=config.TEMPORAL_NAMESPACE)


def get_config_file_path() -> pathlib.Path:
    base = _CONFIG_DIRS.get(platform.system(), _xdg_config_home)()
    return base / "temporalio" / "temporal.toml"


def _xdg_config_home() -> pathlib.Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    return pathlib.Path(xdg) if xdg else pathlib.Path.home() / ".config"


def _required_env(name: str) -> pathlib.Path:
    value = os.getenv(name)
    if value is None:
        raise RuntimeError(f"{name} environment variable not set")
    return pathlib.Path(value)
