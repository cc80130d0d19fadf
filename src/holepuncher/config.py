"""Settings for holepuncher.

Settings come from a TOML file whose sections mirror the models below.
Any value may be overridden from the environment with
``HOLEPUNCHER_<SECTION>__<KEY>`` (e.g.
``HOLEPUNCHER_PROVIDER_LINODE__ACCESS_TOKEN``), which keeps secrets out
of the file.

Loading performs path substitution in ``runtime.runtime_dir`` and picks
random ports for enabled services that leave ``port`` at 0.  Semantic
checks live in :func:`validate_general_settings` and run when a provider
is constructed, so commands that only read the session (``var``) work
with a partial file.
"""

from __future__ import annotations

import os
import secrets
import sys
import tomllib
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from holepuncher.exceptions import ConfigurationError

CONFIG_ENV_VAR = "HOLEPUNCHER_CONFIG"
"""Environment variable consulted when ``--config`` is not given."""

_PORT_BASE = 10000
_PORT_SPAN = 54000


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

class RuntimeSettings(BaseModel):
    runtime_dir: str = ""
    server_address: str = ""
    provider: str = ""


class ClientProtoSettings(BaseModel):
    private_key: str = ""
    """Hex-encoded local private key."""

    peer_key: str = ""
    """Hex-encoded public key of the server."""


class ProviderCredentials(BaseModel):
    access_token: str = ""
    region: str = ""
    plan: str = ""


class CommonUserSettings(BaseModel):
    ssh_keys: list[str] = Field(default_factory=list)


class RootUserSettings(BaseModel):
    password: str = ""


class RegularUserSettings(BaseModel):
    username: str = ""
    password: str = ""


class WireGuardSettings(BaseModel):
    enable: bool = False
    server_key: str = ""
    peer_keys: list[str] = Field(default_factory=list)
    port: int = 0


class ObfsproxySettings(BaseModel):
    enable: bool = False
    secret: str = ""
    port: int = 0


class Settings(BaseSettings):
    """Complete program settings."""

    model_config = SettingsConfigDict(
        env_prefix="HOLEPUNCHER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    client_proto: ClientProtoSettings = Field(default_factory=ClientProtoSettings)
    provider_linode: ProviderCredentials = Field(default_factory=ProviderCredentials)
    provider_digitalocean: ProviderCredentials = Field(default_factory=ProviderCredentials)
    user_common: CommonUserSettings = Field(default_factory=CommonUserSettings)
    user_root: RootUserSettings = Field(default_factory=RootUserSettings)
    user_unpriv: RegularUserSettings = Field(default_factory=RegularUserSettings)
    wireguard: WireGuardSettings = Field(default_factory=WireGuardSettings)
    obfsproxy_ipv4: ObfsproxySettings = Field(default_factory=ObfsproxySettings)
    obfsproxy_ipv6: ObfsproxySettings = Field(default_factory=ObfsproxySettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over the values read from the TOML file.
        return env_settings, init_settings


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def default_config_path() -> str:
    return os.environ.get(CONFIG_ENV_VAR, "")


def load_settings(path: str | Path | None) -> Settings:
    """Read, parse, and post-process the TOML settings file at *path*.

    Raises
    ------
    ConfigurationError
        If *path* is empty, the file cannot be read or parsed, or its
        content does not match the settings schema.
    """
    if not path:
        raise ConfigurationError(
            "Config path is empty or missing.",
            hint=f"Pass --config or set {CONFIG_ENV_VAR}.",
        )

    config_path = Path(path)
    try:
        with config_path.open("rb") as fh:
            data: dict[str, Any] = tomllib.load(fh)
    except OSError as exc:
        raise ConfigurationError(
            f"Error reading config file {config_path}: {exc.strerror or exc}",
        ) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(
            f"Malformed config file {config_path}: {exc}",
        ) from exc

    try:
        settings = Settings(**data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid settings in {config_path}: {exc}",
        ) from exc

    settings.runtime.runtime_dir = substitute_runtime_dir(settings.runtime.runtime_dir)
    _assign_random_ports(settings)
    return settings


def substitute_runtime_dir(value: str) -> str:
    """Expand ``${HOME}`` and ``${EXE}`` in a runtime directory path."""
    if "${HOME}" in value:
        value = value.replace("${HOME}", str(Path.home()))
    if "${EXE}" in value:
        value = value.replace("${EXE}", str(Path(sys.argv[0]).resolve().parent))
    if "${AUTO}" in value:
        raise ConfigurationError(
            "runtime.runtime_dir: ${AUTO} substitution is not supported.",
        )
    return value


def random_port() -> int:
    """Return a random port in ``[10000, 64000)``."""
    return _PORT_BASE + secrets.randbelow(_PORT_SPAN)


def _assign_random_ports(settings: Settings) -> None:
    if settings.wireguard.enable and settings.wireguard.port == 0:
        settings.wireguard.port = random_port()
    if settings.obfsproxy_ipv4.enable and settings.obfsproxy_ipv4.port == 0:
        settings.obfsproxy_ipv4.port = random_port()
    if settings.obfsproxy_ipv6.enable and settings.obfsproxy_ipv6.port == 0:
        settings.obfsproxy_ipv6.port = random_port()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_general_settings(settings: Settings) -> None:
    """Check provider-independent settings.

    Raises
    ------
    ConfigurationError
        On the first invalid or missing value.
    """
    _validate_server_address(settings.runtime.server_address)
    if not settings.runtime.provider:
        raise ConfigurationError("runtime: provider is empty or missing.")
    if not settings.runtime.runtime_dir:
        raise ConfigurationError("runtime: runtime dir is empty or missing.")

    wg = settings.wireguard
    if wg.enable:
        if not wg.server_key:
            raise ConfigurationError("wireguard: server key is empty or missing.")
        if not wg.peer_keys:
            raise ConfigurationError("wireguard: at least 1 peer key is required.")
        _validate_port("wireguard", wg.port)

    for name, section in (
        ("obfsproxy ipv4", settings.obfsproxy_ipv4),
        ("obfsproxy ipv6", settings.obfsproxy_ipv6),
    ):
        if section.enable:
            if not section.secret:
                raise ConfigurationError(f"{name}: missing secret.")
            _validate_port(name, section.port)


def _validate_server_address(address: str) -> None:
    if not address:
        raise ConfigurationError("runtime: server address is empty or missing.")
    try:
        url = httpx.URL(address)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"runtime: malformed server address: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(
            f"runtime: malformed server address: {address}",
            hint="Use an absolute http:// or https:// URL.",
        )


def _validate_port(section: str, port: int) -> None:
    if port <= 0 or port > 65535:
        raise ConfigurationError(f"{section}: missing or invalid port number.")
