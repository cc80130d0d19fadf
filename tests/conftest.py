"""Shared pytest fixtures and configuration for the holepuncher test suite.

Guidelines
----------
* No network access in any test: httpx goes through ``MockTransport``.
* Provider tests use a mocked RPC client.
* Filesystem access is confined to ``tmp_path``.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from holepuncher.config import (
    ClientProtoSettings,
    CommonUserSettings,
    ObfsproxySettings,
    ProviderCredentials,
    RegularUserSettings,
    RootUserSettings,
    RuntimeSettings,
    Settings,
    WireGuardSettings,
)

CLIENT_KEY_HEX = "11" * 32
PEER_KEY_HEX = "22" * 32

SAMPLE_CONFIG = """\
[runtime]
runtime_dir = "{runtime_dir}"
server_address = "https://hp.example.net"
provider = "linode"

[client_proto]
private_key = "{private_key}"
peer_key = "{peer_key}"

[provider_linode]
access_token = "token-123"
region = "eu-central"
plan = "g6-nanode-1"

[user_common]
ssh_keys = ["ssh-ed25519 AAAA user@host"]

[user_root]
password = "rootpw"

[user_unpriv]
username = "alice"
password = "alicepw"

[wireguard]
enable = true
server_key = "wg-server"
peer_keys = ["wg-peer-1"]
port = 51820

[obfsproxy_ipv4]
enable = true
secret = "obfs4-secret"
port = 4444

[obfsproxy_ipv6]
enable = false
"""


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings overrides from the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("HOLEPUNCHER_"):
            monkeypatch.delenv(key)


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """Factory for fully populated, valid settings rooted in ``tmp_path``."""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "runtime": RuntimeSettings(
                runtime_dir=str(tmp_path),
                server_address="https://hp.example.net",
                provider="linode",
            ),
            "client_proto": ClientProtoSettings(
                private_key=CLIENT_KEY_HEX,
                peer_key=PEER_KEY_HEX,
            ),
            "provider_linode": ProviderCredentials(
                access_token="token-123",
                region="eu-central",
                plan="g6-nanode-1",
            ),
            "user_common": CommonUserSettings(ssh_keys=["ssh-ed25519 AAAA user@host"]),
            "user_root": RootUserSettings(password="rootpw"),
            "user_unpriv": RegularUserSettings(username="alice", password="alicepw"),
            "wireguard": WireGuardSettings(
                enable=True,
                server_key="wg-server",
                peer_keys=["wg-peer-1"],
                port=51820,
            ),
            "obfsproxy_ipv4": ObfsproxySettings(enable=True, secret="obfs4-secret", port=4444),
            "obfsproxy_ipv6": ObfsproxySettings(),
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A valid TOML config file whose runtime dir is ``tmp_path``."""
    path = tmp_path / "holepuncher.toml"
    path.write_text(
        SAMPLE_CONFIG.format(
            runtime_dir=tmp_path.as_posix(),
            private_key=CLIENT_KEY_HEX,
            peer_key=PEER_KEY_HEX,
        ),
        encoding="utf-8",
    )
    return path
