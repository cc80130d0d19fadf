"""Command handlers for the ``holepuncher`` CLI.

Each handler loads settings, runs exactly one provider operation (or a
session lookup), updates the session record where the operation changes
the tunnel lifecycle, and returns an exit code.  Errors propagate to the
boundary in :mod:`holepuncher.cli.app`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from holepuncher.cli import exit_codes
from holepuncher.cli.console import emit_json, emit_line
from holepuncher.config import Settings, load_settings
from holepuncher.core.linode_provider import LinodeProvider
from holepuncher.core.models import SessionRecord, TunnelLaunch
from holepuncher.core.protocols import CloudProvider
from holepuncher.core.provider import new_cloud_provider
from holepuncher.infra.session_store import clear_session, restore_session, save_session
from holepuncher.infra.transport import HolepuncherClient
from holepuncher.utils.logging import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider construction
# ---------------------------------------------------------------------------

@contextmanager
def open_provider(settings: Settings) -> Iterator[CloudProvider]:
    """Yield the configured provider; the HTTP client is closed on exit."""
    with HolepuncherClient.from_settings(settings) as client:
        yield new_cloud_provider(settings, client)


@contextmanager
def open_linode_provider(settings: Settings) -> Iterator[LinodeProvider]:
    with HolepuncherClient.from_settings(settings) as client:
        yield LinodeProvider(client, settings)


def _log_launch(message: str, launch: TunnelLaunch) -> None:
    instance = launch.instance
    logger.info(
        message,
        provider=str(instance.provider),
        label=instance.label,
        ipv4=list(instance.ipv4),
        ipv6=list(instance.ipv6),
    )


# ---------------------------------------------------------------------------
# Lifecycle commands
# ---------------------------------------------------------------------------

def handle_create(config_path: str) -> int:
    settings = load_settings(config_path)
    with open_provider(settings) as provider:
        launch = provider.create_tunnel()
    _log_launch("Tunnel instance was successfully created", launch)

    path = save_session(SessionRecord.from_launch(launch), settings.runtime.runtime_dir)
    logger.debug("Session saved", path=str(path))
    return exit_codes.SUCCESS


def handle_destroy(config_path: str) -> int:
    settings = load_settings(config_path)
    with open_provider(settings) as provider:
        provider.destroy_tunnel()
    logger.info("Tunnel instance was successfully deleted")

    clear_session(settings.runtime.runtime_dir)
    return exit_codes.SUCCESS


def handle_info(config_path: str) -> int:
    settings = load_settings(config_path)
    with open_provider(settings) as provider:
        instance = provider.tunnel_status()
    emit_json(instance)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Linode-specific commands
# ---------------------------------------------------------------------------

LINODE_LISTINGS: dict[str, str] = {
    "instances": "list_instances",
    "plans": "list_plans",
    "regions": "list_regions",
    "images": "list_images",
    "stackscripts": "list_stackscripts",
}
"""Listing action name to the :class:`LinodeProvider` method serving it."""


def handle_linode(config_path: str, action: str) -> int:
    settings = load_settings(config_path)

    if action == "rebuild":
        with open_linode_provider(settings) as provider:
            launch = provider.rebuild_tunnel()
        _log_launch("Tunnel instance was successfully rebuilt", launch)
        save_session(SessionRecord.from_launch(launch), settings.runtime.runtime_dir)
        return exit_codes.SUCCESS

    method_name = LINODE_LISTINGS[action]
    with open_linode_provider(settings) as provider:
        result = getattr(provider, method_name)()
    emit_json(result)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Session variables
# ---------------------------------------------------------------------------

def _flag(value: bool) -> str:
    return "true" if value else "false"


def _lifetime(record: SessionRecord) -> str:
    return str(datetime.now(timezone.utc) - record.instance_info.created_at)


SESSION_VARIABLES: dict[str, tuple[str, Callable[[SessionRecord], str]]] = {
    "ipv4": (
        "list of ipv4 addresses separated by newline (LF)",
        lambda r: "\n".join(r.instance_info.ipv4),
    ),
    "ipv6": (
        "list of ipv6 addresses separated by newline (LF)",
        lambda r: "\n".join(r.instance_info.ipv6),
    ),
    "created": ("creation date", lambda r: r.instance_info.created_at.isoformat()),
    "duration": ("tunnel lifetime since creation", _lifetime),
    "wg.enabled": (
        "wireguard state (true/false)",
        lambda r: _flag(r.creation_params.wireguard_enabled),
    ),
    "wg.server_key": ("wireguard server key", lambda r: r.creation_params.wireguard_server_key),
    "wg.peer_keys": (
        "list of wireguard peer keys",
        lambda r: "\n".join(r.creation_params.wireguard_peer_keys),
    ),
    "wg.port": ("wireguard port number", lambda r: str(r.creation_params.wireguard_port)),
    "obfs4.enabled": (
        "obfsproxy ipv4 state (true/false)",
        lambda r: _flag(r.creation_params.obfsproxy4_enabled),
    ),
    "obfs4.secret": ("obfsproxy ipv4 secret", lambda r: r.creation_params.obfsproxy4_secret),
    "obfs4.port": ("obfsproxy ipv4 port number", lambda r: str(r.creation_params.obfsproxy4_port)),
    "obfs6.enabled": (
        "obfsproxy ipv6 state (true/false)",
        lambda r: _flag(r.creation_params.obfsproxy6_enabled),
    ),
    "obfs6.secret": ("obfsproxy ipv6 secret", lambda r: r.creation_params.obfsproxy6_secret),
    "obfs6.port": ("obfsproxy ipv6 port number", lambda r: str(r.creation_params.obfsproxy6_port)),
}


def handle_var(config_path: str, name: str) -> int:
    """Print one value of the saved session to stdout."""
    settings = load_settings(config_path)
    record = restore_session(settings.runtime.runtime_dir)
    _description, render = SESSION_VARIABLES[name]
    emit_line(render(record))
    return exit_codes.SUCCESS
