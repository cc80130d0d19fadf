"""Provider selection and provider-independent helpers."""

from __future__ import annotations

from holepuncher.config import Settings
from holepuncher.core.models import ProviderType, TunnelCreationParams
from holepuncher.core.protocols import CloudProvider, RpcClient
from holepuncher.exceptions import UnsupportedProviderError


def creation_params_from_settings(settings: Settings) -> TunnelCreationParams:
    """Capture the circumvention-method settings used for a tunnel.

    Only enabled methods contribute their secret, keys, and port.
    """
    wg = settings.wireguard
    obfs4 = settings.obfsproxy_ipv4
    obfs6 = settings.obfsproxy_ipv6
    return TunnelCreationParams(
        wireguard_enabled=wg.enable,
        wireguard_server_key=wg.server_key if wg.enable else "",
        wireguard_peer_keys=tuple(wg.peer_keys) if wg.enable else (),
        wireguard_port=wg.port if wg.enable else 0,
        obfsproxy4_enabled=obfs4.enable,
        obfsproxy4_secret=obfs4.secret if obfs4.enable else "",
        obfsproxy4_port=obfs4.port if obfs4.enable else 0,
        obfsproxy6_enabled=obfs6.enable,
        obfsproxy6_secret=obfs6.secret if obfs6.enable else "",
        obfsproxy6_port=obfs6.port if obfs6.enable else 0,
    )


def new_cloud_provider(settings: Settings, client: RpcClient) -> CloudProvider:
    """Build the provider named by ``runtime.provider``.

    Raises
    ------
    UnsupportedProviderError
        For any provider other than Linode.
    ConfigurationError
        When the provider rejects the settings.
    """
    from holepuncher.core.linode_provider import LinodeProvider

    name = settings.runtime.provider
    if name == ProviderType.LINODE:
        return LinodeProvider(client, settings)
    raise UnsupportedProviderError(
        f"Provider is not supported: {name or '<empty>'}",
        hint=f"Set runtime.provider to '{ProviderType.LINODE}'.",
    )
