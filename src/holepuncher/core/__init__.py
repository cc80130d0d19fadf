"""Core / service layer — envelopes, domain models, and result mapping.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O; the transport is injected.
* No imports from ``cli`` or ``infra``.
* No logging of errors: failures carry structured data to the CLI boundary.
"""

from holepuncher.core.envelope import Reply, Request
from holepuncher.core.linode_provider import LinodeProvider
from holepuncher.core.models import (
    ProviderType,
    SessionRecord,
    TunnelCreationParams,
    TunnelInstance,
    TunnelLaunch,
)
from holepuncher.core.protocols import CloudProvider, MessageCodec, RpcClient
from holepuncher.core.provider import creation_params_from_settings, new_cloud_provider

__all__: list[str] = [
    "CloudProvider",
    "LinodeProvider",
    "MessageCodec",
    "ProviderType",
    "Reply",
    "Request",
    "RpcClient",
    "SessionRecord",
    "TunnelCreationParams",
    "TunnelInstance",
    "TunnelLaunch",
    "creation_params_from_settings",
    "new_cloud_provider",
]
