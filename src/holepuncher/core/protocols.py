"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends only on these protocols, never on concrete
implementations.
"""

from __future__ import annotations

from typing import Protocol

from holepuncher.core.envelope import Reply, Request
from holepuncher.core.models import TunnelInstance, TunnelLaunch


class MessageCodec(Protocol):
    """Contract for the encrypt/encode collaborator.

    Implementations are parameterized by a local private key and a peer
    public key at construction time.
    """

    def encode(self, request: Request) -> bytes:
        """Turn *request* into the opaque bytes sent to the server."""
        ...  # pragma: no cover

    def decode(self, data: bytes) -> Reply:
        """Turn opaque bytes received from the server into a reply.

        Raises
        ------
        CodecError
            When *data* is not a valid encoded reply.
        """
        ...  # pragma: no cover


class RpcClient(Protocol):
    """Contract for the request/reply transport."""

    def do_request(self, request: Request) -> Reply:
        """Send *request* and return the decoded reply envelope.

        Raises
        ------
        TransportError
            On network failure or a hard HTTP status.
        DecodeError
            When the reply body is not a valid envelope.
        """
        ...  # pragma: no cover


class CloudProvider(Protocol):
    """Lifecycle operations every provider offers to the CLI."""

    def create_tunnel(self) -> TunnelLaunch:
        ...  # pragma: no cover

    def tunnel_status(self) -> TunnelInstance:
        ...  # pragma: no cover

    def destroy_tunnel(self) -> None:
        ...  # pragma: no cover
