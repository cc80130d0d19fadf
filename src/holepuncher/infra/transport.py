"""httpx backed implementation of :class:`~holepuncher.core.protocols.RpcClient`.

A request envelope is encoded by the codec, base64-encoded with the
URL-safe alphabet (no padding) and sent as the last path segment of
``<server>/proto/``.  The reply is classified by status code:

* ``200``–``299`` and :data:`SOFT_ERROR_STATUS`: the body is an encoded
  reply envelope (the soft-error status promises an error payload inside).
* anything else: the body is plain text describing a failure.

All httpx exceptions are caught here and re-raised as
:class:`~holepuncher.exceptions.TransportError`.
"""

from __future__ import annotations

import base64
from collections.abc import Callable
from types import TracebackType

import httpx

from holepuncher.config import Settings
from holepuncher.core.envelope import Reply, Request
from holepuncher.core.protocols import MessageCodec
from holepuncher.exceptions import CodecError, ConfigurationError, DecodeError, TransportError
from holepuncher.infra.codec import BoxCodec
from holepuncher.utils.logging import get_logger

logger = get_logger(__name__)

ENDPOINT_PATH = "proto"

SOFT_ERROR_STATUS = 418
"""Non-2xx status whose body is still a reply envelope carrying an error."""

DEFAULT_TIMEOUT = 150.0
"""Seconds; tunnel creation on the server side can take minutes."""

CodecFactory = Callable[[bytes, bytes], MessageCodec]


class HolepuncherClient:
    """Stateless request/reply client for the holepuncher server.

    Parameters
    ----------
    server_address:
        Base URL of the server, with or without a trailing slash.
    private_key, peer_key:
        Hex-encoded key material passed to *codec_factory*.
    codec_factory:
        Builds the codec from the decoded keys.  Called once.
    http_client:
        Optional pre-configured :class:`httpx.Client`.  When omitted a
        client with *timeout* is created and owned by this instance.
    timeout:
        Per-request timeout in seconds.

    Raises
    ------
    ConfigurationError
        If a key is empty or not valid hex.
    """

    def __init__(
        self,
        server_address: str,
        private_key: str,
        peer_key: str,
        *,
        codec_factory: CodecFactory = BoxCodec,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        raw_private = _decode_key(private_key, "client_proto.private_key")
        raw_peer = _decode_key(peer_key, "client_proto.peer_key")

        self._server_address = server_address
        self._codec: MessageCodec = codec_factory(raw_private, raw_peer)
        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        codec_factory: CodecFactory = BoxCodec,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> HolepuncherClient:
        return cls(
            settings.runtime.server_address,
            settings.client_proto.private_key,
            settings.client_proto.peer_key,
            codec_factory=codec_factory,
            http_client=http_client,
            timeout=timeout,
        )

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> HolepuncherClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def build_url(self, payload: bytes) -> str:
        """Return the request URL carrying *payload*."""
        encoded = base64.urlsafe_b64encode(payload).rstrip(b"=").decode("ascii")
        prefix = self._server_address
        if not prefix.endswith("/"):
            prefix += "/"
        return f"{prefix}{ENDPOINT_PATH}/{encoded}"

    def do_request(self, request: Request) -> Reply:
        """Send *request* and return the decoded reply envelope.

        Raises
        ------
        TransportError
            On network failure or a status outside 2xx and the soft-error
            status.
        DecodeError
            When a body expected to hold an envelope cannot be decoded.
        """
        rpc = request.rpc_name
        payload = self._codec.encode(request)
        url = self.build_url(payload)

        logger.debug("Sending RPC", rpc=rpc, payload_bytes=len(payload))
        try:
            response = self._http.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"I/O error during RPC {rpc}: {exc}",
                hint="Check runtime.server_address and your network connection.",
            ) from exc

        status = response.status_code
        logger.debug("RPC response received", rpc=rpc, status=status)

        if not (200 <= status <= 299 or status == SOFT_ERROR_STATUS):
            body = response.text
            raise TransportError(
                f"RPC {rpc} failed with HTTP {status}: {body}",
                status_code=status,
                body=body,
            )

        try:
            return self._codec.decode(response.content)
        except CodecError as exc:
            raise DecodeError(
                f"RPC {rpc} return value could not be decoded: {exc}",
                hint="Client and server keys or versions may not match.",
            ) from exc


def _decode_key(value: str, name: str) -> bytes:
    if not value:
        raise ConfigurationError(f"{name} is empty or missing.")
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name}: invalid key hex data.") from exc
