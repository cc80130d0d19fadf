"""PyNaCl backed implementation of :class:`~holepuncher.core.protocols.MessageCodec`.

Messages are rendered as JSON and sealed with a Curve25519 box built
from the local private key and the peer's public key.  The nonce is
prepended to the ciphertext, so each payload is self-contained.

This module is the **only** place in the codebase that imports ``nacl``.
"""

from __future__ import annotations

from typing import TypeVar

from nacl.exceptions import CryptoError
from nacl.public import Box, PrivateKey, PublicKey
from pydantic import BaseModel, ValidationError

from holepuncher.core.envelope import Reply, Request
from holepuncher.exceptions import CodecError, ConfigurationError

MessageT = TypeVar("MessageT", bound=BaseModel)


class BoxCodec:
    """Authenticated-encryption codec for envelope messages.

    Usage::

        codec = BoxCodec(bytes.fromhex(private_hex), bytes.fromhex(peer_hex))
        payload = codec.encode(request)
        reply = codec.decode(body)

    The same class serves the server side of a channel: ``seal`` and
    ``open`` work with any pydantic message type.
    """

    def __init__(self, private_key: bytes, peer_key: bytes) -> None:
        try:
            self._box = Box(PrivateKey(private_key), PublicKey(peer_key))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Invalid codec key material: {exc}",
                hint="Keys must be 32 bytes (64 hex characters).",
            ) from exc

    # ------------------------------------------------------------------
    # Generic message sealing
    # ------------------------------------------------------------------

    def seal(self, message: BaseModel) -> bytes:
        plaintext = message.model_dump_json(by_alias=True).encode("utf-8")
        return bytes(self._box.encrypt(plaintext))

    def open(self, data: bytes, model: type[MessageT]) -> MessageT:
        """Decrypt *data* and validate it as *model*.

        Raises
        ------
        CodecError
            If decryption or validation fails.
        """
        try:
            plaintext = self._box.decrypt(data)
        except (CryptoError, ValueError) as exc:
            raise CodecError(f"Unable to decrypt payload: {exc}") from exc
        try:
            return model.model_validate_json(plaintext)
        except ValidationError as exc:
            raise CodecError(f"Malformed {model.__name__} payload: {exc}") from exc

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def encode(self, request: Request) -> bytes:
        return self.seal(request)

    def decode(self, data: bytes) -> Reply:
        return self.open(data, Reply)
