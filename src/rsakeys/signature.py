"""Detached RSASSA-PKCS1-v1_5 / SHA-256 signatures.

A signature is opaque bytes until verified: it carries no reference to the key or message it claims to attest, both
have to be supplied at verification time.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
import binascii
import logging
import typing

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from rsakeys.errors import InvalidPemFormat

if typing.TYPE_CHECKING:
    from rsakeys.keys import PublicKey

logger = logging.getLogger(__name__)


class Signature:
    """Raw signature bytes, as produced by `PrivateKey.sign`.

    Attributes:
        raw: The signature. Not validated in any way.
    """

    def __init__(self, raw: bytes) -> None:
        self._raw = bytes(raw)

    @property
    def raw(self) -> bytes:
        return self._raw

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Signature):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash((Signature, self._raw))

    def __repr__(self) -> str:
        return f"Signature({self.to_base64()!r})"

    def __str__(self) -> str:
        return self.to_base64()

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Signature":
        return cls(raw)

    @classmethod
    def from_base64(cls, data: bytes | str) -> "Signature":
        """Reads a signature from its standard base64 form.

        Raises:
            InvalidPemFormat: If `data` is not valid base64.
        """
        if isinstance(data, str):
            data = data.encode("ascii", errors="replace")
        try:
            return cls(base64.b64decode(data.strip(), validate=True))
        except binascii.Error as err:
            raise InvalidPemFormat("Invalid signature. Could not read base64 encoded bytes.") from err

    def to_base64(self) -> str:
        return base64.b64encode(self._raw).decode("ascii")

    def verify(self, public_key: "PublicKey", message: bytes) -> bool:
        """Verify the signature of the message.

        A signature that simply does not match is a normal outcome and yields False. Only problems with the key
        itself are raised.

        Args:
            public_key: The key the signature claims to be made with.
            message: The message the signature claims to attest.

        Returns:
            True if the signature matches the message under the key, False otherwise.

        Raises:
            EmptyKey: If `public_key` is empty.
            KeyParseFailed: If `public_key` cannot be loaded by the provider.
        """
        key = public_key.crypto_key()
        try:
            key.verify(self._raw, message, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            logger.debug("Signature verification failed for %d byte message.", len(message))
            return False
        return True

    def verify_string(self, public_key: "PublicKey", message: str, encoding: str = "utf-8") -> bool:
        """Verify the signature of the encoded text message, see `verify`."""
        return self.verify(public_key, message.encode(encoding))
