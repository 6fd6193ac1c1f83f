"""Provides the RSA key types: PKCS#1 private keys and SubjectPublicKeyInfo public keys.

Keys are thin immutable wrappers around their DER encoding. Structural work (reading the modulus and exponents out of
the DER, assembling a SubjectPublicKeyInfo) is done with pyasn1, the RSA primitives themselves (generation, signing)
are handed to the cryptography provider.

Each entity has a single canonical PEM type: "RSA PRIVATE KEY" for private keys and "PUBLIC KEY" for public keys.

Typical usage example:

    pk = PrivateKey.generate(3072)
    sig = pk.sign(b"Hi there!")
    pub = PublicKey.from_pem(pk.public_key().to_pem(), min_size=3072)
    assert sig.verify(pub, b"Hi there!")
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
import binascii
import hashlib
import logging
import pathlib

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric import rsa
from pyasn1 import error
from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.codec.native import encoder as localize
from pyasn1.type import univ
from pyasn1_modules import rfc5280
from pyasn1_modules import rfc8017

from rsakeys import pem
from rsakeys.errors import ConfigurationError
from rsakeys.errors import EmptyKey
from rsakeys.errors import InvalidPemFormat
from rsakeys.errors import KeyGenerationFailed
from rsakeys.errors import KeyLengthUnavailable
from rsakeys.errors import KeyParseFailed
from rsakeys.errors import KeyTooShort
from rsakeys.errors import SigningFailed
from rsakeys.errors import WrongPemType
from rsakeys.signature import Signature

logger = logging.getLogger(__name__)

# Hard floor, configured minimums may not go below it.
ABSOLUTE_MIN_PUBLIC_KEY_SIZE = 2048
MIN_PUBLIC_KEY_SIZE = 4096
DEFAULT_PUBLIC_EXPONENT = 65537

PRIVATE_KEY_PEM = "RSA PRIVATE KEY"
PUBLIC_KEY_PEM = "PUBLIC KEY"


def bytes_to_integer(msg: bytes) -> int:
    """Converts a byte string to an integer in accordance to preset procedures.

    Args:
        msg: The bytes (AKA Octet String) to convert.

    Returns:
        The representative integer.
    """
    return int.from_bytes(msg, byteorder="big", signed=False)


def check_key_size(bits: int, min_size: int = MIN_PUBLIC_KEY_SIZE) -> None:
    """Enforces the minimum public key size policy.

    The configured minimum is validated against the absolute floor first, and then used as the active threshold.

    Args:
        bits: The modulus length of the key under test.
        min_size: The configured minimum. Must be at least `ABSOLUTE_MIN_PUBLIC_KEY_SIZE`.

    Raises:
        ConfigurationError: If `min_size` is below the absolute floor.
        KeyTooShort: If `bits` is below `min_size`.
    """
    if min_size < ABSOLUTE_MIN_PUBLIC_KEY_SIZE:
        raise ConfigurationError(f"Minimum public key size has been set to {min_size}, "
                                 f"less than the allowed absolute minimum of {ABSOLUTE_MIN_PUBLIC_KEY_SIZE}.")
    if bits < min_size:
        logger.warning("Rejecting %d bit public key, minimum is %d bits.", bits, min_size)
        raise KeyTooShort(f"Invalid public key - too short. Please use at least {min_size} bits for public-key.")


def _decode_der(raw: bytes, asn1_spec: univ.Sequence, what: str) -> dict:
    """Decodes a DER structure against `asn1_spec`, returning its python-native form."""
    try:
        keydata, rest = decoder.decode(raw, asn1Spec=asn1_spec)
        pykeyd = localize.encode(keydata)
    except error.PyAsn1Error as err:
        raise KeyParseFailed(f"Could not parse {what} bytes.") from err
    if rest:
        raise KeyParseFailed(f"Trailing data after {what}.")
    return pykeyd


def _decode_private(raw: bytes) -> dict:
    """Parses PKCS#1 RSAPrivateKey DER into a dict of python ints."""
    return _decode_der(raw, rfc8017.RSAPrivateKey(), "PKCS#1 private key")


def _decode_public(raw: bytes) -> dict:
    """Parses a SubjectPublicKeyInfo wrapping an RSA key into a dict of python ints.

    Args:
        raw: The DER encoded SubjectPublicKeyInfo.

    Returns:
        The localized RSAPublicKey, with "modulus" and "publicExponent" entries.

    Raises:
        KeyParseFailed: If the structure is malformed or does not hold an RSA key.
    """
    try:
        spki, rest = decoder.decode(raw, asn1Spec=rfc5280.SubjectPublicKeyInfo())
        algo = spki["algorithm"]["algorithm"]
        inner = spki["subjectPublicKey"].asOctets()
    except error.PyAsn1Error as err:
        raise KeyParseFailed("Could not parse SubjectPublicKeyInfo bytes.") from err
    if rest:
        raise KeyParseFailed("Trailing data after SubjectPublicKeyInfo.")
    if algo != rfc8017.rsaEncryption:
        raise KeyParseFailed(f"Public Key Algorithm {algo} not supported.")
    return _decode_der(inner, rfc8017.RSAPublicKey(), "RSA public key")


def _encode_public(mod: int, expo: int) -> bytes:
    """Assembles the SubjectPublicKeyInfo DER for an RSA modulus and exponent."""
    keydata = rfc8017.RSAPublicKey()
    keydata["modulus"] = mod
    keydata["publicExponent"] = expo
    algid = rfc5280.AlgorithmIdentifier()
    algid["algorithm"] = rfc8017.rsaEncryption
    algid["parameters"] = encoder.encode(univ.Null(""))
    spki = rfc5280.SubjectPublicKeyInfo()
    spki["algorithm"] = algid
    spki["subjectPublicKey"] = univ.BitString.fromOctetString(encoder.encode(keydata))
    return encoder.encode(spki)


class PublicKey:
    """An RSA public key, held as SubjectPublicKeyInfo DER.

    Constructing directly from bytes performs no checks, it is the raw wrapper used for already trusted material.
    Untrusted input should come through `from_pem`, `from_base64` or `import_key`, which enforce the size policy.

    Attributes:
        raw: The DER encoded SubjectPublicKeyInfo. Empty for an uninitialised key.
    """

    def __init__(self, raw: bytes = b"") -> None:
        self._raw = bytes(raw)

    @property
    def raw(self) -> bytes:
        return self._raw

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash((PublicKey, self._raw))

    def __repr__(self) -> str:
        return f"PublicKey(<{len(self._raw)} bytes>)"

    def __str__(self) -> str:
        return self.to_pem()

    @classmethod
    def _checked(cls, raw: bytes, min_size: int) -> "PublicKey":
        bits = _decode_public(raw)["modulus"].bit_length()
        check_key_size(bits, min_size)
        return cls(raw)

    @classmethod
    def from_pem(cls, data: bytes | str, min_size: int = MIN_PUBLIC_KEY_SIZE) -> "PublicKey":
        """Imports a public key from a "PUBLIC KEY" PEM block.

        Args:
            data: The PEM text.
            min_size: Minimum accepted modulus length in bits.

        Returns:
            The imported public key.

        Raises:
            InvalidPemFormat: If the PEM armor is malformed.
            WrongPemType: If the block is not a "PUBLIC KEY" block.
            KeyParseFailed: If the block does not hold an RSA SubjectPublicKeyInfo.
            ConfigurationError: If `min_size` is below the absolute floor.
            KeyTooShort: If the key is shorter than `min_size`.
        """
        return cls._from_block(pem.decode_pem(data), min_size)

    @classmethod
    def _from_block(cls, block: pem.PemBlock, min_size: int) -> "PublicKey":
        if block.type != PUBLIC_KEY_PEM:
            raise WrongPemType(f"Could not find {PUBLIC_KEY_PEM} block. Found {block.type}")
        return cls._checked(block.content, min_size)

    @classmethod
    def from_base64(cls, data: bytes | str, min_size: int = MIN_PUBLIC_KEY_SIZE) -> "PublicKey":
        """Imports a public key from base64 encoded SubjectPublicKeyInfo, without PEM armor.

        Same checks as `from_pem`, save for the block type.

        Args:
            data: The base64 text.
            min_size: Minimum accepted modulus length in bits.

        Returns:
            The imported public key.

        Raises:
            InvalidPemFormat: If `data` is not valid base64.
        """
        if isinstance(data, str):
            data = data.encode("ascii", errors="replace")
        try:
            raw = base64.b64decode(data.strip(), validate=True)
        except binascii.Error as err:
            raise InvalidPemFormat("Invalid Public Key. Could not read base64 encoded bytes.") from err
        return cls._checked(raw, min_size)

    @classmethod
    def import_key(cls, file: pathlib.Path, min_size: int = MIN_PUBLIC_KEY_SIZE) -> "PublicKey":
        """Import the public key from a PEM file, see `from_pem`."""
        return cls._from_block(pem.read_pem(file), min_size)

    @classmethod
    def from_modulus_exponent(cls, n: int | bytes, e: int | bytes) -> "PublicKey":
        """Builds a public key from its modulus and exponent.

        No size policy is applied: this is the derivation path from an already trusted private key.

        Args:
            n: The modulus, as an int or unsigned big-endian bytes.
            e: The public exponent, as an int or unsigned big-endian bytes.

        Returns:
            The public key.

        Raises:
            KeyParseFailed: If either component is not positive.
        """
        if isinstance(n, bytes):
            n = bytes_to_integer(n)
        if isinstance(e, bytes):
            e = bytes_to_integer(e)
        if n <= 0 or e <= 0:
            raise KeyParseFailed("Modulus and exponent must be positive.")
        return cls(_encode_public(n, e))

    @classmethod
    def from_crypto_key(cls, key: rsa.RSAPublicKey) -> "PublicKey":
        """Wraps a cryptography RSA public key. No size policy is applied."""
        if not isinstance(key, rsa.RSAPublicKey):
            raise TypeError(f"Expected an RSA public key, got {type(key).__name__}.")
        return cls(key.public_bytes(serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo))

    def is_empty(self) -> bool:
        return not self._raw

    def _ensure_ready(self) -> None:
        if self.is_empty():
            raise EmptyKey("PublicKey is empty.")

    def to_pem(self) -> str:
        self._ensure_ready()
        return pem.encode_pem(PUBLIC_KEY_PEM, self._raw)

    def to_base64(self) -> str:
        self._ensure_ready()
        return base64.b64encode(self._raw).decode("ascii")

    def export(self, file: pathlib.Path) -> None:
        """Export the public key to a PEM file."""
        self._ensure_ready()
        pem.write_pem(file, PUBLIC_KEY_PEM, self._raw)

    def key_length(self) -> int:
        """Returns the modulus length in bits.

        Raises:
            EmptyKey: If the key is empty.
            KeyLengthUnavailable: If the key material cannot be parsed.
        """
        self._ensure_ready()
        try:
            return _decode_public(self._raw)["modulus"].bit_length()
        except KeyParseFailed as err:
            raise KeyLengthUnavailable("Could not determine PublicKey key length.") from err

    def crypto_key(self) -> rsa.RSAPublicKey:
        """Loads the key into a cryptography RSA public key, ready for use in crypto functions.

        Raises:
            EmptyKey: If the key is empty.
            KeyParseFailed: If the provider cannot load the key material.
        """
        self._ensure_ready()
        try:
            key = serialization.load_der_public_key(self._raw)
        except (ValueError, TypeError, UnsupportedAlgorithm) as err:
            raise KeyParseFailed("Could not create crypto key from PublicKey. Could not parse PublicKey bytes.") from err
        if not isinstance(key, rsa.RSAPublicKey):
            raise KeyParseFailed(f"PublicKey holds a {type(key).__name__}, not an RSA key.")
        return key

    def fingerprint(self) -> bytes:
        """Gets the ID of the key: the hex encoded SHA-256 of its PEM text.

        Note that the result is the ASCII hex string, not the raw digest.

        Returns:
            64 bytes of lowercase hexadecimal.

        Raises:
            EmptyKey: If the key is empty.
        """
        return hashlib.sha256(self.to_pem().encode("utf-8")).hexdigest().encode("ascii")


class PrivateKey:
    """An RSA private key, held as PKCS#1 RSAPrivateKey DER.

    A key is either uninitialised (empty `raw`, only `is_empty` is meaningful) or ready. It becomes ready once, at
    construction, and never changes afterward.

    Attributes:
        raw: The DER encoded PKCS#1 private key. Empty for an uninitialised key.
    """

    def __init__(self, raw: bytes = b"") -> None:
        self._raw = bytes(raw)

    @property
    def raw(self) -> bytes:
        return self._raw

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash((PrivateKey, self._raw))

    def __repr__(self) -> str:
        return f"PrivateKey(<{len(self._raw)} bytes>)"

    def __str__(self) -> str:
        return self.to_pem()

    @classmethod
    def generate(cls, size: int, pub_exp: int = DEFAULT_PUBLIC_EXPONENT) -> "PrivateKey":
        """Generates a fresh RSA Private Key.

        This is a raw generation primitive: the public key size policy is not applied here, callers wanting a key
        that passes it should request an adequate size.

        Args:
            size: The modulus size in bits.
            pub_exp: The public exponent of the key.

        Returns:
            A new generated RSA Private Key.

        Raises:
            KeyGenerationFailed: If the provider rejects the size or exponent.
        """
        logger.debug("Generating %d bit RSA key.", size)
        try:
            key = rsa.generate_private_key(public_exponent=pub_exp, key_size=size)
        except (ValueError, TypeError, UnsupportedAlgorithm) as err:
            raise KeyGenerationFailed(f"Could not generate new {size} bit PrivateKey.") from err
        return cls(
            key.private_bytes(serialization.Encoding.DER, serialization.PrivateFormat.TraditionalOpenSSL,
                              serialization.NoEncryption()))

    @classmethod
    def from_pem(cls, data: bytes | str) -> "PrivateKey":
        """Imports a private key from an "RSA PRIVATE KEY" PEM block.

        The block content is stored verbatim, its structure is only examined by the operations needing it. An empty
        block is refused, it would otherwise import as an uninitialised key.

        Args:
            data: The PEM text.

        Returns:
            The imported private key.

        Raises:
            InvalidPemFormat: If the PEM armor is malformed or the block is empty.
            WrongPemType: If the block is not an "RSA PRIVATE KEY" block.
        """
        return cls._from_block(pem.decode_pem(data))

    @classmethod
    def _from_block(cls, block: pem.PemBlock) -> "PrivateKey":
        if block.type != PRIVATE_KEY_PEM:
            raise WrongPemType(f"Could not find {PRIVATE_KEY_PEM} block. Found {block.type}")
        if not block.content:
            raise InvalidPemFormat(f"{PRIVATE_KEY_PEM} block is empty.")
        return cls(block.content)

    @classmethod
    def import_key(cls, file: pathlib.Path) -> "PrivateKey":
        """Import the private key from a PEM file, see `from_pem`."""
        return cls._from_block(pem.read_pem(file))

    def is_empty(self) -> bool:
        return not self._raw

    def _ensure_ready(self) -> None:
        if self.is_empty():
            raise EmptyKey("PrivateKey is empty.")

    def to_pem(self) -> str:
        self._ensure_ready()
        return pem.encode_pem(PRIVATE_KEY_PEM, self._raw)

    def export(self, file: pathlib.Path) -> None:
        """Export the private key to a PEM file."""
        self._ensure_ready()
        pem.write_pem(file, PRIVATE_KEY_PEM, self._raw)

    def key_length(self) -> int:
        """Returns the modulus length in bits.

        Raises:
            EmptyKey: If the key is empty.
            KeyLengthUnavailable: If the key material cannot be parsed.
        """
        self._ensure_ready()
        try:
            return _decode_private(self._raw)["modulus"].bit_length()
        except KeyParseFailed as err:
            raise KeyLengthUnavailable("Could not determine private key length.") from err

    def public_key(self) -> PublicKey:
        """Derives the public key matching this private key.

        Raises:
            EmptyKey: If the key is empty.
            KeyParseFailed: If the key material is not valid PKCS#1.
        """
        self._ensure_ready()
        keydata = _decode_private(self._raw)
        return PublicKey.from_modulus_exponent(keydata["modulus"], keydata["publicExponent"])

    def crypto_key(self) -> rsa.RSAPrivateKey:
        """Loads the key into a cryptography RSA private key.

        Raises:
            EmptyKey: If the key is empty.
            KeyParseFailed: If the provider cannot load the key material.
        """
        self._ensure_ready()
        try:
            key = serialization.load_der_private_key(self._raw, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as err:
            raise KeyParseFailed("Could not create crypto key from PrivateKey. Could not parse PrivateKey bytes.") from err
        if not isinstance(key, rsa.RSAPrivateKey):
            raise KeyParseFailed(f"PrivateKey holds a {type(key).__name__}, not an RSA key.")
        return key

    def sign(self, message: bytes) -> Signature:
        """Signs the message with RSASSA-PKCS1-v1_5 over its SHA-256 digest.

        Args:
            message: The bytes to sign.

        Returns:
            The detached signature.

        Raises:
            SigningFailed: If the key is empty, or the provider cannot load the key or sign with it.
        """
        if self.is_empty():
            raise SigningFailed("PrivateKey could not sign bytes: the key is empty.")
        try:
            key = self.crypto_key()
            logger.debug("Signing %d bytes with %d bit key.", len(message), key.key_size)
            return Signature(key.sign(message, padding.PKCS1v15(), hashes.SHA256()))
        except (ValueError, TypeError, UnsupportedAlgorithm) as err:
            raise SigningFailed("PrivateKey could not sign bytes.") from err

    def sign_string(self, message: str, encoding: str = "utf-8") -> Signature:
        """Signs the encoded form of a text message, see `sign`."""
        return self.sign(message.encode(encoding))
