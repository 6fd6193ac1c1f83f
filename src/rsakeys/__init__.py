"""RSA Key Material and Signing Utilities.

Manages RSA keys encoded as PEM text: PKCS#1 private keys and SubjectPublicKeyInfo public keys. Provides key
generation, public key derivation, minimum key size enforcement, SHA-256 with RSA (PKCS#1 v1.5) signing and
verification, as well as public key fingerprinting. The RSA primitives themselves are provided by cryptography.

Typical usage example:

    pk = PrivateKey.generate(4096)
    sig = pk.sign("hello,world".encode())
    pub = PublicKey.from_pem(pk.public_key().to_pem())
    assert sig.verify(pub, "hello,world".encode())
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsakeys.errors import ConfigurationError
from rsakeys.errors import EmptyKey
from rsakeys.errors import InvalidPemFormat
from rsakeys.errors import KeyGenerationFailed
from rsakeys.errors import KeyLengthUnavailable
from rsakeys.errors import KeyParseFailed
from rsakeys.errors import KeyTooShort
from rsakeys.errors import RSAKeysError
from rsakeys.errors import SigningFailed
from rsakeys.errors import WrongPemType
from rsakeys.keys import ABSOLUTE_MIN_PUBLIC_KEY_SIZE
from rsakeys.keys import DEFAULT_PUBLIC_EXPONENT
from rsakeys.keys import MIN_PUBLIC_KEY_SIZE
from rsakeys.keys import check_key_size
from rsakeys.keys import PrivateKey
from rsakeys.keys import PublicKey
from rsakeys.pem import decode_pem
from rsakeys.pem import encode_pem
from rsakeys.pem import PemBlock
from rsakeys.signature import Signature

__version__ = "0.1.0"
__all__ = [
    "PrivateKey",
    "PublicKey",
    "Signature",
    "PemBlock",
    "decode_pem",
    "encode_pem",
    "check_key_size",
    "ABSOLUTE_MIN_PUBLIC_KEY_SIZE",
    "DEFAULT_PUBLIC_EXPONENT",
    "MIN_PUBLIC_KEY_SIZE",
    "RSAKeysError",
    "InvalidPemFormat",
    "WrongPemType",
    "EmptyKey",
    "KeyGenerationFailed",
    "KeyParseFailed",
    "KeyTooShort",
    "ConfigurationError",
    "SigningFailed",
    "KeyLengthUnavailable",
]
