"""Exceptions raised by the key handling and signing utilities.

Every error derives from `RSAKeysError` and, additionally, from the builtin exception a caller would naturally expect
for the situation, so `except ValueError` style handling keeps working.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSAKeysError(Exception):
    """Base class for all errors raised by rsakeys."""


class InvalidPemFormat(RSAKeysError, ValueError):
    """PEM armor missing or malformed, or the base64 payload is corrupt."""


class WrongPemType(RSAKeysError, ValueError):
    """A PEM block was found, but its type is not the one expected."""


class EmptyKey(RSAKeysError, ValueError):
    """An operation was attempted on an uninitialised key."""


class KeyGenerationFailed(RSAKeysError, RuntimeError):
    """The cryptography provider refused or failed to generate a keypair."""


class KeyParseFailed(RSAKeysError, ValueError):
    """DER key material could not be parsed into modulus/exponent form."""


class KeyTooShort(RSAKeysError, ValueError):
    """The public key modulus is below the enforced minimum bit length."""


class ConfigurationError(RSAKeysError, ValueError):
    """The configured minimum key size itself violates the absolute floor."""


class SigningFailed(RSAKeysError, RuntimeError):
    """The signing operation could not be carried out."""


class KeyLengthUnavailable(RSAKeysError, ValueError):
    """The modulus length could not be computed from the key material."""
