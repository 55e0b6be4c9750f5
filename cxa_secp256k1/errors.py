"""
CXA secp256k1 - Exception Hierarchy

Every failure raised by this package derives from Secp256k1Error, which
carries a human-readable message, a numeric error code and an optional
details dictionary for programmatic handling.

Error code ranges:
    1xx: Randomness and context state
    2xx: Key material
    3xx: Signatures
    4xx: Context usage

Signature verification mismatch is never an error: Context.verify()
returns False instead.

Author: CXA Development Team
Version: 1.0.0
"""

# ============================================================================
# Import Statements
# ============================================================================

from typing import Optional, Dict, Any


class Secp256k1Error(Exception):
    """
    Base exception for all secp256k1 errors.

    Attributes:
        message: Human-readable description of the error
        code: Integer error code for programmatic identification
        details: Extra context (never contains key material)
    """

    code = 1

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"{self.message} (Code: {self.code})"


# ============================================================================
# Randomness and Context State
# ============================================================================


class EntropyUnavailableError(Secp256k1Error):
    """The operating system RNG is not seeded or failed to produce bytes."""

    code = 100


class RandomizationError(Secp256k1Error):
    """Blinding the context against side channels failed."""

    code = 101


# ============================================================================
# Key Material
# ============================================================================


class KeyGenerationError(Secp256k1Error):
    """A new private key could not be generated."""

    code = 200


class InvalidKeyLengthError(Secp256k1Error):
    """Private key data is not exactly 32 bytes."""

    code = 201


class InvalidPrivateKeyError(Secp256k1Error):
    """Private key scalar is zero or not below the curve order."""

    code = 202


class KeyDerivationError(Secp256k1Error):
    """Public key derivation from a private key failed."""

    code = 203


class InvalidPublicKeyDataError(Secp256k1Error):
    """Serialized public key has a bad length, prefix or is off the curve."""

    code = 204


class KeyPairMismatchError(Secp256k1Error):
    """The public half of a key pair is not derived from its private half."""

    code = 205


# ============================================================================
# Signatures
# ============================================================================


class SigningError(Secp256k1Error):
    """The underlying ECDSA signing primitive reported failure."""

    code = 300


class InvalidDEREncodingError(Secp256k1Error):
    """Signature bytes are not strict, canonical DER."""

    code = 301


class InvalidCompactSignatureError(Secp256k1Error):
    """Compact signature is not 64 bytes of valid (r, s) scalars."""

    code = 302


class EncodingError(Secp256k1Error):
    """A signature could not be serialized into its output buffer."""

    code = 303


# ============================================================================
# Context Usage
# ============================================================================


class ContextCapabilityError(Secp256k1Error):
    """The context was not created with the capability an operation needs."""

    code = 400
