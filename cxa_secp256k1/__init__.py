"""
CXA secp256k1 - ECDSA over secp256k1 for Python.

secp256k1 key generation, ECDSA signing and signature verification built
around a reusable, thread-safe context object.

Modules:
    context: Context creation, randomization, cloning, sign and verify
    keys: PrivateKey, PublicKey and KeyPair value objects
    signature: ECDSA signatures with DER and compact codecs
    entropy: Secure random byte source with a seeding check
    config: Runtime configuration
    errors: Exception hierarchy

Usage:
    >>> from cxa_secp256k1 import Context
    >>> ctx = Context()
    >>> key_pair = ctx.generate_key_pair()
    >>> sig = ctx.sign(key_pair.private_key, b"hello world")
    >>> ctx.verify(sig, key_pair.public_key, b"hello world")
    True
    >>> ctx.verify(sig, key_pair.public_key, b"hello world!")
    False

Author: CXA Development Team
Version: 1.0.0
"""

# ============================================================================
# Import Statements
# ============================================================================

import logging

from .config import Secp256k1Config, get_config, set_config
from .context import Context, ContextFlags, hash_message
from .entropy import RandomSource
from .errors import (
    Secp256k1Error,
    EntropyUnavailableError,
    RandomizationError,
    KeyGenerationError,
    InvalidKeyLengthError,
    InvalidPrivateKeyError,
    KeyDerivationError,
    InvalidPublicKeyDataError,
    KeyPairMismatchError,
    SigningError,
    InvalidDEREncodingError,
    InvalidCompactSignatureError,
    EncodingError,
    ContextCapabilityError,
)
from .keys import KeyPair, PrivateKey, PublicKey
from .signature import Signature

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core objects
    "Context",
    "ContextFlags",
    "PrivateKey",
    "PublicKey",
    "KeyPair",
    "Signature",
    "RandomSource",
    "hash_message",
    # Configuration
    "Secp256k1Config",
    "get_config",
    "set_config",
    # Errors
    "Secp256k1Error",
    "EntropyUnavailableError",
    "RandomizationError",
    "KeyGenerationError",
    "InvalidKeyLengthError",
    "InvalidPrivateKeyError",
    "KeyDerivationError",
    "InvalidPublicKeyDataError",
    "KeyPairMismatchError",
    "SigningError",
    "InvalidDEREncodingError",
    "InvalidCompactSignatureError",
    "EncodingError",
    "ContextCapabilityError",
]

__version__ = "1.0.0"
