"""
CXA secp256k1 - Key Objects

PrivateKey, PublicKey and KeyPair value objects. Keys are immutable once
constructed and each owns a private clone of the context it was built
with, so keys can be handed to other threads without locking.

Construction either succeeds with a valid key or raises; no partially
initialized key is ever observable.

Formats:
    Private key:            32-byte big-endian scalar
    Public key compressed:  0x02/0x03 || x            (33 bytes)
    Public key uncompressed: 0x04 || x || y           (65 bytes)

Author: CXA Development Team
Version: 1.0.0
"""

# ============================================================================
# Import Statements
# ============================================================================

import hmac
import logging
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import ec

from ._backend import PRIVATE_KEY_SIZE
from .context import BytesLike, Context, as_bytes, require_context
from .errors import (
    EntropyUnavailableError,
    InvalidKeyLengthError,
    InvalidPrivateKeyError,
    InvalidPublicKeyDataError,
    KeyDerivationError,
    KeyGenerationError,
    KeyPairMismatchError,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Private Key
# ============================================================================


class PrivateKey:
    """
    A secp256k1 private key: a scalar k with 0 < k < n.

    Args:
        context: Context used to validate the scalar; cloned and kept
        data: Exactly 32 bytes of key material (copied)

    Raises:
        TypeError: If data is not bytes-like
        InvalidKeyLengthError: If data is not 32 bytes
        InvalidPrivateKeyError: If the scalar is zero or >= curve order

    Example:
        >>> key = PrivateKey(ctx, bytes.fromhex("00" * 31 + "01"))
        >>> len(key.data)
        32
    """

    __slots__ = ("_context", "_data")

    def __init__(self, context: Context, data: BytesLike):
        require_context(context)
        data = as_bytes("data", data)

        if len(data) != PRIVATE_KEY_SIZE:
            raise InvalidKeyLengthError(
                f"private key data must be {PRIVATE_KEY_SIZE} bytes in length",
                details={"length": len(data)},
            )
        if not context.backend.seckey_verify(data):
            raise InvalidPrivateKeyError("invalid private key data")

        self._data = data
        self._context = context.clone()

    @classmethod
    def from_bytes(cls, context: Context, data: BytesLike) -> "PrivateKey":
        """Load a private key from 32 raw bytes."""
        return cls(context, data)

    @classmethod
    def generate(cls, context: Context) -> "PrivateKey":
        """
        Generate a new random private key.

        The 32 random bytes are not retried if they fall outside the
        valid scalar range; that case is astronomically unlikely and
        surfaces as InvalidPrivateKeyError.

        Raises:
            KeyGenerationError: If random bytes cannot be generated
        """
        require_context(context)
        try:
            data = context.random_source.generate(PRIVATE_KEY_SIZE)
        except EntropyUnavailableError as e:
            logger.warning(f"Private key generation failed: {e.message}")
            raise KeyGenerationError(
                "Random bytes generation failed.",
                details={"cause": e.code},
            ) from e
        return cls(context, data)

    @property
    def data(self) -> bytes:
        """The raw 32-byte scalar."""
        return self._data

    @property
    def context(self) -> Context:
        return self._context

    def __bytes__(self) -> bytes:
        return self._data

    def __eq__(self, other) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return hmac.compare_digest(self._data, other._data)

    __hash__ = None

    def __repr__(self) -> str:
        return "PrivateKey(<hidden>)"


# ============================================================================
# Public Key
# ============================================================================


class PublicKey:
    """
    A point on secp256k1, derived from a private key or parsed from bytes.

    PublicKey(context, private_key) computes private_key * G. Use
    from_serialized() to load an encoded point.

    Raises:
        TypeError: If private_key is not a PrivateKey
        KeyDerivationError: If the private key bytes are invalid
    """

    __slots__ = ("_context", "_point")

    def __init__(self, context: Context, private_key: PrivateKey):
        require_context(context)
        if not isinstance(private_key, PrivateKey):
            raise TypeError(f"private_key must be PrivateKey, got {type(private_key).__name__}")

        # Checked even for PrivateKey instances built by bypassing __init__
        point = context.backend.pubkey_create(private_key.data)
        if point is None:
            raise KeyDerivationError("Invalid private key data")

        self._point = point
        self._context = context.clone()

    @classmethod
    def from_private_key(cls, context: Context, private_key: PrivateKey) -> "PublicKey":
        return cls(context, private_key)

    @classmethod
    def from_serialized(cls, context: Context, data: BytesLike) -> "PublicKey":
        """
        Parse a 33-byte compressed or 65-byte uncompressed public key.

        Raises:
            TypeError: If data is not bytes-like
            InvalidPublicKeyDataError: On bad length, bad prefix byte, or
                coordinates that are not on the curve
        """
        require_context(context)
        data = as_bytes("data", data)

        point = context.backend.pubkey_parse(data)
        if point is None:
            raise InvalidPublicKeyDataError(
                "invalid public key data",
                details={"length": len(data), "prefix": data[0] if data else None},
            )
        return cls._wrap(context, point)

    @classmethod
    def _wrap(cls, context: Context, point: ec.EllipticCurvePublicKey) -> "PublicKey":
        instance = cls.__new__(cls)
        instance._point = point
        instance._context = context.clone()
        return instance

    @property
    def point(self) -> ec.EllipticCurvePublicKey:
        return self._point

    @property
    def context(self) -> Context:
        return self._context

    def to_compressed(self) -> bytes:
        """Return the 33-byte encoding: 0x02/0x03 parity prefix || x."""
        return self._context.backend.pubkey_serialize(self._point, compressed=True)

    def to_uncompressed(self) -> bytes:
        """Return the 65-byte encoding: 0x04 || x || y."""
        return self._context.backend.pubkey_serialize(self._point, compressed=False)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.to_compressed() == other.to_compressed()

    def __hash__(self) -> int:
        return hash(self.to_compressed())

    def __repr__(self) -> str:
        return f"PublicKey({self.to_compressed().hex()})"


# ============================================================================
# Key Pair
# ============================================================================


class KeyPair:
    """
    A public key together with the private key it was derived from.

    KeyPair holds references to both keys and owns no context of its own.
    By default construction checks that public_key == derive(private_key)
    and raises KeyPairMismatchError otherwise; the check follows the
    private key's context config (verify_key_pairs) unless overridden.

    Args:
        public_key: Public half
        private_key: Private half
        verify: Force the correspondence check on (True) or off (False)
    """

    __slots__ = ("_public_key", "_private_key")

    def __init__(
        self,
        public_key: PublicKey,
        private_key: PrivateKey,
        verify: Optional[bool] = None,
    ):
        if not isinstance(public_key, PublicKey):
            raise TypeError(f"public_key must be PublicKey, got {type(public_key).__name__}")
        if not isinstance(private_key, PrivateKey):
            raise TypeError(f"private_key must be PrivateKey, got {type(private_key).__name__}")

        if verify is None:
            verify = private_key.context.config.verify_key_pairs
        if verify:
            expected = PublicKey(private_key.context, private_key)
            if expected != public_key:
                raise KeyPairMismatchError(
                    "public key does not correspond to private key",
                    details={"public_key": public_key.to_compressed().hex()},
                )

        self._public_key = public_key
        self._private_key = private_key

    @classmethod
    def from_keys(
        cls,
        public_key: PublicKey,
        private_key: PrivateKey,
        verify: Optional[bool] = None,
    ) -> "KeyPair":
        return cls(public_key, private_key, verify=verify)

    @classmethod
    def generate(cls, context: Context) -> "KeyPair":
        """Generate a private key and derive its public key in one step."""
        private_key = PrivateKey.generate(context)
        public_key = PublicKey(context, private_key)
        return cls(public_key, private_key, verify=False)

    @classmethod
    def from_private_key_data(cls, context: Context, data: BytesLike) -> "KeyPair":
        """Build a key pair from 32 bytes of private key data."""
        private_key = PrivateKey(context, data)
        public_key = PublicKey(context, private_key)
        return cls(public_key, private_key, verify=False)

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def private_key(self) -> PrivateKey:
        return self._private_key

    def __eq__(self, other) -> bool:
        if not isinstance(other, KeyPair):
            return NotImplemented
        return self._private_key == other._private_key and self._public_key == other._public_key

    __hash__ = None

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self._public_key!r})"
