"""
CXA secp256k1 - Cryptographic Context

The Context is the entry point for every operation in this package. It
is created once, randomized immediately, and then shared by the whole
application. Every key and signature built from it receives its own
clone, so no object ever depends on another object's context.

Lifecycle:
    1. Context() allocates curve state with SIGN and VERIFY capability
    2. The constructor draws a 32-byte seed and randomizes the context
    3. clone() hands cheap, independent copies to derived objects

Thread Safety:
    sign() and verify() only read the context and may run concurrently
    from many threads. randomize() swaps the internal state atomically
    under a lock, but re-randomizing while other threads sign is still a
    mutating operation and is best done once at startup.

Example:
    >>> ctx = Context()
    >>> key_pair = ctx.generate_key_pair()
    >>> sig = ctx.sign(key_pair.private_key, b"hello world")
    >>> ctx.verify(sig, key_pair.public_key, b"hello world")
    True

Author: CXA Development Team
Version: 1.0.0
"""

# ============================================================================
# Import Statements
# ============================================================================

# Standard library imports
import enum
import hashlib         # SHA-256 message digests
import logging
import threading       # Per-context lock guarding randomize()
from dataclasses import dataclass, replace
from typing import Optional, Union, TYPE_CHECKING

# Package-internal modules
from ._backend import Secp256k1Backend, get_backend
from .config import Secp256k1Config, get_config
from .entropy import RandomSource
from .errors import (
    ContextCapabilityError,
    EntropyUnavailableError,
    RandomizationError,
    SigningError,
)

if TYPE_CHECKING:
    from .keys import KeyPair, PrivateKey, PublicKey
    from .signature import Signature

logger = logging.getLogger(__name__)

SEED_SIZE = 32

BytesLike = Union[bytes, bytearray, memoryview]
Message = Union[bytes, bytearray, memoryview, str]


class ContextFlags(enum.IntFlag):
    """Capabilities a context is created with."""

    NONE = 0
    VERIFY = 1
    SIGN = 2


def as_bytes(name: str, value: BytesLike) -> bytes:
    """Return an immutable copy of a bytes-like argument."""
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes, got {type(value).__name__}")
    return bytes(value)


def hash_message(message: Message) -> bytes:
    """
    Compute the SHA-256 digest that is signed or verified for a message.

    Text is encoded as UTF-8 before hashing; no length limit is applied.

    Raises:
        TypeError: If message is not bytes-like or str
    """
    if isinstance(message, str):
        message = message.encode("utf-8")
    elif not isinstance(message, (bytes, bytearray, memoryview)):
        raise TypeError(f"message must be bytes or str, got {type(message).__name__}")
    return hashlib.sha256(message).digest()


def require_context(context: "Context") -> "Context":
    if not isinstance(context, Context):
        raise TypeError(f"context must be Context, got {type(context).__name__}")
    return context


@dataclass(frozen=True)
class _ContextState:
    """Immutable snapshot of a context; replaced wholesale on randomize."""

    flags: ContextFlags
    # Number of successful randomizations; zero means never randomized
    generation: int = 0


class Context:
    """
    Reusable secp256k1 computation context.

    Creation is comparatively expensive (it consumes OS entropy); clone()
    is cheap and shares no mutable state with its source.

    Attributes:
        flags: Capabilities (ContextFlags.SIGN, ContextFlags.VERIFY)
        config: Secp256k1Config captured at creation
        random_source: RandomSource used for seeding and key generation

    Raises:
        RandomizationError: If the freshly created context cannot be
            randomized; the context is then never returned to the caller
    """

    def __init__(
        self,
        flags: ContextFlags = ContextFlags.SIGN | ContextFlags.VERIFY,
        random_source: Optional[RandomSource] = None,
        config: Optional[Secp256k1Config] = None,
    ):
        flags = ContextFlags(flags)
        self._config = config if config is not None else get_config()
        self._random_source = (
            random_source
            if random_source is not None
            else RandomSource(nonblocking=self._config.entropy_nonblocking)
        )
        self._backend: Secp256k1Backend = get_backend()
        self._state = _ContextState(flags=flags)
        self._lock = threading.Lock()

        if flags & ContextFlags.SIGN:
            # Randomize at creation so the context is safe to share across threads
            self.randomize()

        logger.debug(f"Context created with flags {flags!r}")

    @classmethod
    def create(
        cls,
        flags: ContextFlags = ContextFlags.SIGN | ContextFlags.VERIFY,
        random_source: Optional[RandomSource] = None,
        config: Optional[Secp256k1Config] = None,
    ) -> "Context":
        """Create and randomize a new context."""
        return cls(flags=flags, random_source=random_source, config=config)

    # -- Properties --------------------------------------------------------

    @property
    def flags(self) -> ContextFlags:
        return self._state.flags

    @property
    def config(self) -> Secp256k1Config:
        return self._config

    @property
    def random_source(self) -> RandomSource:
        return self._random_source

    @property
    def is_randomized(self) -> bool:
        return self._state.generation > 0

    @property
    def backend(self) -> Secp256k1Backend:
        return self._backend

    # -- Lifecycle ---------------------------------------------------------

    def randomize(self, seed: Optional[BytesLike] = None) -> None:
        """
        Reseed the context with a fresh 32-byte seed.

        OpenSSL blinds every scalar multiplication internally, so the seed
        is consumed for its entropy check and not retained. A successful
        call advances the context's randomization generation.

        Args:
            seed: Optional caller-supplied seed. Drawn from the context's
                RandomSource when omitted.

        Raises:
            ContextCapabilityError: If the context cannot sign
            ValueError: If a supplied seed is not 32 bytes
            RandomizationError: If the seed cannot be generated; the
                previous state is left untouched
        """
        state = self._state
        if not state.flags & ContextFlags.SIGN:
            raise ContextCapabilityError(
                "Context was not created with signing capability",
                details={"flags": int(state.flags)},
            )

        if seed is None:
            try:
                seed = self._random_source.generate(SEED_SIZE)
            except EntropyUnavailableError as e:
                logger.error(f"Context randomization failed: {e.message}")
                raise RandomizationError(
                    "context randomization failed",
                    details={"cause": e.code},
                ) from e
        else:
            seed = as_bytes("seed", seed)
            if len(seed) != SEED_SIZE:
                raise ValueError(f"seed must be {SEED_SIZE} bytes, got {len(seed)}")

        with self._lock:
            self._state = replace(
                self._state,
                generation=self._state.generation + 1,
            )
        logger.debug(f"Context randomized (generation {self._state.generation})")

    def clone(self) -> "Context":
        """
        Return an independent context with identical capability.

        The clone shares only immutable values (state snapshot, config,
        backend) with its source and has its own lock.
        """
        twin = object.__new__(type(self))
        twin._config = self._config
        twin._random_source = self._random_source
        twin._backend = self._backend
        twin._state = self._state
        twin._lock = threading.Lock()
        return twin

    def __copy__(self) -> "Context":
        return self.clone()

    def __deepcopy__(self, memo) -> "Context":
        return self.clone()

    def __repr__(self) -> str:
        return (
            f"Context(flags={self.flags!r}, randomized={self.is_randomized})"
        )

    def _require(self, flag: ContextFlags, operation: str) -> _ContextState:
        state = self._state
        if not state.flags & flag:
            raise ContextCapabilityError(
                f"Context cannot {operation}: missing {flag.name} capability",
                details={"flags": int(state.flags), "required": int(flag)},
            )
        return state

    # -- Sign / verify -----------------------------------------------------

    def sign(self, private_key: "PrivateKey", message: Message) -> "Signature":
        """
        Compute the ECDSA signature of SHA-256(message).

        The nonce is derived deterministically (RFC 6979), so signing the
        same message with the same key always yields the same signature.

        Args:
            private_key: Key to sign with
            message: Data to sign (bytes, or str encoded as UTF-8)

        Returns:
            Signature owning a clone of this context

        Raises:
            TypeError: On wrong argument types
            ContextCapabilityError: If the context cannot sign
            SigningError: If the signing primitive fails
        """
        from .keys import PrivateKey
        from .signature import Signature

        if not isinstance(private_key, PrivateKey):
            raise TypeError(f"private_key must be PrivateKey, got {type(private_key).__name__}")
        state = self._require(ContextFlags.SIGN, "sign")
        if state.generation == 0:
            raise SigningError("Context has not been randomized")

        digest = hash_message(message)
        raw = self._backend.ecdsa_sign(digest, private_key.data)
        if raw is None:
            logger.error("Signing primitive reported failure")
            raise SigningError("unable to compute signature")
        return Signature(self, raw)

    def verify(
        self,
        signature: "Signature",
        public_key: "PublicKey",
        message: Message,
    ) -> bool:
        """
        Check that signature was made over SHA-256(message) by public_key.

        A mismatch, a corrupted signature or a different key all return
        False; no exception is raised for them.

        Raises:
            TypeError: On wrong argument types
            ContextCapabilityError: If the context cannot verify
        """
        from .keys import PublicKey
        from .signature import Signature

        if not isinstance(signature, Signature):
            raise TypeError(f"signature must be Signature, got {type(signature).__name__}")
        if not isinstance(public_key, PublicKey):
            raise TypeError(f"public_key must be PublicKey, got {type(public_key).__name__}")
        self._require(ContextFlags.VERIFY, "verify")

        digest = hash_message(message)
        return self._backend.ecdsa_verify(
            digest,
            (signature.r, signature.s),
            public_key.point,
            enforce_low_s=self._config.enforce_low_s,
        )

    # -- Factories ---------------------------------------------------------

    def generate_key_pair(self) -> "KeyPair":
        """Generate a random private key and its public key."""
        from .keys import KeyPair

        return KeyPair.generate(self)

    def key_pair_from_private_key(self, private_key_data: BytesLike) -> "KeyPair":
        """Build a key pair from 32 bytes of private key data."""
        from .keys import KeyPair

        return KeyPair.from_private_key_data(self, private_key_data)

    def public_key_from_data(self, public_key_data: BytesLike) -> "PublicKey":
        """Load a public key from compressed or uncompressed bytes."""
        from .keys import PublicKey

        return PublicKey.from_serialized(self, public_key_data)

    def signature_from_der_encoded(self, der_encoded_signature: BytesLike) -> "Signature":
        from .signature import Signature

        return Signature.from_der(self, der_encoded_signature)

    def signature_from_compact(self, compact_signature: BytesLike) -> "Signature":
        from .signature import Signature

        return Signature.from_compact(self, compact_signature)
