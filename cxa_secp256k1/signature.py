"""
CXA secp256k1 - ECDSA Signature Object

A Signature is an immutable (r, s) scalar pair produced by Context.sign()
or parsed from one of two wire formats:

    DER:     ASN.1 SEQUENCE { INTEGER r, INTEGER s }, canonical, <= 72 bytes
    Compact: r || s, each 32 bytes big-endian (64 bytes)

Both serializations are pure functions of (r, s), so converting back and
forth between them is lossless.

Author: CXA Development Team
Version: 1.0.0
"""

# ============================================================================
# Import Statements
# ============================================================================

import logging

from ._backend import CURVE_ORDER, RawSignature
from .context import BytesLike, Context, as_bytes, require_context
from .errors import EncodingError, InvalidCompactSignatureError, InvalidDEREncodingError

logger = logging.getLogger(__name__)


class Signature:
    """
    ECDSA signature over secp256k1.

    Instances are created by Context.sign(), Signature.from_der() and
    Signature.from_compact(). The constructor accepts only a pair of
    integers in [0, n) and clones the given context.

    Attributes:
        r: First signature scalar
        s: Second signature scalar
    """

    __slots__ = ("_context", "_r", "_s")

    def __init__(self, context: Context, raw: RawSignature):
        """
        Raises:
            TypeError: If raw is not a pair of integers
            ValueError: If r or s is outside [0, n)
        """
        require_context(context)
        if not (isinstance(raw, tuple) and len(raw) == 2) or not all(
            isinstance(v, int) and not isinstance(v, bool) for v in raw
        ):
            raise TypeError("raw must be an (r, s) tuple of integers")
        r, s = raw
        if not (0 <= r < CURVE_ORDER and 0 <= s < CURVE_ORDER):
            raise ValueError("signature scalars must be in [0, n)")
        self._r, self._s = r, s
        self._context = context.clone()

    @classmethod
    def from_der(cls, context: Context, data: BytesLike) -> "Signature":
        """
        Parse a strict DER encoded signature.

        Raises:
            TypeError: If data is not bytes-like
            InvalidDEREncodingError: If data is malformed, not minimally
                encoded, or carries scalars outside [0, n)
        """
        require_context(context)
        data = as_bytes("data", data)
        raw = context.backend.signature_parse_der(data)
        if raw is None:
            raise InvalidDEREncodingError(
                "invalid DER encoded signature",
                details={"length": len(data)},
            )
        return cls(context, raw)

    @classmethod
    def from_compact(cls, context: Context, data: BytesLike) -> "Signature":
        """
        Parse a 64-byte compact signature.

        Raises:
            TypeError: If data is not bytes-like
            InvalidCompactSignatureError: If data is not 64 bytes or r/s
                is not below the curve order
        """
        require_context(context)
        data = as_bytes("data", data)
        raw = context.backend.signature_parse_compact(data)
        if raw is None:
            raise InvalidCompactSignatureError(
                "invalid compact signature",
                details={"length": len(data)},
            )
        return cls(context, raw)

    @property
    def r(self) -> int:
        return self._r

    @property
    def s(self) -> int:
        return self._s

    @property
    def context(self) -> Context:
        return self._context

    def to_der(self) -> bytes:
        """
        Return the canonical DER encoding.

        Raises:
            EncodingError: If the encoding does not fit the 72-byte maximum
        """
        der = self._context.backend.signature_serialize_der((self._r, self._s))
        if der is None:
            logger.error("DER serialization exceeded the maximum signature size")
            raise EncodingError("could not compute DER encoded signature")
        return der

    def to_compact(self) -> bytes:
        """
        Return the 64-byte r || s encoding.

        Raises:
            EncodingError: If r or s does not fit in 32 bytes
        """
        compact = self._context.backend.signature_serialize_compact((self._r, self._s))
        if compact is None:
            logger.error("Compact serialization overflowed its 64-byte buffer")
            raise EncodingError("unable to compute compact signature")
        return compact

    def __eq__(self, other) -> bool:
        if not isinstance(other, Signature):
            return NotImplemented
        return self._r == other._r and self._s == other._s

    def __hash__(self) -> int:
        return hash((self._r, self._s))

    def __repr__(self) -> str:
        return f"Signature({self.to_compact().hex()})"
