"""
CXA secp256k1 - Curve Backend Adapter

This module is the single seam between the object model and the trusted
elliptic curve implementation. The curve arithmetic, X9.62 point codec,
RFC 6979 deterministic ECDSA and the ASN.1 DER codec all come from the
`cryptography` package; this adapter shapes them like the libsecp256k1
C API so that the wrapper classes only deal with status results.

Primitives return None or False on failure instead of raising, mirroring
the 0/1 return codes of libsecp256k1. The caller chooses which
Secp256k1Error to raise.

Interoperability notes:
    - Signatures are normalized to low-S (s <= n/2), exactly as
      secp256k1_ecdsa_sign() does, so output is bit-identical to
      libsecp256k1 for the same key and digest.
    - Public key parsing accepts only 0x02/0x03 (33 bytes) and 0x04
      (65 bytes) prefixes. Hybrid 0x06/0x07 encodings are rejected.

Author: CXA Development Team
Version: 1.0.0
"""

# ============================================================================
# Import Statements
# ============================================================================

# Standard library imports
import logging
import threading       # Double-checked locking for the singleton backend
from typing import Optional, Tuple

# Trusted curve implementation: secp256k1 arithmetic, X9.62 and DER codecs
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    decode_dss_signature,
    encode_dss_signature,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Curve Constants
# ============================================================================

# Order of the secp256k1 base point G
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
HALF_CURVE_ORDER = CURVE_ORDER // 2

PRIVATE_KEY_SIZE = 32
COMPRESSED_PUBKEY_SIZE = 33
UNCOMPRESSED_PUBKEY_SIZE = 65
COMPACT_SIGNATURE_SIZE = 64
MAX_DER_SIGNATURE_SIZE = 72
DIGEST_SIZE = 32

_COMPRESSED_PREFIXES = (0x02, 0x03)
_UNCOMPRESSED_PREFIX = 0x04

# (r, s) scalar pair
RawSignature = Tuple[int, int]


class Secp256k1Backend:
    """
    Process-wide adapter over the `cryptography` secp256k1 implementation.

    The backend holds no mutable state after construction and every
    method is safe to call from several threads at once. A single
    instance is shared through double-checked locking.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._curve = ec.SECP256K1()
                    instance._verify_algorithm = ec.ECDSA(Prehashed(hashes.SHA256()))
                    cls._instance = instance
                    logger.debug("secp256k1 backend initialized")
        return cls._instance

    @property
    def curve(self) -> ec.EllipticCurve:
        return self._curve

    # -- Private keys ------------------------------------------------------

    def seckey_verify(self, seckey: bytes) -> bool:
        """Check that 32 bytes encode a scalar in [1, n-1]."""
        if len(seckey) != PRIVATE_KEY_SIZE:
            return False
        value = int.from_bytes(seckey, "big")
        return 0 < value < CURVE_ORDER

    def _load_seckey(self, seckey: bytes) -> Optional[ec.EllipticCurvePrivateKey]:
        if not self.seckey_verify(seckey):
            return None
        try:
            return ec.derive_private_key(int.from_bytes(seckey, "big"), self._curve)
        except (ValueError, TypeError) as e:
            logger.error(f"Private key load failed: {e}")
            return None

    # -- Public keys -------------------------------------------------------

    def pubkey_create(self, seckey: bytes) -> Optional[ec.EllipticCurvePublicKey]:
        """Compute seckey * G, or None if seckey is invalid."""
        key = self._load_seckey(seckey)
        if key is None:
            return None
        return key.public_key()

    def pubkey_parse(self, data: bytes) -> Optional[ec.EllipticCurvePublicKey]:
        """Decode a 33-byte compressed or 65-byte uncompressed point."""
        if len(data) == COMPRESSED_PUBKEY_SIZE:
            if data[0] not in _COMPRESSED_PREFIXES:
                return None
        elif len(data) == UNCOMPRESSED_PUBKEY_SIZE:
            if data[0] != _UNCOMPRESSED_PREFIX:
                return None
        else:
            return None

        try:
            return ec.EllipticCurvePublicKey.from_encoded_point(self._curve, bytes(data))
        except ValueError:
            return None

    def pubkey_serialize(self, pubkey: ec.EllipticCurvePublicKey, compressed: bool) -> bytes:
        """Encode a point as X9.62 compressed (33) or uncompressed (65) bytes."""
        fmt = (
            serialization.PublicFormat.CompressedPoint
            if compressed
            else serialization.PublicFormat.UncompressedPoint
        )
        return pubkey.public_bytes(serialization.Encoding.X962, fmt)

    # -- ECDSA -------------------------------------------------------------

    def ecdsa_sign(self, digest: bytes, seckey: bytes) -> Optional[RawSignature]:
        """
        Sign a 32-byte digest with an RFC 6979 deterministic nonce.

        Returns:
            Low-S normalized (r, s), or None on failure
        """
        if len(digest) != DIGEST_SIZE:
            return None
        key = self._load_seckey(seckey)
        if key is None:
            return None
        try:
            algorithm = ec.ECDSA(Prehashed(hashes.SHA256()), deterministic_signing=True)
            der = key.sign(digest, algorithm)
        except (UnsupportedAlgorithm, ValueError) as e:
            logger.error(f"ECDSA signing primitive failed: {e}")
            return None
        r, s = decode_dss_signature(der)
        if s > HALF_CURVE_ORDER:
            s = CURVE_ORDER - s
        return r, s

    def ecdsa_verify(
        self,
        digest: bytes,
        signature: RawSignature,
        pubkey: ec.EllipticCurvePublicKey,
        enforce_low_s: bool = True,
    ) -> bool:
        """Verify (r, s) over a 32-byte digest. Never raises on mismatch."""
        r, s = signature
        if len(digest) != DIGEST_SIZE:
            return False
        if not (0 < r < CURVE_ORDER and 0 < s < CURVE_ORDER):
            return False
        if enforce_low_s and s > HALF_CURVE_ORDER:
            return False
        try:
            pubkey.verify(encode_dss_signature(r, s), digest, self._verify_algorithm)
        except InvalidSignature:
            return False
        return True

    # -- Signature codecs --------------------------------------------------

    def signature_serialize_der(self, signature: RawSignature) -> Optional[bytes]:
        r, s = signature
        try:
            der = encode_dss_signature(r, s)
        except ValueError:
            return None
        if len(der) > MAX_DER_SIGNATURE_SIZE:
            return None
        return der

    def signature_parse_der(self, data: bytes) -> Optional[RawSignature]:
        """
        Parse strict DER into (r, s).

        Non-minimal integers, long-form lengths where short form fits,
        trailing bytes and out-of-range scalars are all rejected. The
        re-encoding check guarantees the input was the canonical encoding.
        """
        data = bytes(data)
        try:
            r, s = decode_dss_signature(data)
        except ValueError:
            return None
        if not (0 <= r < CURVE_ORDER and 0 <= s < CURVE_ORDER):
            return None
        if encode_dss_signature(r, s) != data:
            return None
        return r, s

    def signature_serialize_compact(self, signature: RawSignature) -> Optional[bytes]:
        r, s = signature
        try:
            return r.to_bytes(32, "big") + s.to_bytes(32, "big")
        except OverflowError:
            return None

    def signature_parse_compact(self, data: bytes) -> Optional[RawSignature]:
        """Parse 64 bytes of big-endian r || s; each must be below n."""
        if len(data) != COMPACT_SIGNATURE_SIZE:
            return None
        r = int.from_bytes(data[:32], "big")
        s = int.from_bytes(data[32:], "big")
        if r >= CURVE_ORDER or s >= CURVE_ORDER:
            return None
        return r, s


def get_backend() -> Secp256k1Backend:
    """Return the shared backend instance."""
    return Secp256k1Backend()
