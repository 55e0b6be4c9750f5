"""
CXA secp256k1 - Secure Random Byte Source

Wraps the operating system CSPRNG for context seeding and private key
generation. The generator is checked for readiness before every draw:
on Linux, getrandom() with GRND_NONBLOCK reports an unseeded kernel pool
instead of blocking on it, and that condition is surfaced as
EntropyUnavailableError. No retry is attempted here; callers decide.

Example:
    >>> source = RandomSource()
    >>> seed = source.generate(32)

Author: CXA Development Team
Version: 1.0.0
"""

# ============================================================================
# Import Statements
# ============================================================================

import os
import logging

from .errors import EntropyUnavailableError

logger = logging.getLogger(__name__)

_HAS_GETRANDOM = hasattr(os, "getrandom") and hasattr(os, "GRND_NONBLOCK")


class RandomSource:
    """
    Cryptographically secure random bytes with a seeding check.

    Instances hold no mutable state and may be shared between threads.

    Attributes:
        nonblocking: Probe the kernel pool with GRND_NONBLOCK before drawing.
            Ignored on platforms without getrandom(), where os.urandom is
            always backed by a seeded generator.
    """

    def __init__(self, nonblocking: bool = True):
        self._nonblocking = nonblocking

    @property
    def nonblocking(self) -> bool:
        return self._nonblocking

    def status(self) -> bool:
        """
        Report whether the generator is seeded and ready.

        Returns:
            True if random bytes can be drawn without blocking
        """
        if not (self._nonblocking and _HAS_GETRANDOM):
            return True
        try:
            os.getrandom(1, os.GRND_NONBLOCK)
        except BlockingIOError:
            return False
        except OSError as e:
            logger.warning(f"getrandom() probe failed: {e}")
            return False
        return True

    def generate(self, n: int) -> bytes:
        """
        Return n cryptographically secure random bytes.

        Args:
            n: Number of bytes to produce (non-negative)

        Returns:
            Exactly n random bytes

        Raises:
            TypeError: If n is not an integer
            ValueError: If n is negative
            EntropyUnavailableError: If the generator is not seeded or fails
        """
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError(f"n must be int, got {type(n).__name__}")
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")

        if not self.status():
            logger.warning("Random number generator is not seeded")
            raise EntropyUnavailableError(
                "Random number generator has not been seeded",
                details={"requested": n},
            )

        try:
            data = self._read(n)
        except (OSError, NotImplementedError) as e:
            logger.warning(f"Random bytes generation failed: {e}")
            raise EntropyUnavailableError(
                f"Random bytes generation failed: {e}",
                details={"requested": n},
            ) from e

        if len(data) != n:
            raise EntropyUnavailableError(
                f"Random number generator returned {len(data)} of {n} bytes",
                details={"requested": n, "received": len(data)},
            )
        return data

    def _read(self, n: int) -> bytes:
        """Draw raw bytes from the operating system."""
        return os.urandom(n)
