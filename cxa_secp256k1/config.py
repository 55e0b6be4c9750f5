"""
CXA secp256k1 - Runtime Configuration.

Settings are held in an immutable dataclass. A process-wide default is
built lazily from the environment on first use and may be replaced with
set_config(). Contexts capture the configuration they were created with,
so replacing the default never affects contexts that already exist.

Environment variables:
    CXA_SECP256K1_ENFORCE_LOW_S: Reject high-S signatures on verify
    CXA_SECP256K1_VERIFY_KEY_PAIRS: Check KeyPair halves correspond
    CXA_SECP256K1_ENTROPY_NONBLOCKING: Report an unseeded RNG instead of blocking

Example:
    >>> from cxa_secp256k1.config import Secp256k1Config, set_config
    >>> set_config(Secp256k1Config(verify_key_pairs=False))

Author: CXA Development Team
Version: 1.0.0
"""

# ============================================================================
# Import Statements
# ============================================================================

import os
import logging
import threading
from dataclasses import dataclass
from typing import Optional, Mapping

logger = logging.getLogger(__name__)

ENV_PREFIX = "CXA_SECP256K1_"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class Secp256k1Config:
    """
    Behavior switches for contexts and the objects they create.

    Attributes:
        enforce_low_s: Verification returns False for signatures whose s
            value is above half the curve order, matching libsecp256k1.
            Signing always produces low-S signatures regardless.
        verify_key_pairs: KeyPair construction checks that the public key
            is derived from the private key.
        entropy_nonblocking: On platforms with getrandom(), fail fast with
            EntropyUnavailableError when the kernel pool is not yet seeded.
    """

    enforce_low_s: bool = True
    verify_key_pairs: bool = True
    entropy_nonblocking: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Secp256k1Config":
        """
        Build a configuration from CXA_SECP256K1_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ValueError: If a variable holds something other than a boolean
        """
        environ = os.environ if environ is None else environ
        values = {}
        for field_name in ("enforce_low_s", "verify_key_pairs", "entropy_nonblocking"):
            env_name = ENV_PREFIX + field_name.upper()
            raw = environ.get(env_name)
            if raw is not None:
                values[field_name] = _parse_bool(env_name, raw)
        config = cls(**values)
        if values:
            logger.debug(f"Configuration loaded from environment: {config}")
        return config


_default_config: Optional[Secp256k1Config] = None
_config_lock = threading.Lock()


def get_config() -> Secp256k1Config:
    """Return the process-wide default configuration."""
    global _default_config
    if _default_config is None:
        with _config_lock:
            if _default_config is None:
                _default_config = Secp256k1Config.from_env()
    return _default_config


def set_config(config: Optional[Secp256k1Config]) -> None:
    """
    Replace the process-wide default configuration.

    Passing None discards the current default so the next get_config()
    call rebuilds it from the environment.
    """
    global _default_config
    if config is not None and not isinstance(config, Secp256k1Config):
        raise TypeError(f"config must be Secp256k1Config, got {type(config).__name__}")
    with _config_lock:
        _default_config = config
    logger.info(f"Default configuration replaced: {config}")
