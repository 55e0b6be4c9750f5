# CXA secp256k1 Test Configuration
# This file contains test settings and fixtures

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from cxa_secp256k1 import Context, RandomSource, set_config

# Generator point G encodings (public key of private key 1)
GENERATOR_COMPRESSED = bytes.fromhex(
    "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
)
GENERATOR_UNCOMPRESSED = bytes.fromhex(
    "0479be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)

PRIVATE_KEY_ONE = (1).to_bytes(32, "big")


class FailingRandomSource(RandomSource):
    """Random source whose generator always reports it is unseeded."""

    def status(self) -> bool:
        return False


class BrokenRandomSource(RandomSource):
    """Random source whose byte generation fails after the seeding check."""

    def _read(self, n: int) -> bytes:
        raise OSError("entropy device unavailable")


@pytest.fixture(autouse=True)
def reset_default_config():
    """Discard any process-wide configuration a test installed."""
    yield
    set_config(None)


@pytest.fixture(scope="session")
def shared_context():
    """One randomized context reused across the session."""
    return Context()


@pytest.fixture
def context():
    """A fresh randomized context."""
    return Context()


@pytest.fixture
def failing_source():
    return FailingRandomSource()


@pytest.fixture
def broken_source():
    return BrokenRandomSource()


@pytest.fixture
def sample_message():
    return b"hello world"


@pytest.fixture
def key_pair(context):
    return context.generate_key_pair()


@pytest.fixture
def generator_compressed():
    return GENERATOR_COMPRESSED


@pytest.fixture
def generator_uncompressed():
    return GENERATOR_UNCOMPRESSED


@pytest.fixture
def private_key_one():
    return PRIVATE_KEY_ONE
