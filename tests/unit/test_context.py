"""
Unit Tests for the secp256k1 Context

Covers creation, randomization, cloning, capability flags and the
sign/verify protocol.
"""

import copy
import hashlib

import pytest

from cxa_secp256k1 import (
    Context,
    ContextFlags,
    PrivateKey,
    PublicKey,
    Secp256k1Config,
    Signature,
    hash_message,
)
from cxa_secp256k1._backend import CURVE_ORDER
from cxa_secp256k1.errors import (
    ContextCapabilityError,
    EntropyUnavailableError,
    RandomizationError,
)


class TestContextLifecycle:
    """Test cases for context creation, randomization and cloning."""

    def test_new_context_is_randomized(self, context):
        """A context is randomized before it is handed out."""
        assert context.is_randomized
        assert context.flags == ContextFlags.SIGN | ContextFlags.VERIFY

    def test_create_classmethod(self):
        ctx = Context.create()
        assert isinstance(ctx, Context)
        assert ctx.is_randomized

    def test_randomization_failure_prevents_creation(self, failing_source):
        """An unseeded RNG never yields a usable context."""
        with pytest.raises(RandomizationError) as exc_info:
            Context(random_source=failing_source)
        assert isinstance(exc_info.value.__cause__, EntropyUnavailableError)

    def test_randomization_failure_on_generation_error(self, broken_source):
        with pytest.raises(RandomizationError):
            Context(random_source=broken_source)

    def test_randomize_with_explicit_seed(self, context):
        context.randomize(b"\x42" * 32)
        assert context.is_randomized

    def test_randomize_advances_generation(self, context):
        before = context._state.generation
        context.randomize()
        context.randomize(b"\x07" * 32)
        assert context._state.generation == before + 2

    def test_randomize_rejects_short_seed(self, context):
        with pytest.raises(ValueError):
            context.randomize(b"\x42" * 31)

    def test_randomize_rejects_non_bytes_seed(self, context):
        with pytest.raises(TypeError):
            context.randomize("not bytes")

    def test_failed_rerandomize_keeps_previous_state(self, context, failing_source):
        context._random_source = failing_source
        generation = context._state.generation
        with pytest.raises(RandomizationError):
            context.randomize()
        assert context.is_randomized
        assert context._state.generation == generation

    def test_clone_has_same_capability(self, context):
        twin = context.clone()
        assert twin is not context
        assert twin.flags == context.flags
        assert twin.is_randomized
        assert twin.config is context.config

    def test_clone_is_independent(self, context):
        """Re-randomizing a clone leaves the source untouched."""
        twin = context.clone()
        before = context._state
        twin.randomize(b"\x01" * 32)
        assert context._state is before
        assert twin._state is not before
        assert twin._lock is not context._lock

    def test_copy_module_uses_clone(self, context):
        assert isinstance(copy.copy(context), Context)
        assert copy.deepcopy(context) is not context

    def test_repr(self, context):
        assert "randomized=True" in repr(context)


class TestContextFlags:
    """Test cases for capability-restricted contexts."""

    def test_verify_only_context_is_not_randomized(self):
        ctx = Context(flags=ContextFlags.VERIFY)
        assert not ctx.is_randomized

    def test_verify_only_context_cannot_sign(self, private_key_one):
        ctx = Context(flags=ContextFlags.VERIFY)
        key = PrivateKey(ctx, private_key_one)
        with pytest.raises(ContextCapabilityError):
            ctx.sign(key, b"message")

    def test_verify_only_context_cannot_randomize(self):
        ctx = Context(flags=ContextFlags.VERIFY)
        with pytest.raises(ContextCapabilityError):
            ctx.randomize()

    def test_sign_only_context_cannot_verify(self, key_pair):
        signer = Context(flags=ContextFlags.SIGN)
        sig = signer.sign(key_pair.private_key, b"message")
        with pytest.raises(ContextCapabilityError):
            signer.verify(sig, key_pair.public_key, b"message")

    def test_verify_only_context_verifies(self, key_pair, context):
        sig = context.sign(key_pair.private_key, b"message")
        verifier = Context(flags=ContextFlags.VERIFY)
        assert verifier.verify(sig, key_pair.public_key, b"message") is True


class TestSignVerify:
    """Test cases for the hash-then-sign / hash-then-verify protocol."""

    def test_hash_message_is_sha256(self):
        assert hash_message(b"hello world") == hashlib.sha256(b"hello world").digest()

    def test_hash_message_encodes_text(self):
        assert hash_message("hello world") == hash_message(b"hello world")

    def test_hash_message_rejects_other_types(self):
        with pytest.raises(TypeError):
            hash_message(12345)

    def test_sign_and_verify(self, context, key_pair, sample_message):
        sig = context.sign(key_pair.private_key, sample_message)
        assert isinstance(sig, Signature)
        assert context.verify(sig, key_pair.public_key, sample_message) is True

    def test_modified_message_fails(self, context, key_pair, sample_message):
        sig = context.sign(key_pair.private_key, sample_message)
        assert context.verify(sig, key_pair.public_key, sample_message + b"!") is False

    def test_other_public_key_fails(self, context, key_pair, sample_message):
        other = context.generate_key_pair()
        sig = context.sign(key_pair.private_key, sample_message)
        assert context.verify(sig, other.public_key, sample_message) is False

    def test_signing_is_deterministic(self, context, key_pair, sample_message):
        first = context.sign(key_pair.private_key, sample_message)
        second = context.sign(key_pair.private_key, sample_message)
        assert first.to_der() == second.to_der()

    def test_signing_ignores_context_randomization(self, key_pair, sample_message):
        """Blinding must not change the deterministic signature."""
        first = Context().sign(key_pair.private_key, sample_message)
        second = Context().sign(key_pair.private_key, sample_message)
        assert first == second

    def test_empty_message(self, context, key_pair):
        sig = context.sign(key_pair.private_key, b"")
        assert context.verify(sig, key_pair.public_key, b"")

    def test_text_and_bytes_messages_agree(self, context, key_pair):
        sig = context.sign(key_pair.private_key, "hello world")
        assert context.verify(sig, key_pair.public_key, b"hello world")
        assert context.verify(sig, key_pair.public_key, bytearray(b"hello world"))
        assert context.verify(sig, key_pair.public_key, memoryview(b"hello world"))

    def test_signatures_are_low_s(self, context, key_pair):
        for i in range(16):
            sig = context.sign(key_pair.private_key, f"message {i}")
            assert sig.s <= CURVE_ORDER // 2

    def test_signature_owns_cloned_context(self, context, key_pair):
        sig = context.sign(key_pair.private_key, b"data")
        assert sig.context is not context
        assert sig.context.flags == context.flags

    def test_sign_rejects_wrong_key_type(self, context):
        with pytest.raises(TypeError):
            context.sign(b"\x01" * 32, b"data")

    def test_verify_rejects_wrong_types(self, context, key_pair):
        sig = context.sign(key_pair.private_key, b"data")
        with pytest.raises(TypeError):
            context.verify(sig.to_der(), key_pair.public_key, b"data")
        with pytest.raises(TypeError):
            context.verify(sig, key_pair.private_key, b"data")
        with pytest.raises(TypeError):
            context.verify(sig, key_pair.public_key, None)

    def test_high_s_rejected_by_default(self, context, key_pair, sample_message):
        """libsecp256k1 only accepts the lower-S form."""
        sig = context.sign(key_pair.private_key, sample_message)
        high = Signature.from_compact(
            context,
            sig.r.to_bytes(32, "big") + (CURVE_ORDER - sig.s).to_bytes(32, "big"),
        )
        assert context.verify(high, key_pair.public_key, sample_message) is False

    def test_high_s_accepted_when_not_enforced(self, key_pair, sample_message):
        ctx = Context(config=Secp256k1Config(enforce_low_s=False))
        sig = ctx.sign(key_pair.private_key, sample_message)
        high = Signature.from_compact(
            ctx,
            sig.r.to_bytes(32, "big") + (CURVE_ORDER - sig.s).to_bytes(32, "big"),
        )
        assert ctx.verify(high, key_pair.public_key, sample_message) is True

    def test_zero_signature_does_not_verify(self, context, key_pair):
        zero = Signature.from_compact(context, b"\x00" * 64)
        assert context.verify(zero, key_pair.public_key, b"data") is False


class TestContextFactories:
    """Test cases for the convenience constructors on Context."""

    def test_generate_key_pair(self, context):
        pair = context.generate_key_pair()
        assert PublicKey(context, pair.private_key) == pair.public_key

    def test_key_pair_from_private_key(self, context, private_key_one, generator_compressed):
        pair = context.key_pair_from_private_key(private_key_one)
        assert pair.private_key.data == private_key_one
        assert pair.public_key.to_compressed() == generator_compressed

    def test_public_key_from_data(self, context, generator_uncompressed, generator_compressed):
        key = context.public_key_from_data(generator_uncompressed)
        assert key.to_compressed() == generator_compressed

    def test_signature_from_der_encoded(self, context, key_pair):
        sig = context.sign(key_pair.private_key, b"data")
        assert context.signature_from_der_encoded(sig.to_der()) == sig

    def test_signature_from_compact(self, context, key_pair):
        sig = context.sign(key_pair.private_key, b"data")
        assert context.signature_from_compact(sig.to_compact()) == sig
