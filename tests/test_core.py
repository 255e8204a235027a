"""
Unit tests for the core SHA-2 modules.

Tests:
- Variant parameters
- Block Segmenter
- Bitwise primitives and message schedule
- Compression function
- SHA-256 / SHA-512 digests
"""

import dataclasses
import hashlib
import io

import pytest
from cryptography.hazmat.primitives import hashes

from sha2stream.core.variants import (
    SHA256, SHA512, VARIANTS, LengthSize, WordSize, get_variant
)
from sha2stream.core.segmenter import BlockSegmenter, split_blocks
from sha2stream.core.compression import (
    rotr, ch, maj, big_sigma, small_sigma, bytes_to_words,
    message_schedule, compress
)
from sha2stream.core.padding import pad_message
from sha2stream.core.digest import (
    sha, sha256, sha256_hex, sha256_string, sha512, sha512_hex,
    sha512_string, serialize_state
)


def reference(variant, data):
    """Digest from the cryptography backend."""
    algorithm = hashes.SHA256() if variant is SHA256 else hashes.SHA512()
    digest = hashes.Hash(algorithm)
    digest.update(data)
    return digest.finalize()


class ShortReadStream(io.RawIOBase):
    """Stream that returns at most `step` bytes per read, like a pipe."""

    def __init__(self, data, step):
        self._data = data
        self._pos = 0
        self._step = step

    def readable(self):
        return True

    def read(self, n=-1):
        if n < 0:
            n = len(self._data)
        n = min(n, self._step)
        chunk = self._data[self._pos:self._pos + n]
        self._pos += len(chunk)
        return chunk


class NonBlockingStream(io.RawIOBase):
    """Raw stream whose reads follow a script; None means no data yet."""

    def __init__(self, script):
        self._script = list(script)

    def readable(self):
        return True

    def read(self, n=-1):
        return self._script.pop(0) if self._script else b""


class TestVariants:
    """Unit tests for variant parameters."""

    def test_sha256_parameters(self):
        assert SHA256.word_size is WordSize.WORD32
        assert SHA256.block_size == 64
        assert SHA256.length_size is LengthSize.LEN64
        assert SHA256.rounds == 64
        assert SHA256.digest_size == 32
        assert SHA256.mask == 0xFFFFFFFF

    def test_sha512_parameters(self):
        assert SHA512.word_size is WordSize.WORD64
        assert SHA512.block_size == 128
        assert SHA512.length_size is LengthSize.LEN128
        assert SHA512.rounds == 80
        assert SHA512.digest_size == 64
        assert SHA512.mask == 0xFFFFFFFFFFFFFFFF

    def test_length_field_bytes(self):
        assert LengthSize.LEN64.byte_size == 8
        assert LengthSize.LEN128.byte_size == 16

    def test_constants_fit_word_width(self):
        for variant in VARIANTS.values():
            assert len(variant.h0) == 8
            assert all(0 <= x <= variant.mask for x in variant.h0)
            assert all(0 <= x <= variant.mask for x in variant.k)

    def test_sha512_constants_extend_sha256(self):
        """SHA-256 constants are the high halves of the SHA-512 ones."""
        assert tuple(k >> 32 for k in SHA512.k[:64]) == SHA256.k
        assert tuple(h >> 32 for h in SHA512.h0) == SHA256.h0

    @pytest.mark.parametrize("name,expected", [
        ("sha256", SHA256),
        ("SHA-256", SHA256),
        ("sha512", SHA512),
        ("SHA_512", SHA512),
    ])
    def test_get_variant(self, name, expected):
        assert get_variant(name) is expected

    def test_unknown_variant_rejected(self):
        with pytest.raises(ValueError):
            get_variant("sha1")

    def test_variant_is_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            SHA256.block_size = 32


class TestSegmenter:
    """Unit tests for the Block Segmenter."""

    @pytest.mark.parametrize("block_size,length,expected_sizes", [
        (8, 0, []),
        (8, 1, [1]),
        (8, 5, [5]),
        (8, 8, [8]),
        (8, 9, [8, 1]),
        (4, 5, [4, 1]),
        (4, 8, [4, 4]),
        (4, 9, [4, 4, 1]),
    ])
    def test_chunk_sizes(self, block_size, length, expected_sizes):
        data = bytes(range(length))
        chunks = list(BlockSegmenter(data, block_size))
        assert [len(c) for c in chunks] == expected_sizes
        assert b"".join(chunks) == data

    def test_empty_input_yields_no_chunks(self):
        assert list(BlockSegmenter(b"", 64)) == []

    def test_iterable_of_ints(self):
        chunks = list(BlockSegmenter(iter(range(9)), 4))
        assert chunks == [bytes([0, 1, 2, 3]), bytes([4, 5, 6, 7]), bytes([8])]

    def test_stream_source(self):
        data = bytes(range(200))
        chunks = list(BlockSegmenter(io.BytesIO(data), 64))
        assert [len(c) for c in chunks] == [64, 64, 64, 8]
        assert b"".join(chunks) == data

    def test_short_reads_are_accumulated(self):
        """Only the last chunk may be short, even if the stream reads short."""
        data = bytes(range(130))
        chunks = list(BlockSegmenter(ShortReadStream(data, 7), 64))
        assert [len(c) for c in chunks] == [64, 64, 2]
        assert b"".join(chunks) == data

    def test_non_blocking_stream_without_data_rejected(self):
        """A None read is not end of file; hashing must not stop early."""
        data = bytes(range(200))
        stream = NonBlockingStream([data[:64], None, data[64:]])
        with pytest.raises(BlockingIOError):
            sha(SHA256, stream)

    def test_memoryview_and_bytearray(self):
        data = bytearray(b"x" * 70)
        assert [len(c) for c in split_blocks(memoryview(data), 64)] == [64, 6]
        assert [len(c) for c in split_blocks(data, 64)] == [64, 6]

    def test_single_pass(self):
        segmenter = BlockSegmenter(b"abc", 2)
        assert list(segmenter) == [b"ab", b"c"]
        assert list(segmenter) == []

    def test_invalid_block_size(self):
        with pytest.raises(ValueError):
            BlockSegmenter(b"abc", 0)


class TestPrimitives:
    """Unit tests for the bitwise functions."""

    @pytest.mark.parametrize("x,y,z,expected", [
        (0x00ff00ff, 0xaaaaaaaa, 0x55555555, 0x55aa55aa),
        (0xff00ff00, 0xaaaaaaaa, 0x55555555, 0xaa55aa55),
        (0xaaaaaaaa, 0xaaaaaaaa, 0x55555555, 0xffffffff),
        (0x55555555, 0xaaaaaaaa, 0x55555555, 0),
        (0xaaaaaaaa, 0x55555555, 0xaaaaaaaa, 0),
    ])
    def test_ch_32(self, x, y, z, expected):
        assert ch(x, y, z, 0xFFFFFFFF) == expected

    def test_ch_64(self):
        mask = 0xFFFFFFFFFFFFFFFF
        assert ch(0x00ff00ff00ff00ff, 0xaaaaaaaaaaaaaaaa,
                  0x5555555555555555, mask) == 0x55aa55aa55aa55aa

    @pytest.mark.parametrize("x,y,z,expected", [
        (0x0f0f0f0f, 0x00ff00ff, 0x0000ffff, 0x000f0fff),
        (0x0000ffff, 0xa5a5a5a5, 0xffff0000, 0xa5a5a5a5),
    ])
    def test_maj(self, x, y, z, expected):
        assert maj(x, y, z) == expected

    def test_rotr_wraps_low_bits(self):
        assert rotr(0x00000001, 1, 32) == 0x80000000
        assert rotr(0x0000000000000001, 1, 64) == 0x8000000000000000
        assert rotr(0x12345678, 8, 32) == 0x78123456

    def test_big_sigma(self):
        assert big_sigma(0xffff0000, (1, 4, 8), 32) == 0x70ff8f00
        assert big_sigma(0x0000ffff, (1, 4, 8), 32) == 0x8f0070ff

    def test_small_sigma(self):
        assert small_sigma(0xffff0000, (1, 4, 8), 32) == 0x70ff8f00
        assert small_sigma(0x0000ffff, (1, 4, 8), 32) == 0x700070ff


class TestMessageSchedule:
    """Unit tests for message schedule expansion."""

    def test_schedule_lengths(self):
        assert len(message_schedule(bytes(64), SHA256)) == 64
        assert len(message_schedule(bytes(128), SHA512)) == 80

    def test_first_words_are_block_words(self):
        block = bytes(range(64))
        w = message_schedule(block, SHA256)
        assert w[:16] == bytes_to_words(block, SHA256)
        assert w[0] == 0x00010203

    def test_words_stay_in_range(self):
        block = b"\xff" * 128
        w = message_schedule(block, SHA512)
        assert all(0 <= x <= SHA512.mask for x in w)

    def test_abc_schedule_word_16(self):
        """W[16] for the padded 'abc' block (FIPS 180-2 appendix B.1)."""
        w = message_schedule(pad_message(b"abc", SHA256)[0], SHA256)
        assert w[16] == 0x61626380


class TestCompression:
    """Unit tests for the compression function."""

    def test_single_byte_scenario(self):
        """'a' pads to one block 61 80 00...00 08 and compresses to SHA-256('a')."""
        blocks = pad_message(b"a", SHA256)
        assert len(blocks) == 1
        block = blocks[0]
        assert block == b"\x61\x80" + b"\x00" * 61 + b"\x08"

        state = compress(SHA256.h0, block, SHA256)
        assert serialize_state(state, SHA256) == hashlib.sha256(b"a").digest()

    def test_sha512_abc_block(self):
        block = bytes.fromhex(
            "6162638000000000000000000000000000000000000000000000000000000000"
            "0000000000000000000000000000000000000000000000000000000000000000"
            "0000000000000000000000000000000000000000000000000000000000000000"
            "0000000000000000000000000000000000000000000000000000000000000018"
        )
        state = compress(SHA512.h0, block, SHA512)
        assert serialize_state(state, SHA512).hex() == (
            "ddaf35a193617abacc417349ae20413112e6fa4e89a97ea20a9eeee64b55d39a"
            "2192992a274fc1a836ba3c23a3feebbd454d4423643ce80e2a9ac94fa54ca49f"
        )

    def test_returns_new_state(self):
        state = list(SHA256.h0)
        new_state = compress(state, bytes(64), SHA256)
        assert state == list(SHA256.h0)
        assert isinstance(new_state, tuple)
        assert len(new_state) == 8
        assert new_state != tuple(state)

    def test_block_order_matters(self):
        one, two = b"\x01" * 64, b"\x02" * 64
        forward = compress(compress(SHA256.h0, one, SHA256), two, SHA256)
        backward = compress(compress(SHA256.h0, two, SHA256), one, SHA256)
        assert forward != backward


class TestSHA256:
    """Unit tests for SHA-256 digests."""

    def test_empty_string(self):
        expected = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        assert sha256_hex(b"") == expected

    def test_abc(self):
        expected = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        assert sha256_hex(b"abc") == expected

    def test_two_block_message(self):
        msg = b"abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq"
        expected = "248d6a61d20638b8e5c026930c3e6039a33ce45964ff2167f6ecedd419db06c1"
        assert sha256_hex(msg) == expected

    def test_string_helper(self):
        expected = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        assert sha256_string("hello").hex() == expected

    def test_deterministic(self):
        msg = b"test message"
        assert sha256(msg) == sha256(msg)

    def test_returns_32_bytes(self):
        assert len(sha256(b"test")) == 32

    def test_different_inputs_different_hashes(self):
        assert sha256(b"a") != sha256(b"b")
        assert sha256(b"") != sha256(b"\x00")

    @pytest.mark.parametrize("length", [0, 1, 55, 56, 57, 63, 64, 65, 119, 120, 127, 128, 129, 1000])
    def test_matches_reference_at_boundaries(self, length):
        data = bytes(i % 251 for i in range(length))
        assert sha256(data) == hashlib.sha256(data).digest()
        assert sha256(data) == reference(SHA256, data)

    def test_stream_and_iterable_sources_agree(self):
        data = bytes(range(256)) * 40
        expected = hashlib.sha256(data).digest()
        assert sha(SHA256, io.BytesIO(data)) == expected
        assert sha(SHA256, iter(data)) == expected
        assert sha(SHA256, ShortReadStream(data, 13)) == expected


class TestSHA512:
    """Unit tests for SHA-512 digests."""

    def test_empty_string(self):
        assert sha512_hex(b"") == (
            "cf83e1357eefb8bdf1542850d66d8007d620e4050b5715dc83f4a921d36ce9ce"
            "47d0d13c5d85f2b0ff8318d2877eec2f63b931bd47417a81a538327af927da3e"
        )

    def test_abc(self):
        assert sha512_hex(b"abc") == (
            "ddaf35a193617abacc417349ae20413112e6fa4e89a97ea20a9eeee64b55d39a"
            "2192992a274fc1a836ba3c23a3feebbd454d4423643ce80e2a9ac94fa54ca49f"
        )

    def test_two_block_message(self):
        msg = (b"abcdefghbcdefghicdefghijdefghijkefghijklfghijklmghijklmnhijklmno"
               b"ijklmnopjklmnopqklmnopqrlmnopqrsmnopqrstnopqrstu")
        assert sha512_hex(msg) == (
            "8e959b75dae313da8cf4f72814fc143f8f7779c6eb9f7fa17299aeadb6889018"
            "501d289e4900f7e4331b99dec4b5433ac7d329eeb6dd26545e96e55b874be909"
        )

    def test_returns_64_bytes(self):
        assert len(sha512(b"test")) == 64

    def test_string_helper(self):
        assert sha512_string("abc") == sha512(b"abc")

    @pytest.mark.parametrize("length", [0, 1, 111, 112, 113, 127, 128, 129, 239, 240, 255, 256, 1000])
    def test_matches_reference_at_boundaries(self, length):
        data = bytes(i % 251 for i in range(length))
        assert sha512(data) == hashlib.sha512(data).digest()
        assert sha512(data) == reference(SHA512, data)


class TestDigestDriver:
    """Tests for the digest driver wiring."""

    def test_observer_sees_every_block_in_order(self):
        seen = []
        data = b"x" * 150
        sha(SHA256, data, observer=lambda i, block, state: seen.append((i, len(block))))
        assert seen == [(0, 64), (1, 64), (2, 64)]

    def test_observer_final_state_is_digest(self):
        states = []
        digest = sha(SHA512, b"abc", observer=lambda i, b, s: states.append(s))
        assert serialize_state(states[-1], SHA512) == digest

    def test_serialize_state_is_big_endian(self):
        state = (1, 2, 3, 4, 5, 6, 7, 8)
        out = serialize_state(state, SHA256)
        assert out[:4] == b"\x00\x00\x00\x01"
        assert len(out) == 32
        assert len(serialize_state(state, SHA512)) == 64
