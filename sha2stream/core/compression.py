"""
SHA-2 Compression Function (From Scratch)

Implements the block compression of FIPS 180-4 once, parametrized by a
Variant, so the same code serves SHA-256 (32-bit words, 64 rounds) and
SHA-512 (64-bit words, 80 rounds).

Components:
- Bitwise primitives: rotr, shr, Ch, Maj, Σ, σ
- Message Schedule: expands 16 words to 64 or 80 words
- Compression: 64 or 80 rounds folded into the running hash state

Python integers are unbounded, so every addition is masked back to the
word width of the variant.
"""

from typing import List, Sequence, Tuple

from .variants import Variant


class BlockSizeError(ValueError):
    """Raised when a block or hash state of the wrong size reaches the core."""
    pass


def rotr(x: int, n: int, bits: int) -> int:
    """Right rotate a ``bits``-wide integer by ``n`` positions."""
    mask = (1 << bits) - 1
    return ((x >> n) | (x << (bits - n))) & mask


def shr(x: int, n: int) -> int:
    """Logical right shift."""
    return x >> n


def ch(x: int, y: int, z: int, mask: int) -> int:
    """Choice function: if x then y else z (bitwise)."""
    return (x & y) ^ (~x & mask & z)


def maj(x: int, y: int, z: int) -> int:
    """Majority function: majority vote of bits."""
    return (x & y) ^ (x & z) ^ (y & z)


def big_sigma(x: int, amounts: Tuple[int, int, int], bits: int) -> int:
    """Uppercase Sigma: XOR of three rotations. Used in the rounds."""
    r1, r2, r3 = amounts
    return rotr(x, r1, bits) ^ rotr(x, r2, bits) ^ rotr(x, r3, bits)


def small_sigma(x: int, amounts: Tuple[int, int, int], bits: int) -> int:
    """Lowercase sigma: two rotations and a shift. Used in the message schedule."""
    r1, r2, s = amounts
    return rotr(x, r1, bits) ^ rotr(x, r2, bits) ^ shr(x, s)


def bytes_to_words(block: bytes, variant: Variant) -> List[int]:
    """Convert a block into big-endian words (always 16 of them)."""
    size = variant.word_bytes
    return [
        int.from_bytes(block[i:i + size], byteorder="big")
        for i in range(0, len(block), size)
    ]


def message_schedule(block: bytes, variant: Variant) -> List[int]:
    """
    Expand a block into the full message schedule.

    For t from 16 to rounds - 1:
        W[t] = σ1(W[t-2]) + W[t-7] + σ0(W[t-15]) + W[t-16]

    Raises:
        BlockSizeError: If the block is not exactly ``variant.block_size`` bytes
    """
    if len(block) != variant.block_size:
        raise BlockSizeError(
            f"Expected {variant.block_size}-byte block, got {len(block)}"
        )

    bits = variant.word_bits
    mask = variant.mask
    w = bytes_to_words(block, variant)
    for t in range(16, variant.rounds):
        s0 = small_sigma(w[t - 15], variant.small_sigma0, bits)
        s1 = small_sigma(w[t - 2], variant.small_sigma1, bits)
        w.append((s1 + w[t - 7] + s0 + w[t - 16]) & mask)
    return w


def compress(state: Sequence[int], block: bytes, variant: Variant) -> Tuple[int, ...]:
    """
    Fold one block into the hash state.

    Args:
        state: Current hash state (8 words)
        block: Exactly ``variant.block_size`` bytes
        variant: SHA-2 parameter set

    Returns:
        New hash state; ``state`` itself is left untouched

    Raises:
        BlockSizeError: On a malformed block or state
    """
    if len(state) != 8:
        raise BlockSizeError(f"Hash state must have 8 words, got {len(state)}")

    w = message_schedule(block, variant)
    bits = variant.word_bits
    mask = variant.mask
    k = variant.k

    a, b, c, d, e, f, g, h = state

    for t in range(variant.rounds):
        t1 = (h + big_sigma(e, variant.big_sigma1, bits) + ch(e, f, g, mask)
              + k[t] + w[t]) & mask
        t2 = (big_sigma(a, variant.big_sigma0, bits) + maj(a, b, c)) & mask

        h = g
        g = f
        f = e
        e = (d + t1) & mask
        d = c
        c = b
        b = a
        a = (t1 + t2) & mask

    return tuple(
        (old + new) & mask
        for old, new in zip(state, (a, b, c, d, e, f, g, h))
    )
