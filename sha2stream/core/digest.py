"""
SHA-2 Digest Driver

Wires the pipeline together for one digest computation:

    message -> BlockSegmenter -> PaddedStream -> compress -> digest bytes

The state starts at the variant's H0, every padded block is folded in
emission order, and the final state is written out word by word in
big-endian order (32 bytes for SHA-256, 64 bytes for SHA-512).
"""

from typing import Callable, Optional, Sequence

from .compression import compress
from .padding import padded_blocks
from .segmenter import MessageSource
from .variants import SHA256, SHA512, Variant


# Called after each block as observer(index, block, new_state)
BlockObserver = Callable[[int, bytes, tuple], None]


def serialize_state(state: Sequence[int], variant: Variant) -> bytes:
    """Write the hash state as big-endian words, in index order."""
    return b"".join(word.to_bytes(variant.word_bytes, byteorder="big") for word in state)


def sha(variant: Variant, message: MessageSource,
        observer: Optional[BlockObserver] = None) -> bytes:
    """
    Compute a SHA-2 digest.

    Args:
        variant: SHA256 or SHA512
        message: bytes-like object, binary stream or iterable of byte values
        observer: Optional hook called after every compressed block

    Returns:
        ``variant.digest_size`` digest bytes

    Example:
        >>> sha(SHA256, b"abc").hex()[:16]
        'ba7816bf8f01cfea'
    """
    state = variant.h0
    for index, block in enumerate(padded_blocks(message, variant)):
        state = compress(state, block, variant)
        if observer is not None:
            observer(index, block, state)
    return serialize_state(state, variant)


def sha256(data: MessageSource) -> bytes:
    """
    Compute the SHA-256 hash of the input data.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return sha(SHA256, data)


def sha256_hex(data: MessageSource) -> str:
    """Compute SHA-256 hash and return as hexadecimal string."""
    return sha256(data).hex()


def sha256_string(text: str, encoding: str = 'utf-8') -> bytes:
    """Compute SHA-256 hash of a string."""
    return sha256(text.encode(encoding))


def sha512(data: MessageSource) -> bytes:
    """Compute the SHA-512 hash of the input data."""
    return sha(SHA512, data)


def sha512_hex(data: MessageSource) -> str:
    """Compute SHA-512 hash and return as hexadecimal string."""
    return sha512(data).hex()


def sha512_string(text: str, encoding: str = 'utf-8') -> bytes:
    """Compute SHA-512 hash of a string."""
    return sha512(text.encode(encoding))


# Self-test when run directly
if __name__ == "__main__":
    # Test vectors from NIST
    test_cases = [
        (SHA256, b"", "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"),
        (SHA256, b"abc", "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"),
        (SHA256, b"abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq",
         "248d6a61d20638b8e5c026930c3e6039a33ce45964ff2167f6ecedd419db06c1"),
        (SHA512, b"abc",
         "ddaf35a193617abacc417349ae20413112e6fa4e89a97ea20a9eeee64b55d39a"
         "2192992a274fc1a836ba3c23a3feebbd454d4423643ce80e2a9ac94fa54ca49f"),
        (SHA512, b"abcdefghbcdefghicdefghijdefghijkefghijklfghijklmghijklmnhijklmno"
                 b"ijklmnopjklmnopqklmnopqrlmnopqrsmnopqrstnopqrstu",
         "8e959b75dae313da8cf4f72814fc143f8f7779c6eb9f7fa17299aeadb6889018"
         "501d289e4900f7e4331b99dec4b5433ac7d329eeb6dd26545e96e55b874be909"),
    ]

    print("SHA-2 Implementation Test")
    print("=" * 60)

    all_passed = True
    for variant, data, expected in test_cases:
        result = sha(variant, data).hex()
        passed = result == expected
        all_passed = all_passed and passed

        status = "✓ PASS" if passed else "✗ FAIL"
        print(f"\n{variant.name} input: {data[:50]}{'...' if len(data) > 50 else ''}")
        print(f"Expected: {expected}")
        print(f"Got:      {result}")
        print(f"Status:   {status}")

    print("\n" + "=" * 60)
    print(f"Overall: {'All tests passed!' if all_passed else 'Some tests failed!'}")
