"""
NIST Byte-Oriented Test Vectors

Reads the SHAVS response files published by NIST (SHA256ShortMsg.rsp,
SHA512LongMsg.rsp, ...) and checks the digest implementation against
them.

File format:
    # comment lines
    [L = 32]            digest length in bytes for the section

    Len = 24            message length in bits
    Msg = 616263        message, hex ("00" placeholder when Len = 0)
    MD = ba7816bf...    expected digest, hex
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from ..core.digest import sha
from ..core.variants import Variant, VARIANTS
from ..integration.event_logger import EventLogger, EventType


@dataclass
class TestVector:
    """One Len/Msg/MD triple from a response file."""
    __test__ = False  # not a pytest test class

    name: str
    length_bits: int
    message: bytes
    digest: bytes
    digest_length: Optional[int] = None  # from the [L = n] section header


def _parse_header(line: str) -> Optional[int]:
    # "[L = 32]"
    key, _, value = line.strip("[]").partition("=")
    if key.strip() == "L" and value.strip().isdigit():
        return int(value)
    return None


def parse_rsp(text: str) -> List[TestVector]:
    """
    Parse the contents of a NIST ``.rsp`` file.

    Raises:
        ValueError: On malformed lines or a non byte-aligned message length
    """
    vectors = []
    section_length = None
    length_bits = None
    message = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("["):
            section_length = _parse_header(line)
            continue

        key, sep, value = line.partition("=")
        if not sep:
            raise ValueError(f"Line {lineno}: expected 'key = value', got {line!r}")
        key = key.strip()
        value = value.strip()

        if key == "Len":
            length_bits = int(value)
            if length_bits % 8:
                raise ValueError(
                    f"Line {lineno}: bit length {length_bits} is not a whole number of bytes"
                )
        elif key == "Msg":
            message = bytes.fromhex(value)
        elif key == "MD":
            if length_bits is None or message is None:
                raise ValueError(f"Line {lineno}: MD without preceding Len and Msg")
            if len(message) < length_bits // 8:
                raise ValueError(
                    f"Line {lineno}: Msg has {len(message)} bytes but Len is {length_bits} bits"
                )
            # Len = 0 carries a placeholder "00" message
            message = message[:length_bits // 8]
            vectors.append(TestVector(
                name=f"len{length_bits}",
                length_bits=length_bits,
                message=message,
                digest=bytes.fromhex(value),
                digest_length=section_length,
            ))
            length_bits = None
            message = None

    return vectors


def load_rsp(path: os.PathLike) -> List[TestVector]:
    """Read and parse a ``.rsp`` file."""
    with open(path, 'r', encoding='ascii') as f:
        return parse_rsp(f.read())


def variant_for_vector(vector: TestVector) -> Variant:
    """Pick the variant whose digest size matches the vector."""
    size = vector.digest_length or len(vector.digest)
    for variant in VARIANTS.values():
        if variant.digest_size == size:
            return variant
    raise ValueError(f"No SHA-2 variant produces {size}-byte digests")


def run_vectors(vectors: List[TestVector], variant: Optional[Variant] = None,
                event_logger: Optional[EventLogger] = None) -> List[TestVector]:
    """
    Check every vector.

    Args:
        vectors: Parsed test vectors
        variant: Force a variant; by default it follows each vector's digest size
        event_logger: Optional logger receiving VECTOR_PASSED/VECTOR_FAILED events

    Returns:
        The vectors whose computed digest did not match
    """
    failures = []
    for vector in vectors:
        algo = variant or variant_for_vector(vector)
        result = sha(algo, vector.message)
        passed = result == vector.digest
        if not passed:
            failures.append(vector)
        if event_logger is not None:
            event_logger.log(
                EventType.VECTOR_PASSED if passed else EventType.VECTOR_FAILED,
                vector.name, algo=algo.name,
            )
    return failures
