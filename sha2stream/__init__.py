"""
sha2stream - streaming SHA-256 / SHA-512 implemented from scratch (FIPS 180-4).
"""

from .core.digest import sha, sha256, sha256_hex, sha512, sha512_hex
from .core.variants import SHA256, SHA512, get_variant

__version__ = "0.1.0"

__all__ = [
    'sha',
    'sha256',
    'sha256_hex',
    'sha512',
    'sha512_hex',
    'SHA256',
    'SHA512',
    'get_variant',
]
