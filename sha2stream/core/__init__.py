# Core SHA-2 Module
"""
Streaming SHA-2 implementation:
- Variant parameters (SHA-256, SHA-512)
- Block segmentation
- Streaming FIPS 180-4 padding
- Generic compression function
- Digest driver
"""

from .variants import Variant, WordSize, LengthSize, SHA256, SHA512, get_variant
from .segmenter import BlockSegmenter, split_blocks
from .padding import PaddedStream, PaddingState, Padder, MessageTooLongError, pad_message
from .compression import BlockSizeError, compress, message_schedule
from .digest import sha, sha256, sha256_hex, sha512, sha512_hex, serialize_state

__all__ = [
    'Variant',
    'WordSize',
    'LengthSize',
    'SHA256',
    'SHA512',
    'get_variant',
    'BlockSegmenter',
    'split_blocks',
    'PaddedStream',
    'PaddingState',
    'Padder',
    'MessageTooLongError',
    'pad_message',
    'BlockSizeError',
    'compress',
    'message_schedule',
    'sha',
    'sha256',
    'sha256_hex',
    'sha512',
    'sha512_hex',
    'serialize_state',
]
