"""
Streaming SHA-2 Padding

Turns a sequence of message chunks into a sequence of full blocks that
is exactly the FIPS 180-4 padding of the whole message:

    message || 0x80 || 0x00... || bit length (big-endian)

The transform consumes one chunk at a time, so memory use does not
depend on the message length. Full chunks are forwarded unchanged.
The final (short) chunk receives the 0x80 marker, zero fill and the
length trailer. When the trailer does not fit behind the marker, an
extra block made only of zero fill and trailer is emitted.

Padding states:
- STREAMING: forwarding data blocks
- EMITTED_FIRST_OF_PAIR: marker block sent, trailer block still owed
- DONE: all padding emitted
"""

from enum import Enum
from typing import Iterable, Iterator, List, Optional

from .compression import BlockSizeError
from .variants import LengthSize, Variant
from .segmenter import BlockSegmenter, MessageSource


MARKER_BYTE = 0x80


class MessageTooLongError(OverflowError):
    """Raised when the message bit length does not fit the length field."""
    pass


def encode_bit_length(total_bytes: int, length_size: LengthSize) -> bytes:
    """
    Encode a message length (in bytes) as the big-endian bit-length trailer.

    Args:
        total_bytes: Total number of message bytes across the whole stream
        length_size: Width of the length field

    Returns:
        ``length_size.byte_size`` bytes

    Raises:
        MessageTooLongError: If the bit length needs more bits than the field has
    """
    bit_length = total_bytes * 8
    if bit_length >= 1 << length_size.value:
        raise MessageTooLongError(
            f"Message of {total_bytes} bytes is larger than a "
            f"{length_size.value}-bit length field allows"
        )
    return bit_length.to_bytes(length_size.byte_size, byteorder="big")


class Padder:
    """Builds the padded tail blocks for one block size / length width."""

    def __init__(self, block_size: int, length_size: LengthSize):
        if block_size <= length_size.byte_size:
            raise ValueError("Block size must exceed the length field width")
        self.block_size = block_size
        self.length_size = length_size

    def is_full_block(self, size: int) -> bool:
        return size == self.block_size

    def is_room(self, size: int) -> bool:
        """Can marker and length trailer follow ``size`` data bytes in one block?"""
        return size + self.length_size.byte_size < self.block_size

    def _pad_with_length(self, data: bytearray, total_bytes: int) -> bytes:
        trailer = encode_bit_length(total_bytes, self.length_size)
        data.extend(b"\x00" * (self.block_size - len(trailer) - len(data)))
        data.extend(trailer)
        return bytes(data)

    def single_pad(self, data: bytes, total_bytes: int) -> bytes:
        """
        Pad the final chunk into one block.

        ``total_bytes`` must count all previous blocks as well as ``data``.
        """
        result = bytearray(data)
        result.append(MARKER_BYTE)
        return self._pad_with_length(result, total_bytes)

    def double_pad_first(self, data: bytes) -> bytes:
        """Marker plus zero fill, for a final chunk with no room for the trailer."""
        result = bytearray(data)
        result.append(MARKER_BYTE)
        result.extend(b"\x00" * (self.block_size - len(result)))
        return bytes(result)

    def double_pad_second(self, total_bytes: int) -> bytes:
        """Zero fill plus trailer, emitted after ``double_pad_first``."""
        return self._pad_with_length(bytearray(), total_bytes)


class PaddingState(Enum):
    """Position of a PaddedStream within its padding tail."""
    STREAMING = "streaming"
    EMITTED_FIRST_OF_PAIR = "emitted_first_of_pair"
    DONE = "done"


class PaddedStream:
    """
    Iterator of padded, full-size blocks.

    Each instance owns its byte counter, so independent streams never
    share state.

    Example:
        >>> blocks = list(PaddedStream([b"a"], 64, LengthSize.LEN64))
        >>> len(blocks), blocks[0][:2].hex(), blocks[0][-1]
        (1, '6180', 8)
    """

    def __init__(self, chunks: Iterable[bytes], block_size: int,
                 length_size: LengthSize):
        """
        Initialize the padded stream.

        Args:
            chunks: Message chunks; all full-size except possibly the last
            block_size: Output block size in bytes
            length_size: Width of the length trailer
        """
        self._chunks = iter(chunks)
        self._padder = Padder(block_size, length_size)
        self.total_bytes = 0
        self.state = PaddingState.STREAMING
        self._error: Optional[MessageTooLongError] = None

    def __iter__(self) -> "PaddedStream":
        return self

    def __next__(self) -> bytes:
        if self.state is PaddingState.DONE:
            raise StopIteration

        if self.state is PaddingState.EMITTED_FIRST_OF_PAIR:
            self.state = PaddingState.DONE
            return self._padder.double_pad_second(self.total_bytes)

        if self._error is not None:
            raise self._error

        chunk = next(self._chunks, None)
        if chunk is None:
            # Message length was a multiple of the block size (or zero)
            block = self._padder.single_pad(b"", self.total_bytes)
            self.state = PaddingState.DONE
            return block

        size = len(chunk)
        if size > self._padder.block_size:
            raise BlockSizeError(
                f"Chunk of {size} bytes exceeds block size {self._padder.block_size}"
            )
        self.total_bytes += size
        try:
            encode_bit_length(self.total_bytes, self._padder.length_size)
        except MessageTooLongError as e:
            self._error = e
            raise

        if self._padder.is_full_block(size):
            return bytes(chunk)

        if self._padder.is_room(size):
            self.state = PaddingState.DONE
            return self._padder.single_pad(chunk, self.total_bytes)

        self.state = PaddingState.EMITTED_FIRST_OF_PAIR
        return self._padder.double_pad_first(chunk)


def padded_blocks(source: MessageSource, variant: Variant) -> PaddedStream:
    """Segment ``source`` and pad it for ``variant``."""
    chunks = BlockSegmenter(source, variant.block_size)
    return PaddedStream(chunks, variant.block_size, variant.length_size)


def pad_message(data: bytes, variant: Variant) -> List[bytes]:
    """Return every padded block of an in-memory message."""
    return list(padded_blocks(data, variant))
