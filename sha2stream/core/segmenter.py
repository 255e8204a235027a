"""
Block Segmenter

Splits a message into block-sized chunks. Every chunk is exactly
``block_size`` bytes except possibly the last one, which is shorter.
An empty message yields no chunks at all.

Supported message sources:
- bytes, bytearray, memoryview (sliced without copying the whole message)
- binary streams exposing ``read(n)`` (files, BytesIO, pipes)
- any other iterable of ints in 0..255
"""

from typing import Iterable, Iterator, Union, BinaryIO


MessageSource = Union[bytes, bytearray, memoryview, BinaryIO, Iterable[int]]


class BlockSegmenter:
    """
    Single-pass iterator of message chunks.

    Example:
        >>> list(BlockSegmenter(b"abcdefghij", 4))
        [b'abcd', b'efgh', b'ij']
    """

    def __init__(self, source: MessageSource, block_size: int):
        """
        Initialize the segmenter.

        Args:
            source: The message to split
            block_size: Chunk length in bytes
        """
        if block_size < 1:
            raise ValueError("Block size must be positive")

        self._block_size = block_size
        self._exhausted = False

        if isinstance(source, (bytes, bytearray, memoryview)):
            self._chunks = self._from_buffer(memoryview(source).cast("B"))
        elif hasattr(source, "read"):
            self._chunks = self._from_stream(source)
        else:
            self._chunks = self._from_iterable(source)

    @property
    def block_size(self) -> int:
        return self._block_size

    def __iter__(self) -> "BlockSegmenter":
        return self

    def __next__(self) -> bytes:
        if self._exhausted:
            raise StopIteration
        try:
            return next(self._chunks)
        except StopIteration:
            self._exhausted = True
            raise

    def _from_buffer(self, view: memoryview) -> Iterator[bytes]:
        for offset in range(0, len(view), self._block_size):
            yield bytes(view[offset:offset + self._block_size])

    def _from_stream(self, stream: BinaryIO) -> Iterator[bytes]:
        # read() may return fewer bytes than asked for before EOF
        pending = b""
        while True:
            data = stream.read(self._block_size - len(pending))
            if data is None:
                # Raw non-blocking stream with no data available yet
                raise BlockingIOError("Non-blocking streams are not supported")
            if not data:
                break
            pending += data
            if len(pending) == self._block_size:
                yield pending
                pending = b""
        if pending:
            yield pending

    def _from_iterable(self, values: Iterable[int]) -> Iterator[bytes]:
        chunk = bytearray()
        for value in values:
            chunk.append(value)
            if len(chunk) == self._block_size:
                yield bytes(chunk)
                chunk = bytearray()
        if chunk:
            yield bytes(chunk)


def split_blocks(source: MessageSource, block_size: int) -> Iterator[bytes]:
    """Yield successive ``block_size``-byte chunks of ``source``."""
    return BlockSegmenter(source, block_size)
