"""
File Digest Module

Hashes files with the streaming SHA-2 pipeline:
- File selection (explicit list, or every regular file in a directory)
- Streaming digest (the file is never loaded whole into RAM)
- Independent cross-check against the `cryptography` hash backend

Files are read through the same Block Segmenter and Padding Transform as
in-memory messages; there is no separate padding path for files.

Output line format (as printed by the CLI):
    <hex digest> <path>
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.backends import default_backend

from ..core.digest import sha
from ..core.variants import Variant, SHA256, SHA512
from ..integration.event_logger import EventLogger, EventType


# Read size for the reference backend (1 MB default)
DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1 MB

REFERENCE_ALGORITHMS = {
    SHA256.name: hashes.SHA256,
    SHA512.name: hashes.SHA512,
}


@dataclass
class FileDigest:
    """Digest of one file."""
    path: Path
    algorithm: str
    digest: bytes
    size: int
    verified: Optional[bool] = None  # None when no cross-check was requested

    @property
    def hexdigest(self) -> str:
        return self.digest.hex()

    def to_line(self) -> str:
        """Format as ``<hex> <path>``."""
        return f"{self.hexdigest} {self.path}"


def get_file_names(paths: Iterable[str] = (), directory: str = ".",
                   event_logger: Optional[EventLogger] = None) -> List[Path]:
    """
    Resolve the list of files to hash.

    With explicit paths, anything that is not a regular file is reported
    on stderr and dropped. Without paths, the regular files of
    ``directory`` are returned (sorted) and everything else is silently
    ignored.

    Args:
        paths: Paths given on the command line
        directory: Directory listed when no paths are given
        event_logger: Optional logger receiving FILE_SKIPPED events

    Returns:
        List of file paths
    """
    paths = list(paths)
    if not paths:
        return sorted(p for p in Path(directory).iterdir() if p.is_file())

    files = []
    for name in paths:
        path = Path(name)
        if path.is_file():
            files.append(path)
            continue
        print(f"{Path(sys.argv[0]).name}: {path} is not a file", file=sys.stderr)
        if event_logger is not None:
            event_logger.log(EventType.FILE_SKIPPED, str(path), reason="not a file")
    return files


def hash_file(path: os.PathLike, variant: Variant = SHA256,
              event_logger: Optional[EventLogger] = None) -> bytes:
    """
    Compute the SHA-2 digest of a file (streaming).

    Args:
        path: Path to file
        variant: SHA-2 variant
        event_logger: Optional logger receiving digest events

    Returns:
        Digest bytes

    Raises:
        OSError: If the file cannot be opened or read
    """
    with open(path, 'rb') as f:
        if event_logger is not None:
            return event_logger.digest(variant, f, subject=str(path))
        return sha(variant, f)


def reference_digest(path: os.PathLike, variant: Variant = SHA256,
                     chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Compute the digest of a file with the `cryptography` backend.

    Used only to cross-check the from-scratch implementation.
    """
    digest = hashes.Hash(REFERENCE_ALGORITHMS[variant.name](), backend=default_backend())
    with open(path, 'rb') as f:
        while chunk := f.read(chunk_size):
            digest.update(chunk)
    return digest.finalize()


def hash_files(paths: Iterable[os.PathLike], variant: Variant = SHA256,
               check: bool = False,
               event_logger: Optional[EventLogger] = None) -> List[FileDigest]:
    """
    Hash several files, skipping the ones that cannot be read.

    Args:
        paths: Files to hash
        variant: SHA-2 variant
        check: If True, also compare against the reference backend
        event_logger: Optional logger

    Returns:
        One FileDigest per readable file, in input order
    """
    results = []
    for path in paths:
        path = Path(path)
        try:
            digest = hash_file(path, variant, event_logger)
            size = path.stat().st_size
            verified = None
            if check:
                verified = reference_digest(path, variant) == digest
        except OSError as e:
            print(f"{Path(sys.argv[0]).name}: {path}: {e.strerror or e}", file=sys.stderr)
            if event_logger is not None:
                event_logger.log(EventType.FILE_SKIPPED, str(path), reason=str(e))
            continue

        if event_logger is not None:
            event_logger.log(
                EventType.FILE_HASHED, str(path),
                algo=variant.name, size=size, digest=digest.hex(),
            )
            if verified is not None:
                event_logger.log(
                    EventType.CHECK_PASSED if verified else EventType.CHECK_FAILED,
                    str(path), algo=variant.name,
                )

        results.append(FileDigest(
            path=path,
            algorithm=variant.name,
            digest=digest,
            size=size,
            verified=verified,
        ))
    return results
