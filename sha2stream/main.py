"""
sha2stream - Main Entry Point

Prints one "<hex digest> <path>" line per file, in the manner of
sha256sum. Without file arguments every regular file in the current
directory is hashed.

Usage:
    sha2stream [-a sha256|sha512] [--check] [-v] [FILE ...]
    sha2stream --vectors SHA256ShortMsg.rsp
"""

import argparse
import sys
from typing import List, Optional

from .core.variants import VARIANTS, DEFAULT_VARIANT, get_variant
from .files.file_digest import get_file_names, hash_files
from .files.nist_vectors import load_rsp, run_vectors
from .integration.event_logger import EventLogger, DigestEvent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sha2stream",
        description="Compute SHA-256 / SHA-512 digests of files.",
    )
    parser.add_argument(
        "files", nargs="*",
        help="files to hash (default: every file in the current directory)",
    )
    parser.add_argument(
        "-a", "--algorithm", default=DEFAULT_VARIANT.name,
        choices=sorted(VARIANTS),
        help="SHA-2 variant (default: %(default)s)",
    )
    parser.add_argument(
        "--check", action="store_true",
        help="cross-check every digest against the cryptography backend",
    )
    parser.add_argument(
        "--vectors", metavar="RSP",
        help="run a NIST byte-oriented test vector file instead of hashing files",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="print digest events to stderr",
    )
    return parser


def _print_event(event: DigestEvent) -> None:
    print(event, file=sys.stderr)


def run_vector_file(path: str, event_logger: EventLogger) -> int:
    """Check a .rsp file; returns the process exit code."""
    try:
        vectors = load_rsp(path)
    except (OSError, ValueError) as e:
        print(f"sha2stream: {path}: {e}", file=sys.stderr)
        return 2

    failures = run_vectors(vectors, event_logger=event_logger)
    for vector in failures:
        print(f"FAIL {vector.name}")
    print(f"{len(vectors) - len(failures)}/{len(vectors)} vectors passed")
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for sha2stream."""
    args = build_parser().parse_args(argv)

    event_logger = EventLogger()
    if args.verbose:
        event_logger.add_callback(_print_event)

    if args.vectors:
        return run_vector_file(args.vectors, event_logger)

    variant = get_variant(args.algorithm)
    files = get_file_names(args.files, event_logger=event_logger)
    results = hash_files(files, variant, check=args.check, event_logger=event_logger)

    status = 0
    for result in results:
        line = result.to_line()
        if result.verified is False:
            line += " MISMATCH"
            status = 1
        print(line)

    if len(results) < len(files) or len(files) < len(args.files):
        status = status or 1
    return status


if __name__ == "__main__":
    raise SystemExit(main())
