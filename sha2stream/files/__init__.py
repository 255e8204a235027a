# File Digest Module
"""
File hashing built on the streaming SHA-2 core:
- File selection (explicit paths or current directory)
- Streaming file digests
- Cross-check against the `cryptography` backend
- NIST SHAVS test-vector files
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues when running module directly."""
    from . import file_digest, nist_vectors
    for module in (file_digest, nist_vectors):
        if hasattr(module, name):
            return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    'FileDigest',
    'get_file_names',
    'hash_file',
    'hash_files',
    'reference_digest',
    'DEFAULT_CHUNK_SIZE',
    'TestVector',
    'parse_rsp',
    'load_rsp',
    'run_vectors',
]
