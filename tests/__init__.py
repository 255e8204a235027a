# sha2stream Test Suite
"""
Test suite including:
- Unit tests (variants, segmenter, padding, compression, digests)
- File and NIST vector tests
- Integration tests (event log, CLI)
- Precondition tests (invalid blocks, oversized messages)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
