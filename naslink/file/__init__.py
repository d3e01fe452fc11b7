"""
File Module - Fingerprinting and Integrity Checks

This module handles the filesystem side of naslink: computing the
fingerprint recorded at registration and re-checking it later.
"""

from .hasher import (
    FULL_HASH_LIMIT,
    MEGABYTE,
    SAMPLE_SIZE,
    ShortReadError,
    fingerprint,
    sample_offsets,
)
from .integrity import verify, verify_record

__all__ = [
    'FULL_HASH_LIMIT',
    'MEGABYTE',
    'SAMPLE_SIZE',
    'ShortReadError',
    'fingerprint',
    'sample_offsets',
    'verify',
    'verify_record',
]
