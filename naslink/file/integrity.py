"""
Integrity Checker

A record is valid only while the live file has the recorded size and a
freshly computed fingerprint equal to the recorded one. Nothing is
cached: every call goes back to the filesystem.

The size comparison runs first because it is a single stat, while the
fingerprint may read up to 16MB.
"""

import logging
from pathlib import Path
from typing import Union

import aiofiles.os

from .hasher import fingerprint as compute_fingerprint

logger = logging.getLogger(__name__)


async def verify(path: Union[str, Path], fingerprint: str, recorded_size: int) -> bool:
    """
    Check a file against its recorded size and fingerprint.

    Any filesystem error (missing file, permission denied, short read)
    makes the file invalid rather than propagating.
    """
    try:
        stat = await aiofiles.os.stat(path)
    except OSError as e:
        logger.debug(f"Cannot stat {path}: {e}")
        return False

    if stat.st_size != recorded_size:
        logger.debug(f"Size changed for {path}: {recorded_size} -> {stat.st_size}")
        return False

    try:
        current = await compute_fingerprint(path)
    except OSError as e:
        logger.debug(f"Cannot hash {path}: {e}")
        return False

    if current != fingerprint:
        logger.debug(f"Fingerprint changed for {path}")
        return False

    return True


async def verify_record(record) -> bool:
    """Verify a LinkRecord against the live file."""
    return await verify(record.path, record.fingerprint, record.size)
