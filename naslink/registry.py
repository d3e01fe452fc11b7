"""
Link Registry

Owns the mapping identifier -> (path, fingerprint, size).

Identifiers are uuid4 strings: 122 random bits, unguessable, minted
once and never reused. Paths are canonicalized once at registration
and double as the dedup key, so a file has at most one live naslink.
"""

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import aiofiles.os

from .file import fingerprint as compute_fingerprint
from .storage import Database

logger = logging.getLogger(__name__)


@dataclass
class LinkRecord:
    """A registered file."""
    identifier: str
    path: str          # Canonical absolute path
    fingerprint: str   # SHA-256 hex (full or sampled)
    size: int          # Bytes at registration time

    @property
    def filename(self) -> str:
        return Path(self.path).name

    @classmethod
    def from_dict(cls, data: Dict) -> 'LinkRecord':
        return cls(
            identifier=data['identifier'],
            path=data['path'],
            fingerprint=data['fingerprint'],
            size=data['size'],
        )


def canonical_path(path: Union[str, Path]) -> str:
    """Absolute path with symlinks and '..' resolved."""
    return str(Path(path).expanduser().resolve())


def new_identifier() -> str:
    return str(uuid.uuid4())


class Registry:
    """
    Durable naslink registry.

    Provides:
    - create(path): register a file, superseding any previous link
    - lookup(identifier) / find_by_path(path)
    - delete(path) / retire(identifier)
    - enumerate() / records()
    """

    def __init__(self, database: Database):
        self.db = database

    async def create(self, path: Union[str, Path]) -> str:
        """
        Register a file and return its new identifier.

        Raises:
            FileNotFoundError: path does not exist
            IsADirectoryError: path is not a regular file
            OSError: the file cannot be stat'd or hashed
            StoreError: the database write failed
        """
        path = canonical_path(path)

        if not Path(path).exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not Path(path).is_file():
            raise IsADirectoryError(f"Not a regular file: {path}")

        existing = await self.db.find_identifier(path)
        if existing:
            logger.warning(f"File {path} already has a naslink: {existing}; overwriting this record")
            await self.retire(existing)

        stat = await aiofiles.os.stat(path)
        digest = await compute_fingerprint(path)
        identifier = new_identifier()

        await self.db.insert_link(identifier, path, digest, stat.st_size)
        logger.info(f"File {path} naslink: {identifier}")

        return identifier

    async def lookup(self, identifier: str) -> Optional[LinkRecord]:
        """Get the record for an identifier, or None."""
        row = await self.db.get_link(identifier)
        return LinkRecord.from_dict(row) if row else None

    async def find_by_path(self, path: Union[str, Path]) -> Optional[str]:
        """Get the identifier registered for a path, or None."""
        return await self.db.find_identifier(canonical_path(path))

    async def delete(self, path: Union[str, Path]) -> Optional[str]:
        """
        Remove the naslink for a path.

        Returns:
            The removed identifier, or None if the path had no naslink
        """
        path = canonical_path(path)
        identifier = await self.db.find_identifier(path)

        if not identifier:
            logger.info(f"{path} does not have a naslink")
            return None

        await self.db.delete_link(identifier)
        logger.info(f"Removed {path}: {identifier}")
        return identifier

    async def retire(self, identifier: str) -> bool:
        """Remove a record by identifier. Returns False if it was already gone."""
        removed = await self.db.delete_link(identifier)
        if removed:
            logger.debug(f"Retired naslink {identifier}")
        return removed

    async def enumerate(self) -> List[Tuple[str, str]]:
        """All active (identifier, path) pairs."""
        return [(r.identifier, r.path) for r in await self.records()]

    async def records(self) -> List[LinkRecord]:
        """All active records."""
        rows = await self.db.list_links()
        return [LinkRecord.from_dict(row) for row in rows]
