"""
naslink Service - Main Controller

Wires the components together behind one object that both the CLI and
the HTTP server drive:
- Database (SQLite) for the link records
- Registry for creating and removing links
- Resolver for the download path and clean
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .config import Config
from .errors import StoreError
from .registry import LinkRecord, Registry
from .resolver import Decision, RequestInfo, Resolver, ServeDecision
from .storage import Database

logger = logging.getLogger(__name__)


@dataclass
class AddResult:
    """Outcome of registering one path in a batch."""
    path: str
    identifier: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.identifier is not None


class NasLinkService:
    """
    A naslink host.

    Combines all components into a unified interface:
    - add(paths): register files, best-effort per path
    - delete(paths): remove links by path
    - list_links(): enumerate records
    - clean(): prune every invalid record
    - resolve(identifier): the download path
    """

    def __init__(self, config: Config = None):
        self.config = config or Config()

        self.db = Database(self.config.database_path)
        self.registry = Registry(self.db)
        self.resolver = Resolver(self.registry)

        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self):
        """Open the link database."""
        if self._running:
            return

        await self.db.connect()
        self._running = True

        logger.debug(f"naslink service started, db: {self.config.database_path}")

    async def stop(self):
        """Close the link database."""
        if not self._running:
            return

        self._running = False
        await self.db.close()

    async def __aenter__(self) -> 'NasLinkService':
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    # === Administrative Operations ===

    async def add(self, paths: Iterable[Union[str, Path]]) -> List[AddResult]:
        """
        Register a batch of files.

        A path that cannot be read is reported in its result and the rest
        of the batch continues. A StoreError aborts the whole batch.
        """
        results = []
        for path in paths:
            try:
                identifier = await self.registry.create(path)
                results.append(AddResult(path=str(path), identifier=identifier))
            except StoreError:
                raise
            except OSError as e:
                logger.error(f"Cannot add {path}: {e}")
                results.append(AddResult(path=str(path), error=str(e)))
        return results

    async def delete(self, paths: Iterable[Union[str, Path]]) -> List[Tuple[str, Optional[str]]]:
        """Remove the links for a batch of paths. Returns (path, removed identifier)."""
        return [(str(path), await self.registry.delete(path)) for path in paths]

    async def list_links(self) -> List[LinkRecord]:
        return await self.registry.records()

    async def clean(self) -> List[LinkRecord]:
        return await self.resolver.clean()

    # === Request Path ===

    async def resolve(self, identifier: str, request: RequestInfo = None) -> Decision:
        return await self.resolver.resolve(identifier, request)

    async def invalidate(self, decision: ServeDecision, request: RequestInfo = None):
        await self.resolver.invalidate(decision, request)

    async def get_stats(self) -> dict:
        return {
            'running': self._running,
            'db_path': str(self.config.database_path),
            'links': await self.db.count_links() if self._running else 0,
        }
