"""
Request Resolver

Turns an inbound identifier into a decision:

    normalize -> empty?        -> LandingPage
              -> lookup        -> absent  -> NotFoundError
              -> verify        -> valid   -> ServeDecision
                               -> invalid -> retire -> NotFoundError

A changed or removed file is terminal: its record is deleted and the
operator has to register the file again.

There is no in-memory routing table. Each request queries the store,
so links added or removed by the CLI are visible to a running server
immediately.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from .errors import NotFoundError, StoreError
from .file import verify_record
from .registry import LinkRecord, Registry

logger = logging.getLogger(__name__)


@dataclass
class RequestInfo:
    """Caller metadata supplied by the transport, for the audit log."""
    method: str = "-"
    user_agent: str = "-"
    remote_addr: str = "-"
    forwarded_for: Optional[str] = None

    @classmethod
    def anonymous(cls) -> 'RequestInfo':
        return cls()

    def __str__(self) -> str:
        return (f"UA: {self.user_agent}, IP: {self.remote_addr}, "
                f"Forwarded-For: {self.forwarded_for or '-'}")


@dataclass
class ServeDecision:
    """The identifier is valid; stream this file as an attachment."""
    identifier: str
    path: str
    filename: str


class LandingPage:
    """The identifier was empty; show the landing page."""

    def __repr__(self) -> str:
        return "LandingPage()"


Decision = Union[ServeDecision, LandingPage]


def normalize_identifier(raw: str) -> str:
    """Strip surrounding slashes and whitespace."""
    return raw.strip().strip("/").strip()


class Resolver:
    """Resolves identifiers against the registry, invalidating stale links."""

    def __init__(self, registry: Registry):
        self.registry = registry

    async def resolve(self, identifier: str, request: Optional[RequestInfo] = None) -> Decision:
        """
        Resolve an identifier.

        Returns:
            ServeDecision for a valid link, LandingPage for an empty identifier

        Raises:
            NotFoundError: unknown identifier, invalid file, or store failure
        """
        request = request or RequestInfo.anonymous()
        identifier = normalize_identifier(identifier)

        if not identifier:
            logger.info(f"Landing page: {request.method}, {request}")
            return LandingPage()

        try:
            record = await self.registry.lookup(identifier)
            if record is not None:
                if await verify_record(record):
                    logger.info(f"Retrieving NasLink file: {request.method}: {identifier}, {request}")
                    return ServeDecision(
                        identifier=record.identifier,
                        path=record.path,
                        filename=record.filename,
                    )

                logger.warning(f"Failed integrity check: {request.method}: {record.path}, {request}")
                await self.registry.retire(record.identifier)
        except StoreError as e:
            logger.error(f"Store failure resolving {identifier}: {e}")

        logger.info(f"404!: {request.method}: {identifier}, {request}")
        raise NotFoundError(identifier)

    async def invalidate(self, decision: ServeDecision, request: Optional[RequestInfo] = None):
        """
        Retire a link whose file vanished after it was verified.

        Store failures are logged, not raised; the caller answers 404 either way.
        """
        request = request or RequestInfo.anonymous()
        logger.warning(f"File gone before send: {request.method}: {decision.path}, {request}")

        try:
            await self.registry.retire(decision.identifier)
        except StoreError as e:
            logger.error(f"Store failure retiring {decision.identifier}: {e}")

    async def clean(self) -> List[LinkRecord]:
        """
        Verify every record and delete the invalid ones.

        Returns:
            The records that were removed
        """
        removed = []
        for record in await self.registry.records():
            if await verify_record(record):
                continue
            logger.warning(f"File {record.path} failed integrity check")
            await self.registry.retire(record.identifier)
            removed.append(record)

        logger.info(f"Clean removed {len(removed)} naslink(s)")
        return removed
