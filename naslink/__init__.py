"""
naslink - serve files under random, unguessable links.

Registered files are re-verified on every download; a file that changed
or disappeared loses its link.
"""

from .errors import NaslinkError, NotFoundError, StoreError
from .registry import LinkRecord, Registry
from .resolver import LandingPage, RequestInfo, Resolver, ServeDecision
from .service import AddResult, NasLinkService

__version__ = "1.0.0"

__all__ = [
    'AddResult',
    'LandingPage',
    'LinkRecord',
    'NaslinkError',
    'NasLinkService',
    'NotFoundError',
    'Registry',
    'RequestInfo',
    'Resolver',
    'ServeDecision',
    'StoreError',
]
