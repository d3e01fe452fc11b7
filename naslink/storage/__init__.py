"""
Storage Module - Persistent Link Storage

Uses SQLite for storing the naslink records.
"""

from .database import Database, init_database

__all__ = ['Database', 'init_database']
