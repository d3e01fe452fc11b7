"""Shared fixtures: a fresh link database per test and file helpers."""

from pathlib import Path

import pytest
import pytest_asyncio

from naslink.config import Config
from naslink.registry import Registry
from naslink.resolver import Resolver
from naslink.storage import init_database


@pytest.fixture
def make_file(tmp_path):
    """Write a file under tmp_path and return its path."""
    def _make(name: str, content: bytes) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
    return _make


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(data_dir=tmp_path / "data")


@pytest_asyncio.fixture
async def database(tmp_path):
    db = await init_database(tmp_path / "naslink.db")
    yield db
    await db.close()


@pytest.fixture
def registry(database) -> Registry:
    return Registry(database)


@pytest.fixture
def resolver(registry) -> Resolver:
    return Resolver(registry)
