import hashlib
import uuid

import pytest

from naslink.registry import LinkRecord, canonical_path


@pytest.mark.asyncio
async def test_create_records_path_size_and_fingerprint(registry, make_file):
    content = b"0123456789"
    path = make_file("a.txt", content)

    identifier = await registry.create(path)
    record = await registry.lookup(identifier)

    assert uuid.UUID(identifier).version == 4
    assert record == LinkRecord(
        identifier=identifier,
        path=str(path.resolve()),
        fingerprint=hashlib.sha256(content).hexdigest(),
        size=10,
    )
    assert record.filename == "a.txt"


@pytest.mark.asyncio
async def test_create_canonicalizes_relative_paths(registry, make_file, monkeypatch):
    path = make_file("sub/a.txt", b"data")
    monkeypatch.chdir(path.parent)

    identifier = await registry.create("../sub/./a.txt")

    assert (await registry.lookup(identifier)).path == str(path.resolve())
    assert await registry.find_by_path(path) == identifier


@pytest.mark.asyncio
async def test_create_missing_file_raises(registry, tmp_path):
    with pytest.raises(FileNotFoundError):
        await registry.create(tmp_path / "missing.txt")
    assert await registry.enumerate() == []


@pytest.mark.asyncio
async def test_create_directory_raises(registry, tmp_path):
    with pytest.raises(OSError):
        await registry.create(tmp_path)


@pytest.mark.asyncio
async def test_identifiers_are_unique(registry, make_file):
    ids = {await registry.create(make_file(f"f{i}.txt", b"x")) for i in range(20)}
    assert len(ids) == 20


@pytest.mark.asyncio
async def test_readding_a_path_supersedes_the_old_link(registry, make_file):
    path = make_file("a.txt", b"first")

    old = await registry.create(path)
    new = await registry.create(path)

    assert old != new
    assert await registry.lookup(old) is None
    assert await registry.lookup(new) is not None
    assert await registry.enumerate() == [(new, str(path.resolve()))]


@pytest.mark.asyncio
async def test_readding_records_new_content(registry, make_file):
    path = make_file("a.txt", b"first")
    await registry.create(path)
    path.write_bytes(b"second version")

    record = await registry.lookup(await registry.create(path))

    assert record.size == len(b"second version")
    assert record.fingerprint == hashlib.sha256(b"second version").hexdigest()


@pytest.mark.asyncio
async def test_delete_by_path(registry, make_file):
    path = make_file("a.txt", b"data")
    identifier = await registry.create(path)

    assert await registry.delete(path) == identifier
    assert await registry.lookup(identifier) is None
    assert await registry.find_by_path(path) is None


@pytest.mark.asyncio
async def test_delete_unregistered_path_is_noop(registry, make_file, tmp_path):
    keep = make_file("keep.txt", b"data")
    identifier = await registry.create(keep)

    assert await registry.delete(tmp_path / "never-added.txt") is None
    assert await registry.enumerate() == [(identifier, str(keep.resolve()))]


@pytest.mark.asyncio
async def test_retire_twice_is_harmless(registry, make_file):
    identifier = await registry.create(make_file("a.txt", b"data"))

    assert await registry.retire(identifier) is True
    assert await registry.retire(identifier) is False


@pytest.mark.asyncio
async def test_enumerate_and_records(registry, make_file):
    a = make_file("a.txt", b"a")
    b = make_file("b.txt", b"bb")
    id_a = await registry.create(a)
    id_b = await registry.create(b)

    assert sorted(await registry.enumerate()) == sorted([
        (id_a, str(a.resolve())),
        (id_b, str(b.resolve())),
    ])
    assert {r.size for r in await registry.records()} == {1, 2}


def test_canonical_path_resolves_dots(tmp_path):
    assert canonical_path(tmp_path / "x" / ".." / "y") == str((tmp_path / "y").resolve())
