import pytest
import pytest_asyncio

from naslink.errors import StoreError
from naslink.resolver import ServeDecision
from naslink.service import NasLinkService


@pytest_asyncio.fixture
async def service(config):
    async with NasLinkService(config) as svc:
        yield svc


@pytest.mark.asyncio
async def test_add_is_best_effort(service, make_file, tmp_path):
    good = make_file("good.txt", b"data")
    missing = tmp_path / "missing.txt"

    results = await service.add([good, missing])

    assert results[0].ok and results[0].path == str(good)
    assert not results[1].ok
    assert "missing.txt" in results[1].error
    assert [r.path for r in await service.list_links()] == [str(good.resolve())]


@pytest.mark.asyncio
async def test_add_then_resolve(service, make_file):
    path = make_file("a.txt", b"data")
    [result] = await service.add([path])

    decision = await service.resolve(result.identifier)

    assert isinstance(decision, ServeDecision)
    assert decision.filename == "a.txt"


@pytest.mark.asyncio
async def test_delete_batch(service, make_file, tmp_path):
    a = make_file("a.txt", b"a")
    [added] = await service.add([a])

    results = await service.delete([a, tmp_path / "other.txt"])

    assert results == [(str(a), added.identifier), (str(tmp_path / "other.txt"), None)]
    assert await service.list_links() == []


@pytest.mark.asyncio
async def test_clean_and_stats(service, make_file):
    a = make_file("a.txt", b"a")
    b = make_file("b.txt", b"b")
    await service.add([a, b])
    b.unlink()

    removed = await service.clean()

    assert [r.path for r in removed] == [str(b.resolve())]
    stats = await service.get_stats()
    assert stats['links'] == 1
    assert stats['running'] is True


@pytest.mark.asyncio
async def test_links_persist_across_restarts(config, make_file):
    path = make_file("a.txt", b"data")

    async with NasLinkService(config) as svc:
        [result] = await svc.add([path])

    async with NasLinkService(config) as svc:
        assert (await svc.resolve(result.identifier)).path == str(path.resolve())


@pytest.mark.asyncio
async def test_store_error_aborts_add(config, make_file):
    svc = NasLinkService(config)
    with pytest.raises(StoreError):
        await svc.add([make_file("a.txt", b"data")])


@pytest.mark.asyncio
async def test_unopenable_database_raises_store_error(tmp_path, make_file):
    from naslink.config import Config

    blocker = make_file("blocker", b"not a directory")
    svc = NasLinkService(Config(db_path=blocker / "naslink.db"))

    with pytest.raises(StoreError):
        await svc.start()
