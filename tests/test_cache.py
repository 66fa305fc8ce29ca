from __future__ import annotations

from pathlib import Path

import pytest

from gitscaffold import cache
from gitscaffold.cache import acquire
from gitscaffold.errors import AcquisitionError, ConflictError, VCSError
from gitscaffold.options import CacheOptions
from gitscaffold.paths import PathResolver
from tests.conftest import FakeVCS

LOCATOR = "https://example.com/acme/My-Template.git"


def _snapshot(root: Path) -> list[str]:
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*"))


@pytest.mark.asyncio
async def test_clones_when_no_cache(fake_vcs: FakeVCS, resolver: PathResolver) -> None:
    path = await acquire(LOCATOR, vcs=fake_vcs, resolver=resolver)

    assert path == resolver.resolve(LOCATOR)
    assert (path / "README.md").exists()
    assert fake_vcs.calls == [("clone", LOCATOR, path, None)]


@pytest.mark.asyncio
async def test_updates_existing_working_copy(fake_vcs: FakeVCS, resolver: PathResolver) -> None:
    first = await acquire(LOCATOR, vcs=fake_vcs, resolver=resolver)
    second = await acquire(LOCATOR, {"remote": "upstream", "branch": "main"}, vcs=fake_vcs, resolver=resolver)

    assert first == second
    assert fake_vcs.calls[-1] == ("update", first, "upstream", "main", True)
    assert fake_vcs.names() == ["clone", "update"]


@pytest.mark.asyncio
async def test_failed_update_recloning_online(resolver: PathResolver) -> None:
    vcs = FakeVCS(files={"new.txt": "fresh"})
    target = resolver.resolve(LOCATOR)
    target.mkdir(parents=True)
    (target / "stale.txt").write_text("old")
    vcs.update_fails = True

    path = await acquire(LOCATOR, vcs=vcs, resolver=resolver)

    assert vcs.names() == ["update", "clone"]
    assert not (path / "stale.txt").exists()
    assert (path / "new.txt").read_text() == "fresh"


@pytest.mark.asyncio
async def test_offline_without_cache_fails_and_writes_nothing(fake_vcs: FakeVCS, resolver: PathResolver) -> None:
    with pytest.raises(AcquisitionError, match="offline"):
        await acquire(LOCATOR, CacheOptions(offline=True), vcs=fake_vcs, resolver=resolver)

    assert fake_vcs.calls == []
    assert resolver.cache_root.is_dir()
    assert _snapshot(resolver.cache_root) == []


@pytest.mark.asyncio
async def test_offline_with_failed_update_keeps_existing_state(resolver: PathResolver) -> None:
    vcs = FakeVCS(update_fails=True)
    target = resolver.resolve(LOCATOR)
    target.mkdir(parents=True)
    (target / "cached.txt").write_text("still here")

    with pytest.raises(AcquisitionError) as excinfo:
        await acquire(LOCATOR, {"offline": True}, vcs=vcs, resolver=resolver)

    assert isinstance(excinfo.value.__cause__, VCSError)
    assert vcs.names() == ["update"]
    assert (target / "cached.txt").read_text() == "still here"


@pytest.mark.asyncio
async def test_offline_with_good_cache_succeeds(fake_vcs: FakeVCS, resolver: PathResolver) -> None:
    target = resolver.resolve(LOCATOR)
    target.mkdir(parents=True)
    path = await acquire(LOCATOR, {"offline": True}, vcs=fake_vcs, resolver=resolver)
    assert path == target
    assert fake_vcs.names() == ["update"]


@pytest.mark.asyncio
@pytest.mark.parametrize("offline", [False, True])
async def test_file_at_target_is_a_conflict(fake_vcs: FakeVCS, resolver: PathResolver, offline: bool) -> None:
    target = resolver.resolve(LOCATOR)
    target.parent.mkdir(parents=True)
    target.write_text("not a directory")

    with pytest.raises(ConflictError):
        await acquire(LOCATOR, {"offline": offline}, vcs=fake_vcs, resolver=resolver)

    assert fake_vcs.calls == []
    assert target.read_text() == "not a directory"


@pytest.mark.asyncio
async def test_clone_failure_is_acquisition_error(resolver: PathResolver) -> None:
    vcs = FakeVCS(clone_fails=True)
    with pytest.raises(AcquisitionError) as excinfo:
        await acquire(LOCATOR, vcs=vcs, resolver=resolver)
    assert isinstance(excinfo.value.__cause__, VCSError)
    assert excinfo.value.__cause__.returncode == 128


@pytest.mark.asyncio
async def test_explicit_dest(fake_vcs: FakeVCS, resolver: PathResolver, tmp_path: Path) -> None:
    dest = tmp_path / "elsewhere" / "wc"
    path = await acquire(LOCATOR, CacheOptions(dest=dest), vcs=fake_vcs, resolver=resolver)
    assert path == dest
    assert (dest / "README.md").exists()
    assert resolver.cache_root.is_dir()


@pytest.mark.asyncio
async def test_locator_without_slug_is_rejected(fake_vcs: FakeVCS, resolver: PathResolver) -> None:
    with pytest.raises(AcquisitionError):
        await acquire("", vcs=fake_vcs, resolver=resolver)
    assert fake_vcs.calls == []


@pytest.mark.asyncio
async def test_explicit_branch_is_cloned(fake_vcs: FakeVCS, resolver: PathResolver) -> None:
    path = await acquire(LOCATOR, {"branch": "release"}, vcs=fake_vcs, resolver=resolver)
    assert fake_vcs.calls == [("clone", LOCATOR, path, "release")]


@pytest.mark.asyncio
async def test_target_inspection_runs_in_worker_thread(
    fake_vcs: FakeVCS, resolver: PathResolver, monkeypatch: pytest.MonkeyPatch
) -> None:
    offloaded: list[str] = []
    real_to_thread = cache.asyncio.to_thread

    async def recording_to_thread(func, /, *args, **kwargs):
        offloaded.append(getattr(func, "__name__", repr(func)))
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr(cache.asyncio, "to_thread", recording_to_thread)
    await acquire(LOCATOR, vcs=fake_vcs, resolver=resolver)

    assert "_inspect" in offloaded
    assert "_remove_tree" in offloaded
