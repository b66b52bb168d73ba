from __future__ import annotations

import asyncio

import pytest

from tests.fakes.buffer import FakeBuffer
from tests.fakes.notifier import RecordingNotifier
from tests.fakes.provider import FakeProvider
from todosync.auth.resolvers.env import EnvTokenResolver
from todosync.contracts.config import TodoSyncConfig
from todosync.contracts.enums import MarkerKind
from todosync.contracts.exceptions import ConfigurationMissing
from todosync.contracts.marker import Marker
from todosync.contracts.record import FieldSupport, RemoteRecord
from todosync.engine.context import SyncContext
from todosync.engine.engine import SyncEngine
from todosync.markers.extractor import scan_line
from todosync.providers.dry_run import DryRunProvider


def _mutations(provider: FakeProvider) -> list[tuple[str, str]]:
    return [call for call in provider.calls if call[0] != "list"]


@pytest.mark.asyncio
async def test_scenario_a_new_marker_is_stamped_and_created(engine: SyncEngine, provider: FakeProvider) -> None:
    buffer = FakeBuffer("// TODO: fix null check")

    result = await engine.handle_save(buffer)

    scan = scan_line(buffer.saved_lines[0])
    assert scan.marker_id is not None
    assert buffer.saved_lines[0] == f"// TODO: fix null check [id:{scan.marker_id}]"
    record = provider.by_marker_id(scan.marker_id)
    assert record is not None
    assert (record.text, record.kind, record.status) == ("fix null check", MarkerKind.TODO, "Not started")
    assert result.created == [scan.marker_id]
    assert result.stamped == [scan.marker_id]


@pytest.mark.asyncio
async def test_scenario_b_identical_record_is_a_noop(engine: SyncEngine, provider: FakeProvider) -> None:
    provider.add(
        RemoteRecord(
            key="page-1",
            marker_id="abc-123",
            text="handle edge case",
            kind=MarkerKind.FIXME,
            status="Not started",
            file_path="src/app.py",
            line_number=1,
        )
    )
    buffer = FakeBuffer("// FIXME: handle edge case [id:abc-123]")

    result = await engine.handle_save(buffer)

    assert _mutations(provider) == []
    assert result.unchanged == 1
    assert buffer.save_count == 0


@pytest.mark.asyncio
async def test_scenario_c_archived_record_removes_local_line(engine: SyncEngine, provider: FakeProvider) -> None:
    provider.add(RemoteRecord(key="page-1", marker_id="abc-123", text="old", status="Archived"))
    buffer = FakeBuffer("a = 1\n// TODO: old [id:abc-123]\nb = 2")

    result = await engine.pull([buffer])

    assert result.deleted == ["abc-123"]
    assert buffer.saved_lines == ["a = 1", "b = 2"]


@pytest.mark.asyncio
async def test_scenario_d_removed_line_archives_remote_record(engine: SyncEngine, provider: FakeProvider) -> None:
    buffer = FakeBuffer("\n".join(["a = 1", "# TODO: keep [id:keep-1]", "b = 2", "# TODO: drop [id:xyz-999]", "c = 3"]))
    await engine.handle_save(buffer)
    assert provider.by_marker_id("xyz-999") is not None

    buffer.type("\n".join(["a = 1", "# TODO: keep [id:keep-1]", "b = 2", "c = 3"]))
    result = await engine.handle_save(buffer)

    record = provider.by_marker_id("xyz-999")
    assert record is not None
    assert record.archived is True
    assert result.deleted == ["xyz-999"]
    assert engine.context.cache.keys(buffer.key) == {"keep-1"}


@pytest.mark.asyncio
async def test_programmatic_save_is_suppressed_once(engine: SyncEngine, provider: FakeProvider) -> None:
    buffer = FakeBuffer("# TODO: one")
    await engine.handle_save(buffer)

    echo = await engine.handle_save(buffer)
    user_save = await engine.handle_save(buffer)

    assert echo.skipped is True
    assert user_save.skipped is False
    assert user_save.unchanged == 1
    assert len([call for call in provider.calls if call[0] == "create"]) == 1


@pytest.mark.asyncio
async def test_second_pass_does_not_recreate(engine: SyncEngine, provider: FakeProvider) -> None:
    buffer = FakeBuffer("# TODO: one\n# FIXME: two")
    first = await engine.handle_save(buffer)
    engine.context.consume_suppression(buffer.key)

    second = await engine.handle_save(buffer)

    assert len(first.created) == 2
    assert second.created == []
    assert second.unchanged == 2


@pytest.mark.asyncio
async def test_edit_produces_update(engine: SyncEngine, provider: FakeProvider) -> None:
    buffer = FakeBuffer("# TODO: one [id:aa-1]")
    await engine.handle_save(buffer)

    buffer.type("# TODO: one, reworded [id:aa-1]")
    result = await engine.handle_save(buffer)

    assert result.updated == ["aa-1"]
    record = provider.by_marker_id("aa-1")
    assert record is not None
    assert record.text == "one, reworded"


@pytest.mark.asyncio
async def test_deletion_requires_prior_cache_presence(engine: SyncEngine, provider: FakeProvider) -> None:
    provider.add(RemoteRecord(key="page-1", marker_id="other-file", text="x"))
    buffer = FakeBuffer("# TODO: one [id:aa-1]")

    result = await engine.handle_save(buffer)

    assert result.deleted == []
    record = provider.by_marker_id("other-file")
    assert record is not None
    assert record.archived is False


@pytest.mark.asyncio
async def test_unavailable_remote_makes_no_writes_and_keeps_cache(
    engine: SyncEngine, provider: FakeProvider, notifier: RecordingNotifier
) -> None:
    buffer = FakeBuffer("# TODO: one [id:aa-1]")
    engine.context.cache.set(buffer.key, {"old-1": Marker(id="old-1", text="x", path="src/app.py", line=0)})
    provider.fail_list = True

    result = await engine.handle_save(buffer)

    assert result.remote_available is False
    assert _mutations(provider) == []
    assert engine.context.cache.keys(buffer.key) == {"old-1"}
    assert notifier.of("warning")


@pytest.mark.asyncio
async def test_failed_create_does_not_block_others_and_retries_next_pass(
    engine: SyncEngine, provider: FakeProvider
) -> None:
    buffer = FakeBuffer("# TODO: one [id:aa-1]\n# TODO: two [id:bb-2]")
    provider.fail("create", "aa-1")

    first = await engine.handle_save(buffer)
    provider.fail_on.clear()
    second = await engine.handle_save(buffer)

    assert first.created == ["bb-2"]
    assert [f.marker_id for f in first.failures] == ["aa-1"]
    assert second.created == ["aa-1"]


@pytest.mark.asyncio
async def test_failed_archive_is_retried_on_next_pass(engine: SyncEngine, provider: FakeProvider) -> None:
    buffer = FakeBuffer("# TODO: one [id:aa-1]")
    await engine.handle_save(buffer)
    buffer.type("")
    provider.fail("archive", "aa-1")

    first = await engine.handle_save(buffer)
    retained = engine.context.cache.keys(buffer.key)
    provider.fail_on.clear()
    second = await engine.handle_save(buffer)

    assert first.deleted == []
    assert retained == {"aa-1"}
    assert second.deleted == ["aa-1"]
    assert engine.context.cache.keys(buffer.key) == set()


@pytest.mark.asyncio
async def test_missing_database_id_aborts_before_remote_calls(
    provider: FakeProvider, notifier: RecordingNotifier
) -> None:
    engine = SyncEngine(SyncContext(provider, notifier=notifier), TodoSyncConfig(database_id=""))
    buffer = FakeBuffer("# TODO: one")

    result = await engine.handle_save(buffer)

    assert result.aborted is not None
    assert provider.calls == []
    assert buffer.lines == ["# TODO: one"]
    assert len(notifier.of("warning")) == 1


@pytest.mark.asyncio
async def test_missing_token_raises_configuration_missing(
    provider: FakeProvider, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("NOTION_TOKEN", raising=False)
    engine = SyncEngine(SyncContext(provider), TodoSyncConfig(database_id="db"), token_resolver=EnvTokenResolver())

    with pytest.raises(ConfigurationMissing):
        await engine.ensure_configured()
    result = await engine.pull([FakeBuffer("# TODO: one [id:aa-1]")])

    assert result.aborted is not None
    assert provider.calls == []


@pytest.mark.asyncio
async def test_pull_updates_text_and_discards_deleted_ids_from_cache(
    engine: SyncEngine, provider: FakeProvider
) -> None:
    buffer = FakeBuffer("# TODO: one [id:aa-1]\n# TODO: two [id:bb-2]")
    await engine.handle_save(buffer)
    engine.context.consume_suppression(buffer.key)
    first = provider.by_marker_id("aa-1")
    second = provider.by_marker_id("bb-2")
    assert first is not None and second is not None
    provider.records[first.key] = first.model_copy(update={"text": "one from remote"})
    provider.records[second.key] = second.model_copy(update={"status": "Archived"})

    result = await engine.pull([buffer])

    assert buffer.saved_lines == ["# TODO: one from remote [id:aa-1]"]
    assert result.updated == ["aa-1"]
    assert result.deleted == ["bb-2"]
    assert engine.context.cache.keys(buffer.key) == {"aa-1"}
    assert engine.context.is_suppressed(buffer.key)


@pytest.mark.asyncio
async def test_pull_never_adds_lines(engine: SyncEngine, provider: FakeProvider) -> None:
    provider.add(RemoteRecord(key="page-1", marker_id="remote-only", text="from notion"))
    buffer = FakeBuffer("x = 1")

    result = await engine.pull([buffer])

    assert buffer.lines == ["x = 1"]
    assert result.buffers_scanned == 1
    assert result.updated == [] and result.deleted == []


@pytest.mark.asyncio
async def test_pull_with_unavailable_remote_changes_nothing(engine: SyncEngine, provider: FakeProvider) -> None:
    provider.fail_list = True
    buffer = FakeBuffer("# TODO: one [id:aa-1]")

    result = await engine.pull([buffer])

    assert result.remote_available is False
    assert buffer.lines == ["# TODO: one [id:aa-1]"]


@pytest.mark.asyncio
async def test_dry_run_records_operations_without_writes(provider: FakeProvider) -> None:
    dry = DryRunProvider(provider)
    engine = SyncEngine(SyncContext(dry), TodoSyncConfig(database_id="db"), dry_run=True)
    buffer = FakeBuffer("# TODO: one")

    result = await engine.handle_save(buffer)

    assert buffer.lines == ["# TODO: one"]
    assert result.dry_run is True
    assert len(result.created) == 1
    assert [op.kind for op in dry.operations] == ["create"]
    assert _mutations(provider) == []
    assert engine.context.cache.keys(buffer.key) == set()


@pytest.mark.asyncio
async def test_concurrent_passes_on_one_buffer_do_not_interleave(engine: SyncEngine, provider: FakeProvider) -> None:
    buffer = FakeBuffer("# TODO: one [id:aa-1]")

    await asyncio.gather(engine.handle_save(buffer), engine.handle_save(buffer))

    assert len([call for call in provider.calls if call[0] == "create"]) == 1


@pytest.mark.asyncio
async def test_text_clipped_by_the_store_settles_after_create(engine: SyncEngine, provider: FakeProvider) -> None:
    provider.support = FieldSupport(text_limit=20)
    buffer = FakeBuffer(f"# TODO: {'a' * 30} [id:aa-1]")

    first = await engine.handle_save(buffer)
    second = await engine.handle_save(buffer)
    pulled = await engine.pull([buffer])

    assert first.created == ["aa-1"]
    assert second.updated == []
    assert second.unchanged == 1
    assert pulled.updated == []
    assert buffer.lines == [f"# TODO: {'a' * 30} [id:aa-1]"]


@pytest.mark.asyncio
async def test_marker_whose_id_cannot_be_embedded_is_not_synced(
    engine: SyncEngine, provider: FakeProvider
) -> None:
    buffer = FakeBuffer("# TODO: one")
    buffer.reject_edits = True

    first = await engine.handle_save(buffer)
    second = await engine.handle_save(buffer)

    assert _mutations(provider) == []
    assert len(first.unstamped) == 1
    assert len(second.unstamped) == 1
    assert first.created == [] and second.deleted == []
    assert engine.context.cache.keys(buffer.key) == set()


@pytest.mark.asyncio
async def test_removed_line_with_already_archived_record_is_not_archived_again(
    engine: SyncEngine, provider: FakeProvider
) -> None:
    provider.list_archived = True
    buffer = FakeBuffer("# TODO: one [id:aa-1]")
    await engine.handle_save(buffer)
    record = provider.by_marker_id("aa-1")
    assert record is not None
    provider.records[record.key] = record.model_copy(update={"archived": True})

    buffer.type("x = 1")
    result = await engine.handle_save(buffer)

    assert ("archive", "aa-1") not in provider.calls
    assert result.deleted == []
    assert engine.context.cache.keys(buffer.key) == set()


@pytest.mark.asyncio
async def test_pull_removes_line_of_archived_record(engine: SyncEngine, provider: FakeProvider) -> None:
    provider.list_archived = True
    provider.add(RemoteRecord(key="page-1", marker_id="aa-1", text="one", status="In progress", archived=True))
    buffer = FakeBuffer("# TODO: one [id:aa-1]\nx = 1")

    result = await engine.pull([buffer])

    assert result.deleted == ["aa-1"]
    assert buffer.saved_lines == ["x = 1"]
