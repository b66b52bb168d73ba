"""Shared test fixtures for todosync tests."""

from __future__ import annotations

import pytest

from tests.fakes.notifier import RecordingNotifier
from tests.fakes.provider import FakeProvider
from todosync.auth.resolvers.static import StaticTokenResolver
from todosync.contracts.config import TodoSyncConfig
from todosync.engine.context import SyncContext
from todosync.engine.engine import SyncEngine


@pytest.fixture
def config() -> TodoSyncConfig:
    return TodoSyncConfig(database_id="db-1")


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def context(provider: FakeProvider, notifier: RecordingNotifier) -> SyncContext:
    return SyncContext(provider, notifier=notifier)


@pytest.fixture
def engine(context: SyncContext, config: TodoSyncConfig) -> SyncEngine:
    return SyncEngine(context, config, token_resolver=StaticTokenResolver(token="secret"))
