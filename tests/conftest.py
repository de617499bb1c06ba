"""
Shared fixtures: an in-memory SQLite store and in-process stand-ins for the
chat directory and the LLM.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from relay_app.api import create_app
from relay_app.core_app.config import Settings
from relay_app.core_app.exceptions import DirectoryError
from relay_app.core_app.models.text_llm import CompletionClient
from relay_app.core_app.schemas import ChannelMetadata, DirectoryUser
from relay_app.core_app.services.chat import ChatStore

SQLITE_MEMORY_URL = "sqlite:///:memory:"


class FakeChannel:
    def __init__(self, directory: "FakeDirectory", channel_id: str):
        self._directory = directory
        self.channel_id = channel_id

    async def publish(self, text: str, author_id: str) -> None:
        if self._directory.fail_publish:
            raise DirectoryError("publish failed")
        self._directory.messages.setdefault(self.channel_id, []).append((text, author_id))


class FakeDirectory:
    """Records calls the way the Stream directory would observe them."""

    def __init__(self):
        self.users: Dict[str, DirectoryUser] = {}
        self.upserts: List[DirectoryUser] = []
        self.channels: Dict[str, Tuple[str, ChannelMetadata]] = {}
        self.messages: Dict[str, List[Tuple[str, str]]] = {}
        self.fail_queries = False
        self.fail_publish = False
        self.fail_channel = False
        self.closed = False

    async def find_users(self, user_id: str) -> List[DirectoryUser]:
        if self.fail_queries:
            raise DirectoryError("query failed")
        user = self.users.get(user_id)
        return [user] if user else []

    async def upsert_user(self, user: DirectoryUser) -> None:
        self.upserts.append(user)
        self.users[user.id] = user

    async def create_channel(self, kind: str, channel_id: str, metadata: ChannelMetadata) -> FakeChannel:
        if self.fail_channel:
            raise DirectoryError("channel creation failed")
        self.channels.setdefault(channel_id, (kind, metadata))
        return FakeChannel(self, channel_id)

    async def close(self) -> None:
        self.closed = True


class FailingModel:
    async def ainvoke(self, messages, **kwargs):
        raise RuntimeError("provider unavailable")


def build_completion(*responses: str) -> CompletionClient:
    return CompletionClient(FakeListChatModel(responses=list(responses) or ["Hello from the model"]))


@pytest.fixture
def store() -> ChatStore:
    chat_store = ChatStore.from_url(SQLITE_MEMORY_URL)
    chat_store.create_schema()
    yield chat_store
    chat_store.dispose()


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def completion() -> CompletionClient:
    return build_completion("Hello from the model")


@pytest.fixture
def make_client(store, directory):
    """Builds a TestClient around the given completion client (default model if omitted)."""

    clients: List[TestClient] = []

    def _make(completion: Optional[CompletionClient] = None, raise_server_exceptions: bool = True) -> TestClient:
        app = create_app(
            settings=Settings(database_url=SQLITE_MEMORY_URL),
            store=store,
            directory=directory,
            completion=completion or build_completion("Hello from the model"),
        )
        client = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
