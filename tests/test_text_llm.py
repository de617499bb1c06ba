import asyncio

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from relay_app.core_app.exceptions import CompletionError
from relay_app.core_app.models.text_llm import FALLBACK_REPLY, CompletionClient
from tests.conftest import FailingModel


def test_complete_returns_model_content():
    client = CompletionClient(FakeListChatModel(responses=["Hi Ann!"]))

    assert asyncio.run(client.complete("hi")) == "Hi Ann!"


def test_empty_content_uses_fallback():
    client = CompletionClient(FakeListChatModel(responses=[""]))

    assert asyncio.run(client.complete("hi")) == FALLBACK_REPLY == "No response from AI"


def test_provider_failure_raises_completion_error():
    client = CompletionClient(FailingModel())

    with pytest.raises(CompletionError):
        asyncio.run(client.complete("hi"))


def test_missing_api_key_fails_fast():
    with pytest.raises(ValueError, match="OPEN_AI_KEY"):
        CompletionClient.from_credentials(None)


def test_openai_model_is_built_without_retries():
    client = CompletionClient.from_credentials("sk-test", "gpt-4")

    assert client.model.model_name == "gpt-4"
    assert client.model.max_retries == 0
