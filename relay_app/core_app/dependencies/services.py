from fastapi import Request

from relay_app.core_app.api_clients.stream_client import DirectoryClient
from relay_app.core_app.models.text_llm import CompletionClient
from relay_app.core_app.services.chat import ChatStore


def get_store(request: Request) -> ChatStore:
    return request.app.state.store


def get_directory(request: Request) -> DirectoryClient:
    return request.app.state.directory


def get_completion(request: Request) -> CompletionClient:
    return request.app.state.completion
