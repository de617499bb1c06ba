from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from relay_app.core_app.api_clients.stream_client import DirectoryClient
from relay_app.core_app.config import Settings
from relay_app.core_app.dependencies.body import request_body
from relay_app.core_app.dependencies.services import get_completion, get_directory, get_store
from relay_app.core_app.exceptions import NotFoundError, RelayError, StorageError
from relay_app.core_app.models.text_llm import CompletionClient
from relay_app.core_app.schemas import (
    ChannelMetadata,
    ChatRecordOut,
    ChatRequest,
    ChatResponse,
    DirectoryUser,
    GetMessagesRequest,
    MessagesResponse,
    RegisterUserRequest,
    RegisterUserResponse,
)
from relay_app.core_app.services.chat import ChatStore
from relay_app.core_app.tools.setup_logger import setup_logger
from relay_app.core_app.tools.user_id import derive_user_id

logger = setup_logger(__name__.upper())

AI_BOT_ID = "ai_bot"
CHANNEL_KIND = "messaging"
CHANNEL_NAME = "Ai Chat"

REGISTER_FIELDS_MESSAGE = "Name and email are required!"
CHAT_FIELDS_MESSAGE = "Message and user id are required!"
MESSAGES_FIELDS_MESSAGE = "USER ID is required"

router = APIRouter()


@router.post("/registerUser", response_model=RegisterUserResponse)
async def register_user(
        request: RegisterUserRequest = Depends(request_body(RegisterUserRequest, REGISTER_FIELDS_MESSAGE)),
        store: ChatStore = Depends(get_store),
        directory: DirectoryClient = Depends(get_directory),
):
    """
    Registers the user in the chat directory and in the database, skipping whichever already has it
    """
    user_id = derive_user_id(request.email)

    if not await directory.find_users(user_id):
        logger.info(f"user {user_id} does not exist in the directory. Adding...")
        await directory.upsert_user(
            DirectoryUser(id=user_id, name=request.name, email=request.email, role="user")
        )

    existing_user = await run_in_threadpool(store.find_user, user_id)
    if existing_user is None:
        logger.info(f"user {user_id} does not exist in the database. Adding...")
        await run_in_threadpool(store.create_user, user_id, request.name, request.email)

    return RegisterUserResponse(user_id=user_id, name=request.name, email=request.email)


@router.post("/chat", response_model=ChatResponse)
async def chat(
        request: ChatRequest = Depends(request_body(ChatRequest, CHAT_FIELDS_MESSAGE)),
        store: ChatStore = Depends(get_store),
        directory: DirectoryClient = Depends(get_directory),
        completion: CompletionClient = Depends(get_completion),
):
    """
    Generates a reply, stores the exchange and posts the reply to the user's channel
    """
    user_id = request.user_id

    if not await directory.find_users(user_id):
        raise NotFoundError("User is not found. Please register first!")

    if await run_in_threadpool(store.find_user, user_id) is None:
        raise NotFoundError("User not found. Please register first.")

    try:
        reply = await completion.complete(request.message)
        await run_in_threadpool(store.create_chat, user_id, request.message, reply)

        channel = await directory.create_channel(
            CHANNEL_KIND,
            f"chat-{user_id}",
            ChannelMetadata(name=CHANNEL_NAME, created_by_id=AI_BOT_ID),
        )
        await channel.publish(reply, AI_BOT_ID)
    except RelayError as e:
        logger.error(f"Chat exchange failed for {user_id}: {e}")
        raise

    return ChatResponse(reply=reply)


@router.post("/getMessage", response_model=MessagesResponse)
async def get_messages(
        request: GetMessagesRequest = Depends(request_body(GetMessagesRequest, MESSAGES_FIELDS_MESSAGE)),
        store: ChatStore = Depends(get_store),
):
    """
    Returns every stored exchange of the user, oldest first
    """
    try:
        chat_history = await run_in_threadpool(store.find_chats_by_user, request.user_id)
    except StorageError:
        logger.error("Error fetching chat history!")
        raise

    return MessagesResponse(messages=[ChatRecordOut.model_validate(record) for record in chat_history])


@router.get("/health")
def health_check():
    return {"status": "ok"}


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.url.path}: {exc!r}")
    return JSONResponse(status_code=500, content={"error": RelayError.public_message})


def create_app(
        settings: Optional[Settings] = None,
        store: Optional[ChatStore] = None,
        directory: Optional[DirectoryClient] = None,
        completion: Optional[CompletionClient] = None,
) -> FastAPI:
    """
    Builds the application. Clients that are not passed in are constructed from
    settings at startup and closed at shutdown.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        built_store: Optional[ChatStore] = None
        built_directory: Optional[DirectoryClient] = None
        try:
            if store is None:
                built_store = ChatStore.from_url(settings.database_url)
            app.state.store = store or built_store
            if directory is None:
                built_directory = DirectoryClient.from_credentials(
                    settings.stream_api_key, settings.stream_api_secret
                )
            app.state.directory = directory or built_directory
            app.state.completion = completion or CompletionClient.from_credentials(
                settings.openai_api_key, settings.openai_model
            )
            await run_in_threadpool(app.state.store.create_schema)
            logger.info("Relay services initialised")
            yield
        finally:
            # only what this lifespan built is released, also when startup failed half way
            if built_directory is not None:
                await built_directory.close()
            if built_store is not None:
                built_store.dispose()
            logger.info("Relay services shut down")

    app = FastAPI(
        title="AI chat relay",
        version="1.0.0",
        description="Registers users, relays their messages to an LLM and publishes replies to chat channels.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router)

    return app


app = create_app()


def main() -> None:
    settings = Settings.from_env()
    logger.info(f"Server running on {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
