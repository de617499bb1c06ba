import asyncio
from typing import Any, List, Optional

import aiohttp
from stream_chat import StreamChatAsync
from stream_chat.base.exceptions import StreamAPIException

from relay_app.core_app.exceptions import DirectoryError
from relay_app.core_app.schemas import ChannelMetadata, DirectoryUser
from relay_app.core_app.tools.setup_logger import setup_logger

logger = setup_logger(__name__.upper())

DIRECTORY_ERRORS = (StreamAPIException, aiohttp.ClientError, asyncio.TimeoutError)


class DirectoryChannel:
    """A created chat channel that messages can be published to."""

    def __init__(self, channel: Any, channel_id: str):
        self._channel = channel
        self.channel_id = channel_id

    async def publish(self, text: str, author_id: str) -> None:
        try:
            await self._channel.send_message({"text": text}, author_id)
        except DIRECTORY_ERRORS as e:
            logger.error(f"Publishing to channel {self.channel_id} failed: {e}")
            raise DirectoryError(f"publish to {self.channel_id} failed") from e


class DirectoryClient:
    def __init__(self, client: Any):
        self._client = client

    @classmethod
    def from_credentials(cls, api_key: Optional[str], api_secret: Optional[str]) -> "DirectoryClient":
        if not api_key:
            raise ValueError("STREAM_API_KEY environment variable is not set")
        if not api_secret:
            raise ValueError("STREAM_PRIVATE_KEY environment variable is not set")
        return cls(StreamChatAsync(api_key=api_key, api_secret=api_secret))

    async def find_users(self, user_id: str) -> List[DirectoryUser]:
        try:
            response = await self._client.query_users({"id": {"$eq": user_id}})
        except DIRECTORY_ERRORS as e:
            logger.error(f"Directory user query failed for {user_id}: {e}")
            raise DirectoryError(f"user query for {user_id} failed") from e

        return [
            DirectoryUser(
                id=user["id"],
                name=user.get("name"),
                email=user.get("email"),
                role=user.get("role", "user"),
            )
            for user in response.get("users", [])
        ]

    async def upsert_user(self, user: DirectoryUser) -> None:
        try:
            await self._client.upsert_user(user.model_dump(exclude_none=True))
        except DIRECTORY_ERRORS as e:
            logger.error(f"Directory upsert failed for {user.id}: {e}")
            raise DirectoryError(f"upsert of {user.id} failed") from e
        logger.info(f"Upserted user {user.id} in the directory")

    async def create_channel(self, kind: str, channel_id: str, metadata: ChannelMetadata) -> DirectoryChannel:
        channel = self._client.channel(kind, channel_id, {"name": metadata.name})
        try:
            # creating an existing channel is a no-op on the platform side
            await channel.create(metadata.created_by_id)
        except DIRECTORY_ERRORS as e:
            logger.error(f"Channel creation failed for {channel_id}: {e}")
            raise DirectoryError(f"channel {channel_id} creation failed") from e
        return DirectoryChannel(channel, channel_id)

    async def close(self) -> None:
        await self._client.close()
