# relay_app/core_app/schemas/message.py
from datetime import datetime
from typing import List

from pydantic import ConfigDict, Field

from .base import CamelModel


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1, description="Text sent by the user")
    user_id: str = Field(..., min_length=1)


class ChatResponse(CamelModel):
    reply: str = Field(..., description="Generated reply text")


class GetMessagesRequest(CamelModel):
    user_id: str = Field(..., min_length=1)


class ChatRecordOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    message: str
    reply: str
    created_at: datetime


class MessagesResponse(CamelModel):
    messages: List[ChatRecordOut]
