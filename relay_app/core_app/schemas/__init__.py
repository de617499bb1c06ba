from .directory import ChannelMetadata, DirectoryUser
from .message import ChatRecordOut, ChatRequest, ChatResponse, GetMessagesRequest, MessagesResponse
from .user import RegisterUserRequest, RegisterUserResponse

__all__ = [
    "ChannelMetadata",
    "ChatRecordOut",
    "ChatRequest",
    "ChatResponse",
    "DirectoryUser",
    "GetMessagesRequest",
    "MessagesResponse",
    "RegisterUserRequest",
    "RegisterUserResponse",
]
