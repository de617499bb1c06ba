from typing import Optional

from pydantic import BaseModel


class DirectoryUser(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = "user"


class ChannelMetadata(BaseModel):
    name: str
    created_by_id: str
