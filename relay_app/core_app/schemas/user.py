from pydantic import Field

from .base import CamelModel


class RegisterUserRequest(CamelModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)


class RegisterUserResponse(CamelModel):
    user_id: str
    name: str
    email: str
