from .base import Base
from .models import ChatRecord, User
from .session import build_engine, build_session_factory

__all__ = ["Base", "ChatRecord", "User", "build_engine", "build_session_factory"]
