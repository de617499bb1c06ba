# relay_app/core_app/services/chat.py
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from relay_app.core_app.database import Base, ChatRecord, User, build_engine, build_session_factory
from relay_app.core_app.exceptions import StorageError
from relay_app.core_app.tools.setup_logger import setup_logger

logger = setup_logger(__name__.upper())


class ChatStore:
    """
    Access to the users and chats tables. Every call runs in its own session
    and commits on its own.
    """

    def __init__(self, session_factory: sessionmaker, engine: Optional[Engine] = None):
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> "ChatStore":
        engine = build_engine(database_url)
        return cls(build_session_factory(engine), engine=engine)

    def create_schema(self) -> None:
        if self._engine is None:
            return
        try:
            Base.metadata.create_all(bind=self._engine)
        except SQLAlchemyError as e:
            logger.error(f"Schema creation failed: {e}")
            raise StorageError("schema creation failed") from e

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()

    def find_user(self, user_id: str) -> Optional[User]:
        try:
            with self._session_factory() as db:
                return db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error(f"User lookup failed for {user_id}: {e}")
            raise StorageError("user lookup failed") from e

    def create_user(self, user_id: str, name: str, email: str) -> None:
        try:
            with self._session_factory() as db:
                db.add(User(user_id=user_id, name=name, email=email))
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"User insert failed for {user_id}: {e}")
            raise StorageError("user insert failed") from e

    def find_chats_by_user(self, user_id: str) -> List[ChatRecord]:
        try:
            with self._session_factory() as db:
                stmt = select(ChatRecord).where(ChatRecord.user_id == user_id).order_by(ChatRecord.id)
                return list(db.scalars(stmt).all())
        except SQLAlchemyError as e:
            logger.error(f"Chat history query failed for {user_id}: {e}")
            raise StorageError("chat history query failed") from e

    def create_chat(self, user_id: str, message: str, reply: str) -> None:
        try:
            with self._session_factory() as db:
                db.add(ChatRecord(user_id=user_id, message=message, reply=reply))
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Chat insert failed for {user_id}: {e}")
            raise StorageError("chat insert failed") from e
