# relay_app/core_app/database/models.py
from sqlalchemy import Column, Integer, Text, DateTime, func

from .base import Base


class User(Base):
    __tablename__ = 'users'
    user_id = Column('userId', Text, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    created_at = Column('timestamp', DateTime, nullable=False, server_default=func.now())


class ChatRecord(Base):
    __tablename__ = 'chats'
    id = Column(Integer, primary_key=True, autoincrement=True)
    # not a foreign key; the chat handler checks the users row before inserting
    user_id = Column(Text, nullable=False, index=True)
    message = Column(Text, nullable=False)
    reply = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
