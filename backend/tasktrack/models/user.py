from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from ..databases.database import Base, UTCDateTime
from .task import Task, utcnow

# Модель пользователя
class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    username = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # argon2 hash, never plaintext
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)

    tasks = relationship(Task, cascade="all, delete-orphan", passive_deletes=True)
