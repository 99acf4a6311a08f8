# models/notification.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, func
from .base import Base


class Notification(Base):
     """In-app notification shown to a user."""

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     type = Column(String(50), default="SYSTEM", nullable=False)
     title = Column(String(255), nullable=False)
     message = Column(Text, nullable=False)
     link = Column(String(500), nullable=True)
     read = Column(Boolean, default=False, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<Notification(id={self.id}, user_id={self.user_id}, title='{self.title}')>"
