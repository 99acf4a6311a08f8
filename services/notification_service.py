# services/notification_service.py
"""
Best-effort notification and email dispatch.

Business services call the dispatcher only after their transaction has been
committed. Dispatch never raises: every call returns a DispatchResult, and
failures are logged and dropped so they cannot change the outcome of the
operation that triggered them.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from sqlalchemy.orm import Session

import config
from models import Notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
     ok: bool
     error: Optional[str] = None


class EmailSender(Protocol):
     def send(self, to: str, subject: str, template: str, template_data: dict) -> None:
          ...


class NotificationSink:
     """Stores in-app notifications, each in its own commit."""

     def __init__(self, db: Session):
          self.db = db

     def create(self, user_id: int, type: str, title: str, message: str, link: Optional[str]) -> Notification:
          notification = Notification(
               user_id=user_id,
               type=type,
               title=title,
               message=message,
               link=link,
          )
          try:
               self.db.add(notification)
               self.db.commit()
          except Exception:
               self.db.rollback()
               raise
          return notification


class NotificationDispatcher:
     """Fan-out point for notifications and emails."""

     def __init__(self, sink: NotificationSink, email_sender: EmailSender):
          self.sink = sink
          self.email_sender = email_sender

     def notify(
          self,
          user_id: int,
          title: str,
          message: str,
          link: Optional[str] = None,
          type: str = "SYSTEM",
     ) -> DispatchResult:
          try:
               self.sink.create(user_id, type, title, message, link)
          except Exception as e:
               logger.warning("Notification to user %s failed: %s", user_id, e, exc_info=True)
               return DispatchResult(ok=False, error=str(e))
          return DispatchResult(ok=True)

     def email(self, to: Optional[str], subject: str, template: str, template_data: dict) -> DispatchResult:
          if not to:
               return DispatchResult(ok=False, error="no recipient")
          try:
               self.email_sender.send(to, subject, template, template_data)
          except Exception as e:
               logger.warning("Email '%s' to %s failed: %s", subject, to, e, exc_info=True)
               return DispatchResult(ok=False, error=str(e))
          return DispatchResult(ok=True)


def app_link(path: str) -> str:
     """Absolute link into the web app, for emails."""
     return f"{config.APP_URL.rstrip('/')}{path}"
