# dependencies.py
"""
FastAPI dependencies: identity, clock, notification dispatch and services.

Tests swap any of these through `app.dependency_overrides`.
"""
from fastapi import Depends, Request
from jose import JWTError, jwt
from sqlalchemy.orm import Session

import config
from database import get_session
from exceptions import ForbiddenError, UnauthenticatedError
from models import User
from services.application_service import ApplicationService
from services.clock import Clock, SystemClock
from services.colocation_service import ColocationService
from services.identity import Identity
from services.lease_service import LeaseService
from services.notification_service import EmailSender, NotificationDispatcher, NotificationSink
from services.payment_service import PaymentService
from utils.email import BrevoEmailSender

_system_clock = SystemClock()


def _bearer(request: Request):
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          return None
     return auth.split(" ", 1)[1]


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     token = _bearer(request)
     if not token:
          raise UnauthenticatedError("Not authenticated", detail="Missing token")
     if not config.JWT_SECRET:
          raise UnauthenticatedError("Not authenticated", detail="Token verification is not configured")
     try:
          return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
     except JWTError:
          raise UnauthenticatedError("Not authenticated", detail="Invalid token")


def get_current_user(
     token: dict = Depends(verify_token),
     db: Session = Depends(get_session),
) -> Identity:
     user_id = token.get("id")
     user = db.get(User, user_id) if user_id is not None else None
     if user is None:
          raise UnauthenticatedError("Not authenticated", detail="Unknown user")
     return Identity.from_user(user)


def verify_cron_secret(request: Request) -> None:
     """Scheduled callers authenticate with the shared CRON_SECRET."""
     if not config.CRON_SECRET or _bearer(request) != config.CRON_SECRET:
          raise ForbiddenError("Not authorized")


def get_clock() -> Clock:
     return _system_clock


def get_email_sender() -> EmailSender:
     return BrevoEmailSender()


def get_dispatcher(
     db: Session = Depends(get_session),
     email_sender: EmailSender = Depends(get_email_sender),
) -> NotificationDispatcher:
     return NotificationDispatcher(NotificationSink(db), email_sender)


def get_application_service(
     db: Session = Depends(get_session),
     dispatcher: NotificationDispatcher = Depends(get_dispatcher),
     clock: Clock = Depends(get_clock),
) -> ApplicationService:
     return ApplicationService(db, dispatcher, clock)


def get_lease_service(
     db: Session = Depends(get_session),
     dispatcher: NotificationDispatcher = Depends(get_dispatcher),
     clock: Clock = Depends(get_clock),
) -> LeaseService:
     return LeaseService(db, dispatcher, clock)


def get_colocation_service(
     db: Session = Depends(get_session),
     dispatcher: NotificationDispatcher = Depends(get_dispatcher),
     clock: Clock = Depends(get_clock),
) -> ColocationService:
     return ColocationService(db, dispatcher, clock)


def get_payment_service(
     db: Session = Depends(get_session),
     dispatcher: NotificationDispatcher = Depends(get_dispatcher),
     clock: Clock = Depends(get_clock),
) -> PaymentService:
     return PaymentService(db, dispatcher, clock)
