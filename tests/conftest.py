"""
Pytest fixtures for the rental backend test suite.

Provides:
- An in-memory SQLite database, rebuilt for every test
- A deterministic clock (2026-06-15 12:00) and a recording email sender
- Users, a property and the four services wired to them
- A FastAPI TestClient with the session, clock and email sink overridden
"""
import os

# Settings are read at import time; point them at test values first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date, datetime
from decimal import Decimal

import pytest
from jose import jwt

from database import SessionLocal, engine
from exceptions import EmailDeliveryError
from models import ApplicationStatus, Base, InventoryType, Property, User
from services.application_service import ApplicationService
from services.clock import DeterministicClock
from services.colocation_service import ColocationService
from services.identity import Identity
from services.lease_service import LeaseService
from services.notification_service import NotificationDispatcher, NotificationSink
from services.payment_service import PaymentService

NOW = datetime(2026, 6, 15, 12, 0, 0)
TODAY = NOW.date()


class RecordingEmailSender:
     """Email sink that keeps every message in memory."""

     def __init__(self):
          self.sent = []

     def send(self, to, subject, template, template_data):
          self.sent.append({"to": to, "subject": subject, "template": template, "data": template_data})

     def templates_to(self, address):
          return [m["template"] for m in self.sent if m["to"] == address]


class FailingEmailSender:
     def send(self, to, subject, template, template_data):
          raise EmailDeliveryError("Brevo error: service unavailable")


class BrokenSink:
     def create(self, user_id, type, title, message, link):
          raise RuntimeError("notifications table unavailable")


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def db():
     Base.metadata.create_all(engine)
     session = SessionLocal()
     try:
          yield session
     finally:
          session.close()
          Base.metadata.drop_all(engine)


@pytest.fixture
def clock():
     return DeterministicClock(NOW)


@pytest.fixture
def email_sender():
     return RecordingEmailSender()


@pytest.fixture
def dispatcher(db, email_sender):
     return NotificationDispatcher(NotificationSink(db), email_sender)


# =============================================================================
# Data
# =============================================================================


@pytest.fixture
def make_user(db):
     counter = {"n": 0}

     def _make_user(email=None, first_name="Test", last_name=None, is_tenant=True, is_owner=False):
          counter["n"] += 1
          user = User(
               email=email or f"user{counter['n']}@example.com",
               first_name=first_name,
               last_name=last_name or f"User{counter['n']}",
               is_tenant=is_tenant,
               is_owner=is_owner,
          )
          db.add(user)
          db.commit()
          return user

     return _make_user


@pytest.fixture
def owner(make_user):
     return make_user(email="owner@example.com", first_name="Olivia", last_name="Owner", is_tenant=False, is_owner=True)


@pytest.fixture
def tenant(make_user):
     return make_user(email="tenant@example.com", first_name="Tom", last_name="Tenant")


@pytest.fixture
def owner_identity(owner):
     return Identity.from_user(owner)


@pytest.fixture
def tenant_identity(tenant):
     return Identity.from_user(tenant)


@pytest.fixture
def make_property(db, owner):
     def _make_property(title="Sunny flat", rent=Decimal("1000.00"), owner_user=None, available=True):
          prop = Property(
               owner_id=(owner_user or owner).id,
               title=title,
               city="Lyon",
               rent=rent,
               available=available,
          )
          db.add(prop)
          db.commit()
          return prop

     return _make_property


@pytest.fixture
def prop(make_property):
     return make_property()


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def application_service(db, dispatcher, clock):
     return ApplicationService(db, dispatcher, clock)


@pytest.fixture
def lease_service(db, dispatcher, clock):
     return LeaseService(db, dispatcher, clock)


@pytest.fixture
def colocation_service(db, dispatcher, clock):
     return ColocationService(db, dispatcher, clock)


@pytest.fixture
def payment_service(db, dispatcher, clock):
     return PaymentService(db, dispatcher, clock)


@pytest.fixture
def accepted_application(application_service, prop, owner_identity, tenant_identity):
     application, _ = application_service.create_application(tenant_identity, prop.id)
     return application_service.transition_application(owner_identity, application.id, ApplicationStatus.ACCEPTED)


@pytest.fixture
def issue_lease(lease_service, accepted_application, owner_identity):
     """Issue a lease on the accepted application with a given start date."""

     def _issue(start_date: date, rent=Decimal("1000.00"), charges=None):
          return lease_service.create_lease(
               owner_identity,
               application_id=accepted_application.id,
               start_date=start_date,
               rent_amount=rent,
               charges=charges,
          )

     return _issue


@pytest.fixture
def active_lease(issue_lease):
     """Retroactive lease started 2026-03-10: ACTIVE, receipts March to June."""
     return issue_lease(date(2026, 3, 10)).lease


@pytest.fixture
def current_lease(issue_lease, lease_service, owner_identity):
     """Lease starting today, moved in and activated: no receipts yet."""
     lease = issue_lease(TODAY).lease
     lease_service.record_inventory(owner_identity, lease.id, InventoryType.IN)
     return lease_service.activate_lease(owner_identity, lease.id)


# =============================================================================
# API
# =============================================================================


def auth_headers(user) -> dict:
     token = jwt.encode({"id": user.id}, os.environ["JWT_SECRET"], algorithm="HS256")
     return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db, clock, email_sender):
     from fastapi.testclient import TestClient

     from database import get_session
     from dependencies import get_clock, get_email_sender
     from main import app

     def _session_override():
          yield db

     app.dependency_overrides[get_session] = _session_override
     app.dependency_overrides[get_clock] = lambda: clock
     app.dependency_overrides[get_email_sender] = lambda: email_sender
     with TestClient(app) as test_client:
          yield test_client
     app.dependency_overrides.clear()
