"""Tests for rent receipts: declaration, confirmation, visibility and reminders."""
from datetime import datetime
from decimal import Decimal

import pytest

from conftest import NOW, TODAY, FailingEmailSender
from exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from models import Notification, Receipt, ReceiptStatus
from services.identity import Identity
from services.notification_service import NotificationDispatcher, NotificationSink
from services.payment_service import PaymentService, period_label


@pytest.fixture
def cotenant(make_user):
     return make_user(email="cotenant@example.com", first_name="Chloe", last_name="Cotenant")


@pytest.fixture
def cotenant_identity(cotenant):
     return Identity.from_user(cotenant)


def _periods(receipts):
     return [r.period for r in receipts]


def test_period_label():
     assert period_label(3, 2026) == "March 2026"


class TestDeclarePayment:

     def test_declares_current_month(self, payment_service, current_lease, tenant_identity, owner, email_sender, db):
          receipt = payment_service.declare_payment(tenant_identity, current_lease.id, month=6, year=2026)

          assert receipt.status == ReceiptStatus.DECLARED
          assert receipt.total_amount == Decimal("1000.00")
          assert receipt.declared_at == NOW
          assert receipt.paid_at is None
          assert receipt.payment_method == "transfer"
          assert email_sender.templates_to(owner.email)[-1] == "payment_declared"
          note = db.query(Notification).filter_by(user_id=owner.id, title="Payment declared").one()
          assert note.type == "PAYMENT"

     def test_duplicate_period(self, payment_service, current_lease, tenant_identity, db):
          payment_service.declare_payment(tenant_identity, current_lease.id, month=6, year=2026)

          with pytest.raises(ConflictError, match="June 2026"):
               payment_service.declare_payment(tenant_identity, current_lease.id, month=6, year=2026)
          assert db.query(Receipt).count() == 1

     @pytest.mark.parametrize("month, year", [(5, 2026), (7, 2026), (6, 2025)])
     def test_outside_window(self, payment_service, current_lease, tenant_identity, month, year):
          with pytest.raises(ValidationError, match="cannot be declared"):
               payment_service.declare_payment(tenant_identity, current_lease.id, month=month, year=year)

     def test_invalid_month(self, payment_service, current_lease, tenant_identity):
          with pytest.raises(ValidationError):
               payment_service.declare_payment(tenant_identity, current_lease.id, month=13, year=2026)

     def test_window_grows_with_time(self, payment_service, current_lease, tenant_identity, clock):
          clock.set_time(datetime(2026, 8, 20, 9, 0))

          declared = [
               payment_service.declare_payment(tenant_identity, current_lease.id, month=m, year=2026)
               for m in (6, 7, 8)
          ]

          assert [r.month for r in declared] == [6, 7, 8]

     def test_stranger_forbidden(self, payment_service, current_lease, make_user):
          with pytest.raises(ForbiddenError):
               payment_service.declare_payment(Identity.from_user(make_user()), current_lease.id, month=6, year=2026)

     def test_pending_lease(self, payment_service, issue_lease, tenant_identity):
          lease = issue_lease(TODAY).lease

          with pytest.raises(ConflictError, match="active lease"):
               payment_service.declare_payment(tenant_identity, lease.id, month=6, year=2026)

     def test_unknown_lease(self, payment_service, tenant_identity):
          with pytest.raises(NotFoundError):
               payment_service.declare_payment(tenant_identity, 999, month=6, year=2026)

     def test_unique_constraint_backs_duplicate_check(self, payment_service, current_lease, tenant_identity, monkeypatch, db):
          payment_service.declare_payment(tenant_identity, current_lease.id, month=6, year=2026)
          monkeypatch.setattr(payment_service, "_ensure_period_free", lambda *args: None)

          with pytest.raises(ConflictError, match="already exists"):
               payment_service.declare_payment(tenant_identity, current_lease.id, month=6, year=2026)
          assert db.query(Receipt).count() == 1


class TestConfirmReceipt:

     def test_owner_confirms(self, payment_service, current_lease, tenant_identity, owner_identity, tenant, clock, email_sender):
          receipt = payment_service.declare_payment(tenant_identity, current_lease.id, month=6, year=2026)
          clock.advance(days=2)

          confirmed = payment_service.confirm_receipt(owner_identity, receipt.id)

          assert confirmed.status == ReceiptStatus.CONFIRMED
          assert confirmed.paid_at == clock.now()
          assert confirmed.declared_at == NOW
          assert email_sender.templates_to(tenant.email)[-1] == "receipt_generated"

     def test_confirm_twice(self, payment_service, current_lease, tenant_identity, owner_identity):
          receipt = payment_service.declare_payment(tenant_identity, current_lease.id, month=6, year=2026)
          payment_service.confirm_receipt(owner_identity, receipt.id)

          with pytest.raises(ConflictError, match="already been confirmed"):
               payment_service.confirm_receipt(owner_identity, receipt.id)

     def test_tenant_cannot_confirm(self, payment_service, current_lease, tenant_identity):
          receipt = payment_service.declare_payment(tenant_identity, current_lease.id, month=6, year=2026)

          with pytest.raises(ForbiddenError):
               payment_service.confirm_receipt(tenant_identity, receipt.id)
          assert receipt.status == ReceiptStatus.DECLARED

     def test_unknown_receipt(self, payment_service, owner_identity):
          with pytest.raises(NotFoundError):
               payment_service.confirm_receipt(owner_identity, 12345)


class TestOwnerDeclareAndConfirm:

     def test_defaults_to_lease_terms(self, payment_service, current_lease, owner_identity):
          receipt = payment_service.owner_declare_and_confirm(owner_identity, current_lease.id, month=6, year=2026)

          assert receipt.status == ReceiptStatus.CONFIRMED
          assert receipt.rent_amount == Decimal("1000.00")
          assert receipt.total_amount == Decimal("1000.00")
          assert receipt.declared_at == NOW
          assert receipt.paid_at == NOW

     def test_custom_amounts(self, payment_service, current_lease, owner_identity):
          receipt = payment_service.owner_declare_and_confirm(
               owner_identity,
               current_lease.id,
               month=6,
               year=2026,
               rent_amount=Decimal("500.00"),
               charges=Decimal("20.00"),
               payment_method="cash",
          )

          assert receipt.total_amount == Decimal("520.00")
          assert receipt.payment_method == "cash"

     def test_allowed_before_activation(self, payment_service, issue_lease, owner_identity):
          lease = issue_lease(TODAY).lease

          receipt = payment_service.owner_declare_and_confirm(owner_identity, lease.id, month=6, year=2026)

          assert receipt.status == ReceiptStatus.CONFIRMED

     def test_future_month(self, payment_service, current_lease, owner_identity):
          with pytest.raises(ValidationError, match="future"):
               payment_service.owner_declare_and_confirm(owner_identity, current_lease.id, month=7, year=2026)

     def test_backfilled_month_is_taken(self, payment_service, active_lease, owner_identity):
          with pytest.raises(ConflictError, match="March 2026"):
               payment_service.owner_declare_and_confirm(owner_identity, active_lease.id, month=3, year=2026)

     def test_only_owner(self, payment_service, current_lease, tenant_identity):
          with pytest.raises(ForbiddenError):
               payment_service.owner_declare_and_confirm(tenant_identity, current_lease.id, month=6, year=2026)


class TestReceiptVisibility:

     def test_cotenant_sees_from_join_month(
          self, payment_service, colocation_service, active_lease, owner_identity, tenant_identity,
          cotenant, cotenant_identity, clock,
     ):
          colocation_service.add_occupant(owner_identity, active_lease.id, cotenant.email)

          assert _periods(payment_service.list_receipts(cotenant_identity)) == [(2026, 6)]
          assert _periods(payment_service.list_receipts(tenant_identity)) == [
               (2026, 6), (2026, 5), (2026, 4), (2026, 3),
          ]

          clock.set_time(datetime(2026, 7, 3, 10, 0))
          payment_service.owner_declare_and_confirm(owner_identity, active_lease.id, month=7, year=2026)

          assert _periods(payment_service.list_receipts(cotenant_identity)) == [(2026, 7), (2026, 6)]

     def test_departed_cotenant_sees_nothing(
          self, payment_service, colocation_service, active_lease, owner_identity, cotenant, cotenant_identity,
     ):
          colocation_service.add_occupant(owner_identity, active_lease.id, cotenant.email)
          colocation_service.remove_occupant(owner_identity, active_lease.id, cotenant.id)

          assert payment_service.list_receipts(cotenant_identity) == []

     def test_owner_sees_all(self, payment_service, active_lease, owner_identity, tenant_identity):
          assert len(payment_service.list_receipts(owner_identity, role="owner")) == 4
          assert payment_service.list_receipts(tenant_identity, role="owner") == []

     def test_filters(self, payment_service, colocation_service, active_lease, owner_identity, cotenant, cotenant_identity, clock):
          colocation_service.add_occupant(owner_identity, active_lease.id, cotenant.email)
          clock.set_time(datetime(2026, 7, 3, 10, 0))
          payment_service.declare_payment(cotenant_identity, active_lease.id, month=7, year=2026)

          declared = payment_service.list_receipts(owner_identity, role="owner", status=ReceiptStatus.DECLARED)
          assert _periods(declared) == [(2026, 7)]
          assert len(payment_service.list_receipts(owner_identity, role="owner", lease_id=active_lease.id)) == 5
          assert payment_service.list_receipts(owner_identity, role="owner", lease_id=999) == []

     def test_cotenant_cannot_declare_before_join(
          self, payment_service, colocation_service, active_lease, owner_identity, cotenant, cotenant_identity,
     ):
          colocation_service.add_occupant(owner_identity, active_lease.id, cotenant.email)

          with pytest.raises(ValidationError):
               payment_service.declare_payment(cotenant_identity, active_lease.id, month=5, year=2026)
          with pytest.raises(ConflictError):
               payment_service.declare_payment(cotenant_identity, active_lease.id, month=6, year=2026)


class TestReminders:

     def test_unpaid_lease_is_reminded(self, payment_service, current_lease, tenant, email_sender):
          assert payment_service.send_reminders() == 1
          assert email_sender.templates_to(tenant.email)[-1] == "payment_reminder"

     def test_paid_lease_is_skipped(self, payment_service, current_lease, tenant_identity):
          payment_service.declare_payment(tenant_identity, current_lease.id, month=6, year=2026)

          assert payment_service.send_reminders() == 0

     def test_backfilled_lease_is_skipped(self, payment_service, active_lease):
          assert payment_service.send_reminders() == 0

     def test_nothing_before_reminder_day(self, payment_service, current_lease, clock, email_sender):
          clock.set_time(datetime(2026, 7, 4, 8, 0))

          assert payment_service.send_reminders() == 0
          assert all(m["template"] != "payment_reminder" for m in email_sender.sent)

     def test_failed_emails_not_counted(self, db, clock, current_lease):
          dispatcher = NotificationDispatcher(NotificationSink(db), FailingEmailSender())

          assert PaymentService(db, dispatcher, clock).send_reminders() == 0
