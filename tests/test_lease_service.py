"""Tests for lease issuance, receipt backfill and lease lifecycle."""
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from conftest import TODAY, FailingEmailSender
from exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from models import (
     ApplicationStatus,
     InventoryType,
     Lease,
     LeaseStatus,
     LeaseTenant,
     Receipt,
     ReceiptStatus,
)
from services.identity import Identity
from services.lease_service import LeaseService, months_between
from services.notification_service import NotificationDispatcher, NotificationSink


class TestMonthsBetween:

     def test_inclusive_range(self):
          assert months_between(date(2026, 3, 20), date(2026, 6, 15)) == [
               (2026, 3), (2026, 4), (2026, 5), (2026, 6),
          ]

     def test_crosses_year_boundary(self):
          assert months_between(date(2025, 11, 30), date(2026, 2, 1)) == [
               (2025, 11), (2025, 12), (2026, 1), (2026, 2),
          ]

     def test_same_month(self):
          assert months_between(date(2026, 6, 1), date(2026, 6, 30)) == [(2026, 6)]

     def test_end_before_start(self):
          assert months_between(date(2026, 6, 1), date(2026, 5, 31)) == []


class TestCreateLease:

     def test_lease_starting_today_is_pending(self, issue_lease, db):
          issuance = issue_lease(TODAY)

          assert issuance.is_retroactive is False
          assert issuance.receipts_generated == 0
          assert issuance.lease.status == LeaseStatus.PENDING
          assert db.query(Receipt).count() == 0

     def test_lease_starting_yesterday_is_active(self, issue_lease, db):
          issuance = issue_lease(TODAY - timedelta(days=1))

          assert issuance.is_retroactive is True
          assert issuance.lease.status == LeaseStatus.ACTIVE
          assert issuance.receipts_generated >= 1
          assert db.query(Receipt).count() == issuance.receipts_generated

     def test_backfill_three_months_back(self, issue_lease, db):
          issuance = issue_lease(date(2026, 3, 15))

          receipts = db.query(Receipt).order_by(Receipt.year, Receipt.month).all()
          assert issuance.receipts_generated == 4
          assert [r.period for r in receipts] == [(2026, 3), (2026, 4), (2026, 5), (2026, 6)]
          for receipt in receipts:
               assert receipt.status == ReceiptStatus.CONFIRMED
               assert receipt.total_amount == Decimal("1000.00")
               assert receipt.charges == Decimal("0")
               assert receipt.declared_at == datetime(receipt.year, receipt.month, 5)
               assert receipt.paid_at == receipt.declared_at
               assert receipt.lease_id == issuance.lease.id

     def test_backfill_includes_charges(self, issue_lease, db):
          issue_lease(date(2026, 5, 1), charges=Decimal("80.00"))

          totals = {r.total_amount for r in db.query(Receipt)}
          assert totals == {Decimal("1080.00")}

     def test_primary_occupant_and_property_flag(self, issue_lease, db, tenant, prop):
          start = date(2026, 4, 2)
          lease = issue_lease(start).lease

          occupants = db.query(LeaseTenant).filter_by(lease_id=lease.id).all()
          assert len(occupants) == 1
          primary = occupants[0]
          assert primary.tenant_id == tenant.id
          assert primary.is_primary is True
          assert primary.share == 100
          assert primary.joined_at == datetime(2026, 4, 2)
          db.refresh(prop)
          assert prop.available is False
          assert prop.occupant_id == tenant.id

     def test_deposit_defaults_to_rent(self, issue_lease):
          lease = issue_lease(TODAY).lease

          assert lease.deposit == Decimal("1000.00")
          assert lease.charges == Decimal("0")

     def test_notifies_both_parties(self, issue_lease, email_sender, owner, tenant):
          issue_lease(TODAY)

          assert email_sender.templates_to(owner.email) == ["new_application", "lease_signed"]
          assert email_sender.templates_to(tenant.email) == ["application_accepted", "lease_signed"]

     def test_retroactive_welcome(self, issue_lease, email_sender, tenant):
          issue_lease(date(2026, 4, 1))

          welcome = [m for m in email_sender.sent if m["template"] == "welcome_retroactive"]
          assert len(welcome) == 1
          assert welcome[0]["to"] == tenant.email
          assert welcome[0]["data"]["receipts_generated"] == 3

     def test_email_failure_keeps_lease(self, db, clock, owner_identity, accepted_application):
          dispatcher = NotificationDispatcher(NotificationSink(db), FailingEmailSender())
          service = LeaseService(db, dispatcher, clock)

          issuance = service.create_lease(
               owner_identity,
               application_id=accepted_application.id,
               start_date=date(2026, 5, 10),
               rent_amount=Decimal("900.00"),
          )

          assert db.get(Lease, issuance.lease.id) is not None
          assert db.query(Receipt).count() == 2


class TestCreateLeasePreconditions:

     def test_unknown_application(self, lease_service, owner_identity):
          with pytest.raises(NotFoundError):
               lease_service.create_lease(owner_identity, application_id=404, start_date=TODAY, rent_amount=Decimal("1"))

     def test_not_property_owner(self, lease_service, accepted_application, tenant_identity):
          with pytest.raises(ForbiddenError):
               lease_service.create_lease(
                    tenant_identity, application_id=accepted_application.id, start_date=TODAY, rent_amount=Decimal("1")
               )

     def test_application_not_accepted(self, lease_service, application_service, tenant_identity, owner_identity, prop):
          application, _ = application_service.create_application(tenant_identity, prop.id)

          with pytest.raises(ConflictError, match="accepted"):
               lease_service.create_lease(
                    owner_identity, application_id=application.id, start_date=TODAY, rent_amount=Decimal("1")
               )
          assert application.status == ApplicationStatus.PENDING

     def test_end_before_start(self, lease_service, accepted_application, owner_identity):
          with pytest.raises(ValidationError):
               lease_service.create_lease(
                    owner_identity,
                    application_id=accepted_application.id,
                    start_date=date(2026, 7, 1),
                    end_date=date(2026, 7, 1),
                    rent_amount=Decimal("1000"),
               )

     def test_existing_lease_blocks(self, issue_lease, db):
          issue_lease(TODAY)

          with pytest.raises(ConflictError, match="already exists"):
               issue_lease(TODAY)
          assert db.query(Lease).count() == 1


class TestLifecycle:

     def test_activation_requires_move_in_inventory(self, issue_lease, lease_service, owner_identity):
          lease = issue_lease(TODAY).lease

          assert lease.can_activate() == (False, "The move-in inventory must be confirmed before activating the lease")
          with pytest.raises(ConflictError, match="move-in"):
               lease_service.activate_lease(owner_identity, lease.id)

     def test_activate_then_end(self, issue_lease, lease_service, owner_identity, prop, clock, db):
          lease = issue_lease(TODAY).lease
          lease_service.record_inventory(owner_identity, lease.id, InventoryType.IN)
          lease = lease_service.activate_lease(owner_identity, lease.id)
          assert lease.status == LeaseStatus.ACTIVE
          assert lease.inventory_in_by == owner_identity.user_id

          with pytest.raises(ConflictError, match="move-out"):
               lease_service.end_lease(owner_identity, lease.id)

          clock.advance(days=200)
          lease_service.record_inventory(owner_identity, lease.id, InventoryType.OUT)
          lease = lease_service.end_lease(owner_identity, lease.id)

          assert lease.status == LeaseStatus.ENDED
          assert lease.end_date == clock.today()
          db.refresh(prop)
          assert prop.available is True
          assert prop.occupant_id is None

     def test_inventory_must_match_status(self, issue_lease, lease_service, owner_identity):
          lease = issue_lease(TODAY).lease

          with pytest.raises(ConflictError, match="active"):
               lease_service.record_inventory(owner_identity, lease.id, InventoryType.OUT)

     def test_only_owner_transitions(self, issue_lease, lease_service, tenant_identity):
          lease = issue_lease(TODAY).lease

          with pytest.raises(ForbiddenError):
               lease_service.record_inventory(tenant_identity, lease.id, InventoryType.IN)
          with pytest.raises(ForbiddenError):
               lease_service.activate_lease(tenant_identity, lease.id)


class TestReads:

     def test_list_by_role(self, issue_lease, lease_service, owner_identity, tenant_identity, make_user):
          lease = issue_lease(TODAY).lease
          stranger = Identity.from_user(make_user())

          assert [l.id for l in lease_service.list_leases(owner_identity, role="owner")] == [lease.id]
          assert [l.id for l in lease_service.list_leases(tenant_identity)] == [lease.id]
          assert lease_service.list_leases(stranger) == []

     def test_get_restricted(self, issue_lease, lease_service, tenant_identity, make_user):
          lease = issue_lease(TODAY).lease

          assert lease_service.get_lease(tenant_identity, lease.id).id == lease.id
          with pytest.raises(ForbiddenError):
               lease_service.get_lease(Identity.from_user(make_user()), lease.id)
          with pytest.raises(NotFoundError):
               lease_service.get_lease(tenant_identity, 999)
