# services/application_service.py
"""
Application Service - admission of tenancy requests.

Handles creation (with cooldown and duplicate rules), owner/tenant status
transitions and role-scoped listing. Leases are issued separately by
LeaseService once an application is ACCEPTED.
"""
import logging
from datetime import timedelta
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

import config
from database import atomic
from exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from models import (
     Application,
     ApplicationDocument,
     ApplicationStatus,
     Document,
     Lease,
     LeaseStatus,
     LeaseTenant,
     Property,
     User,
)
from services.clock import Clock
from services.identity import Identity
from services.notification_service import NotificationDispatcher, app_link

logger = logging.getLogger(__name__)


class ApplicationService:
     """Service class for application-related business logic."""

     def __init__(self, db: Session, dispatcher: NotificationDispatcher, clock: Clock):
          self.db = db
          self.dispatcher = dispatcher
          self.clock = clock

     # ------------------------------------------------------------------
     # Create
     # ------------------------------------------------------------------

     def create_application(
          self,
          identity: Identity,
          property_id: int,
          message: Optional[str] = None,
          document_ids: Optional[Iterable[int]] = None,
     ) -> Tuple[Application, int]:
          """
          Create a PENDING application for the calling tenant.

          Returns:
               (application, number of documents shared with the owner)

          Raises:
               ForbiddenError: caller is not a tenant
               NotFoundError: property does not exist
               ConflictError: property unavailable, own property, cooldown
                    active, already applied, foreign document
          """
          if not identity.is_tenant:
               raise ForbiddenError("You must be a tenant to apply")

          prop = self.db.get(Property, property_id)
          if prop is None:
               raise NotFoundError("Property not found")
          if not prop.available:
               raise ConflictError("This property is no longer available")
          if prop.is_owned_by(identity.user_id):
               raise ConflictError("You cannot apply to your own property")

          now = self.clock.now()
          self._check_cooldown(property_id, identity.user_id, now)
          stale = self._find_replaceable_application(property_id, identity.user_id)

          doc_ids = sorted(set(document_ids or []))
          if doc_ids:
               owned = (
                    self.db.query(Document.id)
                    .filter(Document.id.in_(doc_ids), Document.owner_id == identity.user_id)
                    .count()
               )
               if owned != len(doc_ids):
                    raise ConflictError("Some documents do not belong to you")

          with atomic(self.db):
               if stale is not None:
                    logger.info(
                         "Replacing application %s for property %s",
                         stale.id, property_id,
                    )
                    self.db.query(Lease).filter(Lease.application_id == stale.id).update(
                         {"application_id": None}, synchronize_session="fetch"
                    )
                    self.db.delete(stale)
                    self.db.flush()

               application = Application(
                    property_id=property_id,
                    tenant_id=identity.user_id,
                    status=ApplicationStatus.PENDING,
                    message=message or None,
                    created_at=now,
                    updated_at=now,
               )
               self.db.add(application)
               self.db.flush()

               for doc_id in doc_ids:
                    self.db.add(ApplicationDocument(
                         application_id=application.id,
                         document_id=doc_id,
                         shared_at=now,
                    ))

          logger.info(
               "Application %s created by user %s for property %s (%d documents)",
               application.id, identity.user_id, property_id, len(doc_ids),
          )
          self._notify_owner_of_application(prop, application, identity)
          return application, len(doc_ids)

     def _check_cooldown(self, property_id: int, tenant_id: int, now) -> None:
          cancelled = (
               self.db.query(Application)
               .filter(
                    Application.property_id == property_id,
                    Application.tenant_id == tenant_id,
                    Application.status == ApplicationStatus.CANCELLED,
               )
               .order_by(Application.updated_at.desc())
               .first()
          )
          if cancelled is None:
               return

          cooldown = timedelta(days=config.APPLICATION_COOLDOWN_DAYS)
          elapsed = now - cancelled.updated_at
          if elapsed < cooldown:
               days_remaining = config.APPLICATION_COOLDOWN_DAYS - elapsed.days
               raise ConflictError(
                    f"You cancelled an application for this property recently. "
                    f"You can apply again in {days_remaining} day(s).",
                    detail=f"daysRemaining={days_remaining}",
               )

     def _find_replaceable_application(self, property_id: int, tenant_id: int) -> Optional[Application]:
          """
          Return the active application to delete before re-applying, if any.

          The leases considered are those issued from the application, held
          by the tenant, or occupied by the tenant on this property, so a
          primary switch does not hide them. An active application gives way
          when all of them are ENDED, or when it is ACCEPTED and no lease was
          ever issued (it can no longer change status).
          """
          existing = (
               self.db.query(Application)
               .filter(
                    Application.property_id == property_id,
                    Application.tenant_id == tenant_id,
                    Application.status.in_(ApplicationStatus.active()),
               )
               .first()
          )
          if existing is None:
               return None

          occupied = select(LeaseTenant.lease_id).where(LeaseTenant.tenant_id == tenant_id)
          leases = (
               self.db.query(Lease)
               .filter(
                    Lease.property_id == property_id,
                    or_(
                         Lease.application_id == existing.id,
                         Lease.tenant_id == tenant_id,
                         Lease.id.in_(occupied),
                    ),
               )
               .all()
          )
          if leases and all(lease.status == LeaseStatus.ENDED for lease in leases):
               return existing
          if not leases and existing.status == ApplicationStatus.ACCEPTED:
               return existing

          raise ConflictError(
               "You have already applied to this property",
               detail=f"Your application is {existing.status.value.lower()}; "
                      f"you can apply again once it is closed.",
          )

     def _notify_owner_of_application(self, prop: Property, application: Application, identity: Identity) -> None:
          tenant = self.db.get(User, identity.user_id)
          tenant_name = tenant.full_name if tenant else "A tenant"
          self.dispatcher.notify(
               prop.owner_id,
               title="New application",
               message=f"{tenant_name} applied for \"{prop.title}\".",
               link="/owner/applications",
          )
          owner = self.db.get(User, prop.owner_id)
          self.dispatcher.email(
               owner.email if owner else None,
               subject=f"New application - {prop.title}",
               template="new_application",
               template_data={
                    "property_title": prop.title,
                    "tenant_name": tenant_name,
                    "message": application.message or "",
                    "link": app_link("/owner/applications"),
               },
          )

     # ------------------------------------------------------------------
     # Transitions
     # ------------------------------------------------------------------

     def transition_application(
          self,
          identity: Identity,
          application_id: int,
          status: ApplicationStatus,
     ) -> Application:
          """
          Owner accepts/rejects, tenant cancels. Only PENDING applications move.
          """
          application = self.db.get(Application, application_id)
          if application is None:
               raise NotFoundError("Application not found")

          prop = application.property
          if status in (ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED):
               if not prop.is_owned_by(identity.user_id):
                    raise ForbiddenError("Only the property owner can accept or reject an application")
          elif status == ApplicationStatus.CANCELLED:
               if application.tenant_id != identity.user_id:
                    raise ForbiddenError("Only the applicant can cancel an application")
          else:
               raise ValidationError("Invalid status (ACCEPTED, REJECTED or CANCELLED)")

          if application.status != ApplicationStatus.PENDING:
               raise ConflictError("This application has already been processed")

          with atomic(self.db):
               application.transition_to(status, self.clock.now())

          logger.info("Application %s -> %s by user %s", application.id, status.value, identity.user_id)
          self._notify_transition(application, prop)
          return application

     def _notify_transition(self, application: Application, prop: Property) -> None:
          if application.status == ApplicationStatus.CANCELLED:
               self.dispatcher.notify(
                    prop.owner_id,
                    title="Application withdrawn",
                    message=f"An application for \"{prop.title}\" was cancelled by the tenant.",
                    link="/owner/applications",
               )
               return

          accepted = application.status == ApplicationStatus.ACCEPTED
          self.dispatcher.notify(
               application.tenant_id,
               title="Application accepted" if accepted else "Application declined",
               message=(
                    f"Your application for \"{prop.title}\" was "
                    f"{'accepted' if accepted else 'declined'}."
               ),
               link="/tenant/applications",
          )
          if accepted:
               tenant = self.db.get(User, application.tenant_id)
               self.dispatcher.email(
                    tenant.email if tenant else None,
                    subject=f"Application accepted - {prop.title}",
                    template="application_accepted",
                    template_data={
                         "property_title": prop.title,
                         "link": app_link("/tenant/applications"),
                    },
               )

     # ------------------------------------------------------------------
     # Reads
     # ------------------------------------------------------------------

     def list_applications(self, identity: Identity, role: str = "tenant") -> List[Application]:
          query = self.db.query(Application)
          if role == "owner":
               query = query.join(Property, Application.property_id == Property.id).filter(
                    Property.owner_id == identity.user_id
               )
          else:
               query = query.filter(Application.tenant_id == identity.user_id)
          return query.order_by(Application.created_at.desc(), Application.id.desc()).all()

     def get_application(self, identity: Identity, application_id: int) -> Application:
          application = self.db.get(Application, application_id)
          if application is None:
               raise NotFoundError("Application not found")
          is_owner = application.property.is_owned_by(identity.user_id)
          if not is_owner and application.tenant_id != identity.user_id:
               raise ForbiddenError("You do not have access to this application")
          return application
