# routers/leases.py
"""
Lease API routes.

A lease is issued by the owner from an ACCEPTED application. Leases that
start before today are retroactive: they are ACTIVE at once and their past
months are backfilled as confirmed receipts.
"""
from fastapi import APIRouter, Depends, Query, status

from dependencies import get_current_user, get_lease_service
from models import Lease
from schemas.lease import (
     InventoryRecord,
     LeaseAction,
     LeaseCreate,
     LeaseCreateResponse,
     LeaseEnvelope,
     LeaseListResponse,
     LeaseResponse,
     LeaseTransition,
)
from services.identity import Identity
from services.lease_service import LeaseService

router = APIRouter(prefix="/api/leases", tags=["leases"])


def _build_lease_response(lease: Lease) -> LeaseResponse:
     response = LeaseResponse.model_validate(lease)
     if lease.property is not None:
          response.property_title = lease.property.title
     return response


@router.post(
     "",
     response_model=LeaseCreateResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Issue a lease from an accepted application"
)
def create_lease(
     body: LeaseCreate,
     identity: Identity = Depends(get_current_user),
     service: LeaseService = Depends(get_lease_service),
):
     """
     Create a lease for the applicant of an ACCEPTED application.

     - **startDate** before today: lease is ACTIVE immediately and one
       CONFIRMED receipt is generated per month up to the current one
     - **depositAmount**: defaults to one month of rent
     """
     issuance = service.create_lease(
          identity,
          application_id=body.application_id,
          start_date=body.start_date,
          end_date=body.end_date,
          rent_amount=body.rent_amount,
          deposit_amount=body.deposit_amount,
          charges=body.charges,
     )
     return LeaseCreateResponse(
          data=_build_lease_response(issuance.lease),
          receipts_generated=issuance.receipts_generated,
          is_retroactive=issuance.is_retroactive,
     )


@router.get(
     "",
     response_model=LeaseListResponse,
     summary="List leases"
)
def list_leases(
     role: str = Query("tenant", pattern="^(owner|tenant)$"),
     identity: Identity = Depends(get_current_user),
     service: LeaseService = Depends(get_lease_service),
):
     leases = service.list_leases(identity, role=role)
     return LeaseListResponse(data=[_build_lease_response(lease) for lease in leases])


@router.get(
     "/{lease_id}",
     response_model=LeaseEnvelope,
     summary="Get lease by ID"
)
def get_lease(
     lease_id: int,
     identity: Identity = Depends(get_current_user),
     service: LeaseService = Depends(get_lease_service),
):
     return LeaseEnvelope(data=_build_lease_response(service.get_lease(identity, lease_id)))


@router.post(
     "/{lease_id}/inventory",
     response_model=LeaseEnvelope,
     summary="Confirm the move-in or move-out inventory"
)
def record_inventory(
     lease_id: int,
     body: InventoryRecord,
     identity: Identity = Depends(get_current_user),
     service: LeaseService = Depends(get_lease_service),
):
     lease = service.record_inventory(identity, lease_id, body.type)
     return LeaseEnvelope(data=_build_lease_response(lease))


@router.patch(
     "/{lease_id}",
     response_model=LeaseEnvelope,
     summary="Activate or end a lease"
)
def transition_lease(
     lease_id: int,
     body: LeaseTransition,
     identity: Identity = Depends(get_current_user),
     service: LeaseService = Depends(get_lease_service),
):
     """
     - **activate**: PENDING lease with the move-in inventory confirmed
     - **end**: ACTIVE lease with the move-out inventory confirmed; the
       property becomes available again
     """
     if body.action == LeaseAction.ACTIVATE:
          lease = service.activate_lease(identity, lease_id)
     else:
          lease = service.end_lease(identity, lease_id)
     return LeaseEnvelope(data=_build_lease_response(lease))
