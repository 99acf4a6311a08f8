# routers/lease_tenants.py
"""
Colocation API routes: occupants of a lease and their rent shares.

Only the property owner changes the roster. Occupants can read it.
"""
from fastapi import APIRouter, Depends, Query, status

from dependencies import get_colocation_service, get_current_user
from models import LeaseTenant
from schemas.lease_tenant import (
     OccupantCreate,
     OccupantEnvelope,
     OccupantListResponse,
     OccupantResponse,
     OccupantUpdate,
)
from services.colocation_service import ColocationService
from services.identity import Identity

router = APIRouter(prefix="/api/leases/{lease_id}/tenants", tags=["lease tenants"])


def _build_occupant_response(occupant: LeaseTenant) -> OccupantResponse:
     response = OccupantResponse.model_validate(occupant)
     if occupant.tenant is not None:
          response.tenant_name = occupant.tenant.full_name
          response.tenant_email = occupant.tenant.email
     return response


@router.get(
     "",
     response_model=OccupantListResponse,
     summary="List active occupants"
)
def list_occupants(
     lease_id: int,
     identity: Identity = Depends(get_current_user),
     service: ColocationService = Depends(get_colocation_service),
):
     """
     Active occupants, primary first. `shareWarning` is true when the
     shares do not add up to 100.
     """
     roster = service.list_occupants(identity, lease_id)
     return OccupantListResponse(
          data=[_build_occupant_response(o) for o in roster.occupants],
          total_share=roster.total_share,
          share_warning=roster.share_warning,
     )


@router.post(
     "",
     response_model=OccupantEnvelope,
     status_code=status.HTTP_201_CREATED,
     summary="Add a co-tenant"
)
def add_occupant(
     lease_id: int,
     body: OccupantCreate,
     identity: Identity = Depends(get_current_user),
     service: ColocationService = Depends(get_colocation_service),
):
     """
     - **email**: an existing account (no invitation flow)
     - **share**: percent of the rent, used when **rebalance** is false
     - **rebalance**: split the rent equally between all occupants

     A lease holds at most 5 occupants.
     """
     occupant = service.add_occupant(
          identity,
          lease_id,
          email=body.email,
          share=body.share,
          rebalance=body.rebalance,
     )
     return OccupantEnvelope(data=_build_occupant_response(occupant))


@router.patch(
     "",
     response_model=OccupantEnvelope,
     summary="Update an occupant's share or make them primary"
)
def update_occupant(
     lease_id: int,
     body: OccupantUpdate,
     identity: Identity = Depends(get_current_user),
     service: ColocationService = Depends(get_colocation_service),
):
     occupant = service.update_occupant(
          identity,
          lease_id,
          tenant_id=body.tenant_id,
          share=body.share,
          is_primary=body.is_primary,
     )
     return OccupantEnvelope(data=_build_occupant_response(occupant))


@router.delete(
     "",
     response_model=OccupantEnvelope,
     summary="Remove an occupant"
)
def remove_occupant(
     lease_id: int,
     tenant_id: int = Query(..., alias="tenantId", gt=0),
     identity: Identity = Depends(get_current_user),
     service: ColocationService = Depends(get_colocation_service),
):
     """
     The occupant is marked as departed, never deleted. The last occupant
     cannot be removed: end the lease instead.
     """
     occupant = service.remove_occupant(identity, lease_id, tenant_id)
     return OccupantEnvelope(data=_build_occupant_response(occupant))
