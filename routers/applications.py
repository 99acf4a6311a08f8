# routers/applications.py
"""
Application API routes.

Role-based access:
- Tenant: applies, lists and cancels own applications
- Owner: lists applications on owned properties, accepts or rejects them
"""
from fastapi import APIRouter, Depends, Query, status

from dependencies import get_application_service, get_current_user
from models import Application
from schemas.application import (
     ApplicationCreate,
     ApplicationCreateResponse,
     ApplicationEnvelope,
     ApplicationListResponse,
     ApplicationResponse,
     ApplicationUpdate,
)
from services.application_service import ApplicationService
from services.identity import Identity

router = APIRouter(prefix="/api/applications", tags=["applications"])


def _build_application_response(application: Application) -> ApplicationResponse:
     return ApplicationResponse.model_validate(application)


@router.post(
     "",
     response_model=ApplicationCreateResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Apply for a property"
)
def create_application(
     body: ApplicationCreate,
     identity: Identity = Depends(get_current_user),
     service: ApplicationService = Depends(get_application_service),
):
     """
     Create a PENDING application for the calling tenant.

     - **propertyId**: property to apply for (must be available)
     - **message**: optional note to the owner
     - **documentIds**: documents to share, all owned by the caller

     Fails with 409 during the 7-day cooldown after a cancellation, or when
     an application is already open for this property.
     """
     application, documents_shared = service.create_application(
          identity,
          property_id=body.property_id,
          message=body.message,
          document_ids=body.document_ids,
     )
     return ApplicationCreateResponse(
          data=_build_application_response(application),
          documents_shared=documents_shared,
     )


@router.get(
     "",
     response_model=ApplicationListResponse,
     summary="List applications"
)
def list_applications(
     role: str = Query("tenant", pattern="^(owner|tenant)$", description="owner: applications on my properties"),
     identity: Identity = Depends(get_current_user),
     service: ApplicationService = Depends(get_application_service),
):
     applications = service.list_applications(identity, role=role)
     return ApplicationListResponse(data=[_build_application_response(a) for a in applications])


@router.get(
     "/{application_id}",
     response_model=ApplicationEnvelope,
     summary="Get application by ID"
)
def get_application(
     application_id: int,
     identity: Identity = Depends(get_current_user),
     service: ApplicationService = Depends(get_application_service),
):
     application = service.get_application(identity, application_id)
     return ApplicationEnvelope(data=_build_application_response(application))


@router.patch(
     "/{application_id}",
     response_model=ApplicationEnvelope,
     summary="Accept, reject or cancel an application"
)
def update_application(
     application_id: int,
     body: ApplicationUpdate,
     identity: Identity = Depends(get_current_user),
     service: ApplicationService = Depends(get_application_service),
):
     """
     - **ACCEPTED** / **REJECTED**: property owner only
     - **CANCELLED**: applying tenant only; starts the reapplication cooldown

     Only PENDING applications can change status.
     """
     application = service.transition_application(identity, application_id, body.status)
     return ApplicationEnvelope(data=_build_application_response(application))
