# schemas/application.py
"""
Pydantic schemas for Application API request/response validation.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from models import ApplicationStatus
from .common import CamelModel


class ApplicationCreate(CamelModel):
     """Schema for applying to a property."""
     property_id: int = Field(..., gt=0, description="Property to apply for")
     message: Optional[str] = Field(None, max_length=2000, description="Note to the owner")
     document_ids: List[int] = Field(default_factory=list, description="Documents shared with the owner")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "propertyId": 1,
                    "message": "Hello, I am interested in your flat.",
                    "documentIds": [3, 4],
               }
          }
     )


class ApplicationUpdate(CamelModel):
     """Owner accepts/rejects, tenant cancels."""
     status: ApplicationStatus

     model_config = ConfigDict(json_schema_extra={"example": {"status": "ACCEPTED"}})


class ApplicationResponse(CamelModel):
     id: int
     property_id: int
     tenant_id: int
     status: ApplicationStatus
     message: Optional[str] = None
     created_at: datetime
     updated_at: datetime


class ApplicationEnvelope(CamelModel):
     data: ApplicationResponse


class ApplicationCreateResponse(CamelModel):
     data: ApplicationResponse
     documents_shared: int = 0


class ApplicationListResponse(CamelModel):
     data: List[ApplicationResponse]
