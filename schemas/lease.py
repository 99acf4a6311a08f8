# schemas/lease.py
"""
Pydantic schemas for Lease API request/response validation.
"""
import enum
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import ConfigDict, Field

from models import InventoryType, LeaseStatus
from .common import CamelModel


class LeaseAction(str, enum.Enum):
     """Owner-driven lease transitions."""
     ACTIVATE = "activate"
     END = "end"


class LeaseCreate(CamelModel):
     """Schema for issuing a lease from an accepted application."""
     application_id: int = Field(..., gt=0, description="Accepted application")
     start_date: date = Field(..., description="First day of the lease")
     end_date: Optional[date] = Field(None, description="Last day of the lease (open-ended if omitted)")
     rent_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Monthly rent")
     deposit_amount: Optional[Decimal] = Field(
          None, ge=0, max_digits=12, decimal_places=2, description="Defaults to one month of rent"
     )
     charges: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2, description="Monthly charges")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "applicationId": 1,
                    "startDate": "2026-08-01",
                    "endDate": "2027-07-31",
                    "rentAmount": 1000.00,
                    "depositAmount": 1000.00,
                    "charges": 50.00,
               }
          }
     )


class LeaseTransition(CamelModel):
     action: LeaseAction


class InventoryRecord(CamelModel):
     type: InventoryType


class LeaseResponse(CamelModel):
     id: int
     property_id: int
     tenant_id: int
     application_id: Optional[int] = None
     start_date: date
     end_date: Optional[date] = None
     monthly_rent: Decimal
     deposit: Optional[Decimal] = None
     charges: Decimal
     status: LeaseStatus
     inventory_in_done: bool
     inventory_in_at: Optional[datetime] = None
     inventory_out_done: bool
     inventory_out_at: Optional[datetime] = None
     created_at: datetime

     # Optional related data
     property_title: Optional[str] = None


class LeaseEnvelope(CamelModel):
     data: LeaseResponse


class LeaseCreateResponse(CamelModel):
     data: LeaseResponse
     receipts_generated: int
     is_retroactive: bool


class LeaseListResponse(CamelModel):
     data: List[LeaseResponse]
