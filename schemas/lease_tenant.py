# schemas/lease_tenant.py
from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

import config
from models import OccupancyState
from .common import CamelModel


class OccupantCreate(CamelModel):
     """Add a co-tenant by the email of an existing account."""
     email: str = Field(..., min_length=3, max_length=255)
     share: int = Field(config.DEFAULT_COTENANT_SHARE, ge=0, le=100, description="Percent of the rent")
     rebalance: bool = Field(True, description="Split 100% equally between all occupants")

     model_config = ConfigDict(
          json_schema_extra={"example": {"email": "flatmate@example.com", "share": 50, "rebalance": True}}
     )


class OccupantUpdate(CamelModel):
     tenant_id: int = Field(..., gt=0)
     share: Optional[int] = Field(None, ge=0, le=100)
     is_primary: Optional[bool] = None


class OccupantResponse(CamelModel):
     lease_id: int
     tenant_id: int
     is_primary: bool
     share: int
     joined_at: datetime
     left_at: Optional[datetime] = None
     state: OccupancyState

     # Optional related data
     tenant_name: Optional[str] = None
     tenant_email: Optional[str] = None


class OccupantEnvelope(CamelModel):
     data: OccupantResponse


class OccupantListResponse(CamelModel):
     data: List[OccupantResponse]
     total_share: int
     share_warning: bool
