from pydantic import BaseModel
from typing import Optional
from uuid import UUID

from ...enum.leasing_tenants_enum import RentRollStatus


class RentRollRequest(BaseModel):
    property_id: Optional[UUID] = None
    owner_id: Optional[UUID] = None
    status: RentRollStatus = RentRollStatus.all


class RentRollExportRequest(BaseModel):
    property_id: Optional[UUID] = None
    format: str = "csv"
