from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID

from ...enum.revenue_enum import ReportPeriodType


class PLReportRequest(BaseModel):
    period: ReportPeriodType = ReportPeriodType.month
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)
    owner_id: Optional[UUID] = None
    property_id: Optional[UUID] = None
