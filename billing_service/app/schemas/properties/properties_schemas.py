from pydantic import BaseModel, Field
from typing import Optional


class FinancialSummaryRequest(BaseModel):
    month: Optional[str] = Field(None, pattern=r"^\d{4}-\d{1,2}$")


class LeaseExpirationRequest(BaseModel):
    months: int = Field(6, ge=1, le=60)
