from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID


class GenerateChargesRequest(BaseModel):
    property_id: Optional[UUID] = Field(None, alias="propertyId")
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=2000, le=2100)

    model_config = {
        "populate_by_name": True
    }


class ApplyLateFeesRequest(BaseModel):
    property_id: Optional[UUID] = Field(None, alias="propertyId")

    model_config = {
        "populate_by_name": True
    }
