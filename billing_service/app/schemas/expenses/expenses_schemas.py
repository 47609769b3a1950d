import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams


class ExpenseBase(BaseModel):
    amount: Decimal = Field(..., gt=0)
    date: dt.date
    category: str = Field(..., min_length=1)
    description: Optional[str] = ""
    vendor_name: Optional[str] = Field(None, alias="vendorName")
    notes: Optional[str] = None
    receipt_url: Optional[str] = Field(None, alias="receiptUrl")

    model_config = {
        "populate_by_name": True
    }


class ExpenseCreate(ExpenseBase):
    # omitted only for company overhead (admin)
    property_id: Optional[UUID] = Field(None, alias="propertyId")


class ExpenseUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, gt=0)
    date: Optional[dt.date] = None
    category: Optional[str] = None
    description: Optional[str] = None
    vendor_name: Optional[str] = Field(None, alias="vendorName")
    notes: Optional[str] = None
    receipt_url: Optional[str] = Field(None, alias="receiptUrl")
    property_id: Optional[UUID] = Field(None, alias="propertyId")

    model_config = {
        "populate_by_name": True
    }


class ExpenseRequest(CommonQueryParams):
    property_id: Optional[UUID] = None
    category: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


class ExpensePropertyOut(BaseModel):
    id: UUID
    name: str
    address: str

    model_config = {
        "from_attributes": True
    }


class ExpenseOut(BaseModel):
    id: UUID
    amount: float
    date: dt.date
    category: str
    description: Optional[str] = None
    vendorName: Optional[str] = Field(None, validation_alias="vendor_name")
    notes: Optional[str] = None
    receiptUrl: Optional[str] = Field(None, validation_alias="receipt_url")
    propertyId: Optional[UUID] = Field(None, validation_alias="property_id")
    ownerId: Optional[UUID] = Field(None, validation_alias="owner_id")
    property: Optional[ExpensePropertyOut] = None
    createdAt: Optional[dt.datetime] = Field(None, validation_alias="created_at")

    model_config = {
        "from_attributes": True
    }


class ExpenseImportRequest(BaseModel):
    csv_data: List[Dict[str, Any]] = Field(..., alias="csvData")
    property_id: Optional[UUID] = Field(None, alias="propertyId")

    model_config = {
        "populate_by_name": True
    }
