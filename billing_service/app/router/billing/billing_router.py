from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin_or_cron_secret
from shared.core.database import get_billing_db as get_db
from ...crud.billing import charge_generation_crud, late_fees_crud
from ...schemas.billing.billing_schemas import ApplyLateFeesRequest, GenerateChargesRequest

router = APIRouter(
    prefix="/api/billing",
    tags=["billing"],
    dependencies=[Depends(allow_admin_or_cron_secret)]
)


@router.post("/generate-charges")
def generate_charges(
    payload: Optional[GenerateChargesRequest] = Body(None),
    db: Session = Depends(get_db)
):
    """Create this month's rent and recurring charges for active leases."""
    payload = payload or GenerateChargesRequest()
    return charge_generation_crud.generate_charges(
        db=db,
        reference_time=datetime.now(),
        year=payload.year,
        month=payload.month,
        property_id=payload.property_id
    )


@router.post("/apply-late-fees")
def apply_late_fees(
    payload: Optional[ApplyLateFeesRequest] = Body(None),
    db: Session = Depends(get_db)
):
    payload = payload or ApplyLateFeesRequest()
    return late_fees_crud.apply_late_fees(
        db=db,
        reference_time=datetime.now(),
        property_id=payload.property_id
    )
