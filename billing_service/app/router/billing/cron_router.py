from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_cron_secret
from shared.core.database import get_billing_db as get_db
from ...crud.billing import aging_snapshot_crud, charge_generation_crud, late_fees_crud

router = APIRouter(
    prefix="/api/cron",
    tags=["cron"],
    dependencies=[Depends(validate_cron_secret)]
)


@router.get("/generate-monthly-charges")
def generate_monthly_charges(db: Session = Depends(get_db)):
    return charge_generation_crud.generate_charges(db=db, reference_time=datetime.now())


@router.get("/apply-late-fees")
def apply_late_fees(db: Session = Depends(get_db)):
    return late_fees_crud.apply_late_fees(db=db, reference_time=datetime.now())


@router.get("/update-aging")
def update_aging(db: Session = Depends(get_db)):
    return aging_snapshot_crud.update_payment_aging(db=db, reference_time=datetime.now())
