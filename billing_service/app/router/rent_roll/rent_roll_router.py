from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_billing_db as get_db
from shared.core.schemas import UserToken
from ...crud.rent_roll import rent_roll_crud as crud
from ...enum.leasing_tenants_enum import RentRollStatus
from ...schemas.rent_roll.rent_roll_schemas import RentRollExportRequest, RentRollRequest

router = APIRouter(
    prefix="/api/rent-roll",
    tags=["rent-roll"],
    dependencies=[Depends(validate_current_token)]
)


def rent_roll_params(
    property_id: Optional[UUID] = Query(None, alias="propertyId"),
    owner_id: Optional[UUID] = Query(None, alias="ownerId"),
    status: RentRollStatus = Query(RentRollStatus.all),
) -> RentRollRequest:
    return RentRollRequest(property_id=property_id, owner_id=owner_id, status=status)


def export_params(
    property_id: Optional[UUID] = Query(None, alias="propertyId"),
    format: str = Query("csv"),
) -> RentRollExportRequest:
    return RentRollExportRequest(property_id=property_id, format=format)


@router.get("")
def get_rent_roll(
    params: RentRollRequest = Depends(rent_roll_params),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    """Portfolio rent roll, one row per unit."""
    return crud.get_portfolio_rent_roll(
        db=db,
        current_user=current_user,
        reference_date=datetime.now().date(),
        property_id=params.property_id,
        owner_id=params.owner_id,
        status=params.status
    )


@router.get("/aging")
def get_aging_report(
    params: RentRollRequest = Depends(rent_roll_params),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_aging_report(
        db=db,
        current_user=current_user,
        reference_date=datetime.now().date(),
        property_id=params.property_id,
        owner_id=params.owner_id
    )


@router.get("/export")
def export_rent_roll(
    params: RentRollExportRequest = Depends(export_params),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.export_rent_roll(
        db=db,
        current_user=current_user,
        reference_date=datetime.now().date(),
        property_id=params.property_id,
        format=params.format
    )
