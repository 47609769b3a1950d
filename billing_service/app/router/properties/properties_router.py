from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import allow_owner_or_admin
from shared.core.database import get_billing_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from ...crud.properties import financial_summary_crud
from ...crud.rent_roll import rent_roll_crud
from ...enum.leasing_tenants_enum import RentRollStatus
from ...helpers.period_helper import parse_month_param
from ...schemas.properties.properties_schemas import (
    FinancialSummaryRequest, LeaseExpirationRequest
)


def summary_params(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{1,2}$")
) -> FinancialSummaryRequest:
    return FinancialSummaryRequest(month=month)


def expiration_params(
    months: int = Query(6, ge=1, le=60)
) -> LeaseExpirationRequest:
    return LeaseExpirationRequest(months=months)


router = APIRouter(
    prefix="/api/properties",
    tags=["properties"],
    dependencies=[Depends(allow_owner_or_admin)]
)


@router.get("/{property_id}/financial-summary")
def get_financial_summary(
    property_id: UUID,
    params: FinancialSummaryRequest = Depends(summary_params),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner_or_admin)
):
    now = datetime.now()
    try:
        year, month = parse_month_param(params.month, now)
    except ValueError as e:
        return error_response(str(e))

    return financial_summary_crud.get_financial_summary(
        db=db,
        property_id=property_id,
        current_user=current_user,
        year=year,
        month=month,
        reference_time=now
    )


@router.get("/{property_id}/rent-roll")
def get_property_rent_roll(
    property_id: UUID,
    status: RentRollStatus = Query(RentRollStatus.all),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner_or_admin)
):
    return rent_roll_crud.get_property_rent_roll(
        db=db,
        property_id=property_id,
        current_user=current_user,
        reference_date=datetime.now().date(),
        status=status
    )


@router.get("/{property_id}/lease-expirations")
def get_lease_expirations(
    property_id: UUID,
    params: LeaseExpirationRequest = Depends(expiration_params),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner_or_admin)
):
    return financial_summary_crud.get_lease_expirations(
        db=db,
        property_id=property_id,
        current_user=current_user,
        months=params.months,
        reference_time=datetime.now()
    )
