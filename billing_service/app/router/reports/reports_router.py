from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin, allow_owner_or_admin
from shared.core.database import get_billing_db as get_db
from shared.core.schemas import UserToken
from ...crud.reports import pl_reports_crud as crud
from ...enum.revenue_enum import ReportPeriodType
from ...helpers.period_helper import resolve_period
from ...schemas.reports.reports_schemas import PLReportRequest

router = APIRouter(
    prefix="/api/reports",
    tags=["reports"],
    dependencies=[Depends(allow_owner_or_admin)]
)


def report_params(
    period: ReportPeriodType = Query(ReportPeriodType.month),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    owner_id: Optional[UUID] = Query(None, alias="ownerId"),
    property_id: Optional[UUID] = Query(None, alias="propertyId"),
) -> PLReportRequest:
    now = datetime.now()
    return PLReportRequest(
        period=period,
        year=year or now.year,
        month=month or now.month,
        owner_id=owner_id,
        property_id=property_id,
    )


@router.get("/epm-pl")
def get_epm_pl(
    params: PLReportRequest = Depends(report_params),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    """Company P&L across all owners."""
    period = resolve_period(params.period, params.year, params.month)
    return crud.get_epm_pl(db=db, period=period, year=params.year, month=params.month)


@router.get("/owner-pl")
def get_owner_pl(
    params: PLReportRequest = Depends(report_params),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner_or_admin)
):
    period = resolve_period(params.period, params.year, params.month)
    return crud.get_owner_pl(
        db=db,
        current_user=current_user,
        period=period,
        owner_id=params.owner_id
    )


@router.get("/property-pl")
def get_property_pl(
    params: PLReportRequest = Depends(report_params),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner_or_admin)
):
    period = resolve_period(params.period, params.year, params.month)
    return crud.get_property_pl(
        db=db,
        current_user=current_user,
        period=period,
        property_id=params.property_id
    )
