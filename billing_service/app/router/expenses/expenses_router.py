from datetime import date, datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_billing_db as get_db
from shared.core.schemas import UserToken
from ...crud.expenses import expense_import_crud, expenses_crud as crud
from ...schemas.expenses.expenses_schemas import (
    ExpenseCreate, ExpenseImportRequest, ExpenseOut, ExpenseRequest, ExpenseUpdate
)

router = APIRouter(
    prefix="/api/expenses",
    tags=["expenses"],
    dependencies=[Depends(validate_current_token)]
)


def expense_params(
    property_id: Optional[UUID] = Query(None, alias="propertyId"),
    category: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
) -> ExpenseRequest:
    return ExpenseRequest(
        property_id=property_id,
        category=category,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )


@router.get("")
def get_expenses(
    params: ExpenseRequest = Depends(expense_params),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_expenses(db=db, current_user=current_user, params=params)


@router.post("", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_expense(db=db, current_user=current_user, payload=payload)


@router.get("/export")
def export_expenses(
    params: ExpenseRequest = Depends(expense_params),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.export_expenses(
        db=db,
        current_user=current_user,
        params=params,
        reference_date=datetime.now().date()
    )


@router.post("/import")
def import_expenses(
    payload: ExpenseImportRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    """Bulk import parsed CSV rows; bad rows are reported, not fatal."""
    return expense_import_crud.import_expenses(db=db, current_user=current_user, payload=payload)


@router.get("/{expense_id}", response_model=ExpenseOut)
def get_expense(
    expense_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_expense(db=db, current_user=current_user, expense_id=expense_id)


@router.patch("/{expense_id}", response_model=ExpenseOut)
def update_expense(
    expense_id: UUID,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_expense(
        db=db, current_user=current_user, expense_id=expense_id, payload=payload)


@router.delete("/{expense_id}")
def delete_expense(
    expense_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_expense(db=db, current_user=current_user, expense_id=expense_id)
