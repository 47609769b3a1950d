import logging
import math
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from shared.core.schemas import UserToken
from shared.exporthelper import export_to_csv
from shared.helpers.json_response_helper import error_response, not_found

from ...models.financials.expenses import Expense
from ...models.space_sites.properties import Property
from ...schemas.expenses.expenses_schemas import (
    ExpenseCreate, ExpenseOut, ExpenseRequest, ExpenseUpdate
)

logger = logging.getLogger(__name__)

EXPENSE_EXPORT_COLUMNS = {
    "date": "date",
    "amount": "amount",
    "category": "category",
    "description": "description",
    "vendor": "vendor",
    "property": "property",
    "notes": "notes",
}


def build_expense_filters(owner_id: UUID, params: ExpenseRequest):
    filters = [Expense.owner_id == owner_id]

    if params.property_id:
        filters.append(Expense.property_id == params.property_id)

    if params.category:
        filters.append(Expense.category == params.category)

    if params.start_date:
        filters.append(Expense.date >= params.start_date)

    if params.end_date:
        filters.append(Expense.date <= params.end_date)

    return filters


def get_owned_property(db: Session, property_id: UUID, owner_id: UUID) -> Property:
    prop = (
        db.query(Property)
        .filter(Property.id == property_id, Property.owner_id == owner_id)
        .first()
    )
    if not prop:
        return not_found("Property not found or not owned by you")
    return prop


def get_expense_for_owner(db: Session, expense_id: UUID, owner_id: UUID) -> Expense:
    expense = (
        db.query(Expense)
        .options(joinedload(Expense.property))
        .filter(Expense.id == expense_id, Expense.owner_id == owner_id)
        .first()
    )
    if not expense:
        return not_found("Expense not found")
    return expense


def get_expenses(db: Session, current_user: UserToken, params: ExpenseRequest):
    page = max(params.page or 1, 1)
    limit = max(params.limit or 50, 1)
    filters = build_expense_filters(current_user.user_id, params)

    base_query = db.query(Expense).filter(*filters)
    total = base_query.with_entities(func.count(Expense.id)).scalar()

    expenses = (
        base_query
        .options(joinedload(Expense.property))
        .order_by(Expense.date.desc(), Expense.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    by_category = (
        db.query(Expense.category, func.coalesce(func.sum(Expense.amount), 0))
        .filter(*filters)
        .group_by(Expense.category)
        .order_by(Expense.category)
        .all()
    )
    total_amount = sum((Decimal(str(amount)) for _, amount in by_category), Decimal("0"))

    return {
        "expenses": [ExpenseOut.model_validate(e) for e in expenses],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
        },
        "summary": {
            "total": total_amount,
            "byCategory": [
                {"category": category, "amount": Decimal(str(amount))}
                for category, amount in by_category
            ],
        },
    }


def get_expense(db: Session, current_user: UserToken, expense_id: UUID):
    return ExpenseOut.model_validate(
        get_expense_for_owner(db, expense_id, current_user.user_id))


def create_expense(db: Session, current_user: UserToken, payload: ExpenseCreate):
    if payload.property_id is None and not current_user.is_admin:
        return error_response("Missing required fields: amount, date, category, propertyId")

    if payload.property_id is not None:
        get_owned_property(db, payload.property_id, current_user.user_id)

    expense = Expense(
        owner_id=current_user.user_id,
        property_id=payload.property_id,
        amount=payload.amount,
        date=payload.date,
        category=payload.category,
        description=payload.description or "",
        vendor_name=payload.vendor_name or None,
        notes=payload.notes or None,
        receipt_url=payload.receipt_url or None,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)

    logger.info("Expense %s recorded for owner %s", expense.id, current_user.user_id)
    return ExpenseOut.model_validate(expense)


def update_expense(db: Session, current_user: UserToken, expense_id: UUID,
                   payload: ExpenseUpdate):
    expense = get_expense_for_owner(db, expense_id, current_user.user_id)
    update_data = payload.model_dump(exclude_unset=True)

    new_property_id = update_data.pop("property_id", None)
    if new_property_id and new_property_id != expense.property_id:
        get_owned_property(db, new_property_id, current_user.user_id)
        expense.property_id = new_property_id

    # blank optional text clears the field; blank required fields are ignored
    for key in ("vendor_name", "notes", "receipt_url"):
        if key in update_data:
            setattr(expense, key, update_data.pop(key) or None)

    for key, value in update_data.items():
        if value:
            setattr(expense, key, value)

    db.commit()
    db.refresh(expense)
    return ExpenseOut.model_validate(expense)


def delete_expense(db: Session, current_user: UserToken, expense_id: UUID):
    expense = get_expense_for_owner(db, expense_id, current_user.user_id)
    db.delete(expense)
    db.commit()
    return {"success": True}


def export_expenses(db: Session, current_user: UserToken, params: ExpenseRequest,
                    reference_date: date):
    filters = build_expense_filters(current_user.user_id, params)
    expenses = (
        db.query(Expense)
        .options(joinedload(Expense.property))
        .filter(*filters)
        .order_by(Expense.date.desc())
        .all()
    )

    rows = [
        {
            "date": e.date.isoformat(),
            "amount": f"{Decimal(str(e.amount)):.2f}",
            "category": e.category,
            "description": e.description or "",
            "vendor": e.vendor_name or "",
            "property": e.property.name if e.property else "",
            "notes": e.notes or "",
        }
        for e in expenses
    ]

    filename = f"expenses-{reference_date.isoformat()}.csv"
    return export_to_csv(rows, EXPENSE_EXPORT_COLUMNS, filename)
