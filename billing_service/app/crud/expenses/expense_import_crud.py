import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from uuid import UUID

from dateutil import parser as date_parser
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response

from ...enum.revenue_enum import ExpenseCategory
from ...models.financials.expenses import Expense
from ...models.space_sites.properties import Property
from ...schemas.expenses.expenses_schemas import ExpenseImportRequest

logger = logging.getLogger(__name__)

VALID_CATEGORIES = [c.value for c in ExpenseCategory]


class RowError(ValueError):
    """A CSV row that cannot be imported."""


def _text(value) -> str:
    return "" if value is None else str(value)


def parse_row_date(value):
    try:
        return date_parser.parse(_text(value)).date()
    except (ValueError, OverflowError):
        return None


def parse_row_amount(value) -> Optional[Decimal]:
    try:
        amount = Decimal(_text(value).strip().replace(",", ""))
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def build_property_lookup(properties: List[Property]) -> dict:
    lookup = {}
    for prop in properties:
        lookup[prop.name.lower()] = prop.id
        lookup[prop.address.lower()] = prop.id
    return lookup


def parse_expense_row(row: dict, row_num: int, lookup: dict,
                      default_property_id: Optional[UUID], warnings: list) -> dict:
    """Validate one CSV row; raises RowError with the message to report."""
    expense_date = parse_row_date(row.get("date"))
    if expense_date is None:
        raise RowError(f'Row {row_num}: Invalid date "{_text(row.get("date"))}"')

    amount = parse_row_amount(row.get("amount"))
    if amount is None:
        raise RowError(f'Row {row_num}: Invalid amount "{_text(row.get("amount"))}"')

    category = _text(row.get("category")).strip().upper()
    if category not in VALID_CATEGORIES:
        raise RowError(
            f'Row {row_num}: Invalid category "{_text(row.get("category"))}". '
            f'Valid categories: {", ".join(VALID_CATEGORIES)}')

    description = _text(row.get("description")).strip()
    if not description:
        raise RowError(f"Row {row_num}: Missing description")

    property_id = default_property_id
    property_name = _text(row.get("property")).strip()
    if property_name:
        matched = lookup.get(property_name.lower())
        if matched:
            property_id = matched
        else:
            warnings.append(
                f'Row {row_num}: Property "{property_name}" not found, using default property')

    if not property_id:
        raise RowError(
            f"Row {row_num}: No property specified and no default property provided")

    return {
        "amount": amount,
        "date": expense_date,
        "category": category,
        "description": description,
        "vendor_name": _text(row.get("vendor")).strip() or None,
        "property_id": property_id,
    }


def import_expenses(db: Session, current_user: UserToken, payload: ExpenseImportRequest):
    properties = (
        db.query(Property)
        .filter(Property.owner_id == current_user.user_id)
        .all()
    )
    if not properties:
        return error_response("No properties found. Please add properties first.")

    owned_ids = {p.id for p in properties}
    if payload.property_id and payload.property_id not in owned_ids:
        return error_response("Property not found or not owned by you", 404)

    lookup = build_property_lookup(properties)
    errors = []
    to_create = []
    skipped = 0

    for index, row in enumerate(payload.csv_data):
        try:
            to_create.append(parse_expense_row(
                row, index + 1, lookup, payload.property_id, errors))
        except RowError as e:
            errors.append(str(e))
            skipped += 1

    if to_create:
        db.add_all([Expense(owner_id=current_user.user_id, **data) for data in to_create])
        db.commit()

    logger.info("Expense import for %s: %d imported, %d skipped",
                current_user.user_id, len(to_create), skipped)

    return {
        "success": True,
        "results": {
            "imported": len(to_create),
            "skipped": skipped,
            "errors": errors,
        },
        "message": f"Imported {len(to_create)} expenses. {skipped} rows skipped.",
    }
