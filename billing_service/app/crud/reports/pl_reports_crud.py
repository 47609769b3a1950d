import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload, selectinload

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, forbidden, not_found
from shared.models.users import User
from shared.utils.enums import UserRole

from ...enum.billing_enum import InvoiceStatus, LineItemType
from ...enum.leasing_tenants_enum import LeaseStatus
from ...enum.revenue_enum import (
    COMPANY_EXPENSE_BUCKETS, CompanyExpenseBucket, PROPERTY_EXPENSE_BUCKETS,
    PropertyExpenseBucket
)
from ...enum.space_sites_enum import PropertyStatus
from ...helpers.income_helper import add_income, collected_income
from ...helpers.period_helper import (
    ReportPeriod, month_bounds, one_decimal_rate, shift_month,
    to_money, whole_number
)
from ...models.financials.expenses import Expense
from ...models.financials.invoices import Invoice
from ...models.leasing_tenants.leases import Lease
from ...models.space_sites.properties import Property
from ...models.space_sites.units import Unit

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _zeroed(buckets) -> dict:
    return {bucket.value: ZERO for bucket in buckets}


def _income_totals() -> dict:
    return {"rentCollected": ZERO, "lateFees": ZERO, "otherIncome": ZERO}


def _lease_load_options():
    return selectinload(Property.units).selectinload(Unit.leases).options(
        joinedload(Lease.tenant),
        selectinload(Lease.rent_charges),
        selectinload(Lease.payments),
    )


def company_expense_bucket(category: str) -> CompanyExpenseBucket:
    return COMPANY_EXPENSE_BUCKETS.get((category or "").upper(), CompanyExpenseBucket.other)


def property_expense_bucket(category: str, allow_management_fee: bool = True) -> PropertyExpenseBucket:
    bucket = PROPERTY_EXPENSE_BUCKETS.get((category or "").upper(), PropertyExpenseBucket.other)
    if bucket == PropertyExpenseBucket.managementFee and not allow_management_fee:
        return PropertyExpenseBucket.other
    return bucket


def profit_summary(total_income: Decimal, total_expenses: Decimal, net_key: str,
                   income_key: str = "totalIncome") -> dict:
    net = total_income - total_expenses
    return {
        income_key: total_income,
        "totalExpenses": total_expenses,
        net_key: net,
        "profitMargin": one_decimal_rate(net, total_income),
    }


def get_paid_invoices(db: Session, start_date, end_date, owner_id: Optional[UUID] = None):
    query = (
        db.query(Invoice)
        .options(joinedload(Invoice.owner), selectinload(Invoice.line_items))
        .filter(
            Invoice.status == InvoiceStatus.PAID.value,
            Invoice.paid_date >= start_date,
            Invoice.paid_date <= end_date,
        )
    )
    if owner_id:
        query = query.filter(Invoice.owner_id == owner_id)
    return query.all()


def monthly_revenue_trend(db: Session, year: int, month: int, months: int = 6) -> list:
    trend = []
    for offset in range(months - 1, -1, -1):
        anchor = shift_month(year, month, -offset)
        start, end = month_bounds(anchor.year, anchor.month)
        invoices = get_paid_invoices(db, start.date(), end.date())
        revenue = sum(
            (to_money(item.amount) for inv in invoices for item in inv.line_items), ZERO)
        trend.append({
            "month": anchor.strftime("%b"),
            "year": anchor.year,
            "revenue": revenue,
        })
    return trend


def get_epm_pl(db: Session, period: ReportPeriod, year: int, month: int):
    """Company profit and loss: management revenue against overhead."""
    invoices = get_paid_invoices(db, period.start_date, period.end_date)
    overhead = (
        db.query(Expense)
        .filter(
            Expense.property_id.is_(None),
            Expense.date >= period.start_date,
            Expense.date <= period.end_date,
        )
        .all()
    )

    revenue = {"managementFees": ZERO, "flatFees": ZERO, "otherFees": ZERO}
    expenses = _zeroed(CompanyExpenseBucket)
    owners = {}

    for invoice in invoices:
        entry = owners.setdefault(invoice.owner_id, {
            "ownerId": invoice.owner_id,
            "ownerName": invoice.owner.name if invoice.owner else None,
            "managementFees": ZERO,
            "otherFees": ZERO,
            "totalRevenue": ZERO,
            "invoiceCount": 0,
        })
        entry["invoiceCount"] += 1

        for item in invoice.line_items:
            amount = to_money(item.amount)
            if item.type == LineItemType.management_fee.value:
                revenue["managementFees"] += amount
                entry["managementFees"] += amount
            elif item.type == LineItemType.flat_fee.value:
                revenue["flatFees"] += amount
                entry["otherFees"] += amount
            else:
                revenue["otherFees"] += amount
                entry["otherFees"] += amount
            entry["totalRevenue"] += amount

    for expense in overhead:
        expenses[company_expense_bucket(expense.category).value] += to_money(expense.amount)

    total_revenue = sum(revenue.values(), ZERO)
    total_expenses = sum(expenses.values(), ZERO)

    summary = profit_summary(total_revenue, total_expenses, "netProfit", "totalRevenue")
    summary["invoiceCount"] = len(invoices)
    summary["avgRevenuePerOwner"] = (
        whole_number(total_revenue / len(owners)) if owners else 0)

    property_count = (
        db.query(Property)
        .filter(Property.status == PropertyStatus.ACTIVE.value)
        .count()
    )
    owner_count = db.query(User).filter(User.role == UserRole.OWNER.value).count()

    return {
        "report": {
            "period": period.as_dict(),
            "summary": summary,
            "revenue": revenue,
            "expenses": expenses,
            "ownerBreakdown": sorted(
                owners.values(), key=lambda o: o["totalRevenue"], reverse=True),
            "monthlyTrend": monthly_revenue_trend(db, year, month),
            "metrics": {
                "activeProperties": property_count,
                "activeOwners": owner_count,
                "avgFeePerProperty": (
                    whole_number(revenue["managementFees"] / property_count)
                    if property_count else 0),
            },
        }
    }


def resolve_owner_id(current_user: UserToken, owner_id: Optional[UUID]) -> UUID:
    if current_user.is_owner:
        return current_user.user_id
    if not current_user.is_admin:
        return forbidden("Access denied")
    if not owner_id:
        return error_response("Owner ID required")
    return owner_id


def get_owner_pl(db: Session, current_user: UserToken, period: ReportPeriod,
                 owner_id: Optional[UUID] = None):
    target_owner_id = resolve_owner_id(current_user, owner_id)

    properties = (
        db.query(Property)
        .options(_lease_load_options(), selectinload(Property.expenses))
        .filter(
            Property.owner_id == target_owner_id,
            Property.status == PropertyStatus.ACTIVE.value,
        )
        .order_by(Property.name)
        .all()
    )

    income = _income_totals()
    expense_buckets = [b for b in PropertyExpenseBucket if b != PropertyExpenseBucket.managementFee]
    expenses = {"managementFees": ZERO, **_zeroed(expense_buckets)}
    breakdown = []

    for prop in properties:
        property_income = _income_totals()
        occupied = 0
        for unit in prop.units:
            leases = [l for l in unit.leases if l.status == LeaseStatus.ACTIVE.value]
            if leases:
                occupied += 1
            for lease in leases:
                add_income(property_income, collected_income(lease, period))
        add_income(income, property_income)

        property_expenses = ZERO
        for expense in prop.expenses:
            if not period.contains(expense.date):
                continue
            amount = to_money(expense.amount)
            property_expenses += amount
            expenses[property_expense_bucket(expense.category, False).value] += amount

        property_total = sum(property_income.values(), ZERO)
        breakdown.append({
            "propertyId": prop.id,
            "propertyName": prop.name,
            "address": prop.short_address,
            "totalUnits": len(prop.units),
            "occupiedUnits": occupied,
            "income": property_total,
            "expenses": property_expenses,
            "noi": property_total - property_expenses,
        })

    for invoice in get_paid_invoices(db, period.start_date, period.end_date, target_owner_id):
        for item in invoice.line_items:
            if item.type == LineItemType.management_fee.value:
                expenses["managementFees"] += to_money(item.amount)

    owner = db.query(User).filter(User.id == target_owner_id).first()

    return {
        "report": {
            "owner": {
                "id": owner.id,
                "name": owner.name,
                "email": owner.email,
            } if owner else None,
            "period": period.as_dict(),
            "summary": profit_summary(
                sum(income.values(), ZERO), sum(expenses.values(), ZERO),
                "netOperatingIncome"),
            "income": income,
            "expenses": expenses,
            "propertyBreakdown": breakdown,
            "propertyCount": len(properties),
        }
    }


def get_property_pl(db: Session, current_user: UserToken, period: ReportPeriod,
                    property_id: Optional[UUID] = None):
    if not property_id:
        return error_response("Property ID required")

    prop = (
        db.query(Property)
        .options(
            joinedload(Property.owner),
            _lease_load_options(),
            selectinload(Property.expenses),
        )
        .filter(Property.id == property_id)
        .first()
    )
    if not prop:
        return not_found("Property not found")

    if current_user.is_owner and prop.owner_id != current_user.user_id:
        return forbidden("Access denied")
    if not (current_user.is_owner or current_user.is_admin):
        return forbidden("Access denied")

    income = _income_totals()
    by_unit = []
    occupied = 0

    for unit in prop.units:
        unit_income = _income_totals()
        tenant_name = None
        active = [l for l in unit.leases if l.status == LeaseStatus.ACTIVE.value]
        if active:
            occupied += 1
            tenant_name = active[0].tenant.name if active[0].tenant else None
        for lease in unit.leases:
            add_income(unit_income, collected_income(lease, period))
            if tenant_name is None and lease.tenant:
                tenant_name = lease.tenant.name
        add_income(income, unit_income)
        by_unit.append({
            "unitNumber": unit.unit_number,
            "tenantName": tenant_name,
            "rentCollected": unit_income["rentCollected"],
            "lateFees": unit_income["lateFees"],
        })

    expenses = _zeroed(PropertyExpenseBucket)
    details = []
    for expense in prop.expenses:
        if not period.contains(expense.date):
            continue
        amount = to_money(expense.amount)
        expenses[property_expense_bucket(expense.category).value] += amount
        details.append({
            "date": expense.date,
            "category": expense.category,
            "description": expense.description,
            "amount": amount,
            "vendor": expense.vendor_name,
        })
    details.sort(key=lambda d: d["date"], reverse=True)

    total_units = len(prop.units)
    potential_rent = sum((to_money(u.rent_amount) for u in prop.units), ZERO)
    vacancy_loss = (
        (total_units - occupied) * (potential_rent / total_units) if total_units else ZERO)

    summary = profit_summary(
        sum(income.values(), ZERO), sum(expenses.values(), ZERO), "netOperatingIncome")

    return {
        "report": {
            "property": {
                "id": prop.id,
                "name": prop.name,
                "address": prop.full_address,
                "owner": {
                    "id": prop.owner.id,
                    "name": prop.owner.name,
                    "email": prop.owner.email,
                } if prop.owner else None,
            },
            "period": period.as_dict(),
            "summary": summary,
            "income": {**income, "byUnit": by_unit},
            "expenses": {**expenses, "details": details},
            "metrics": {
                "totalUnits": total_units,
                "occupiedUnits": occupied,
                "occupancyRate": one_decimal_rate(occupied, total_units),
                "potentialRent": potential_rent,
                "vacancyLoss": vacancy_loss.quantize(Decimal("0.01")),
            },
        }
    }
