import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session, selectinload

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import forbidden, not_found

from ...enum.leasing_tenants_enum import ExpirationUrgency, LeaseStatus
from ...helpers.aging_helper import days_past_due, select_obligations
from ...helpers.period_helper import month_bounds, one_decimal_rate, to_money
from ...models.leasing_tenants.leases import Lease
from ...models.space_sites.properties import Property
from ...models.space_sites.units import Unit

logger = logging.getLogger(__name__)


def get_owned_property(db: Session, property_id: UUID, current_user: UserToken, *options) -> Property:
    prop = (
        db.query(Property)
        .options(*options)
        .filter(Property.id == property_id)
        .first()
    )
    if not prop:
        return not_found("Property not found")

    if current_user.is_owner and prop.owner_id != current_user.user_id:
        return forbidden("Access denied")
    return prop


def active_leases(unit: Unit):
    return [l for l in unit.leases if l.status == LeaseStatus.ACTIVE.value]


def rent_position(lease: Lease, start: datetime, end: datetime, reference_time: datetime) -> dict:
    """Collected / pending / overdue rent of one lease for the period."""
    reference_date = reference_time.date()
    position = {
        "collected": Decimal("0"),
        "pending": Decimal("0"),
        "overdue": Decimal("0"),
    }

    def due_in_period(row) -> bool:
        return start.date() <= row.due_date <= end.date()

    obligations = select_obligations(
        lease.rent_charges, lease.payments,
        charge_filter=due_in_period, payment_filter=due_in_period)

    if not obligations:
        # nothing billed yet: the whole rent is still owed for the period
        key = "overdue" if start < reference_time else "pending"
        position[key] += to_money(lease.rent_amount)
        return position

    for obligation in obligations:
        position["collected"] += obligation.paid_amount
        if obligation.amount_due > 0:
            key = "overdue" if obligation.due_date < reference_date else "pending"
            position[key] += obligation.amount_due

    return position


def get_financial_summary(db: Session, property_id: UUID, current_user: UserToken,
                          year: int, month: int, reference_time: datetime):
    prop = get_owned_property(
        db, property_id, current_user,
        selectinload(Property.units).selectinload(Unit.leases).options(
            selectinload(Lease.rent_charges),
            selectinload(Lease.payments),
        ),
    )
    start, end = month_bounds(year, month)

    total_units = len(prop.units)
    occupied = 0
    expected = Decimal("0")
    collected = Decimal("0")
    pending = Decimal("0")
    overdue = Decimal("0")

    for unit in prop.units:
        leases = active_leases(unit)
        if not leases:
            continue
        lease = leases[0]
        occupied += 1
        expected += to_money(lease.rent_amount)

        position = rent_position(lease, start, end, reference_time)
        collected += position["collected"]
        pending += position["pending"]
        overdue += position["overdue"]

    vacant = total_units - occupied
    market_rent = sum((to_money(u.rent_amount) for u in prop.units), Decimal("0"))
    avg_rent = market_rent / total_units if total_units else Decimal("0")

    return {
        "summary": {
            "totalUnits": total_units,
            "occupiedUnits": occupied,
            "vacantUnits": vacant,
            "occupancyRate": one_decimal_rate(occupied, total_units),
            "totalRentExpected": expected,
            "totalRentCollected": collected,
            "totalPending": pending,
            "totalOverdue": overdue,
            "vacancyLoss": (vacant * avg_rent).quantize(Decimal("0.01")),
            "collectionRate": one_decimal_rate(collected, expected),
            "period": {
                "start": start,
                "end": end,
            },
        }
    }


def expiration_urgency(days_until_expiry: int) -> ExpirationUrgency:
    if days_until_expiry <= 30:
        return ExpirationUrgency.critical
    if days_until_expiry <= 60:
        return ExpirationUrgency.warning
    return ExpirationUrgency.notice


def get_lease_expirations(db: Session, property_id: UUID, current_user: UserToken,
                          months: int, reference_time: datetime):
    prop = get_owned_property(
        db, property_id, current_user,
        selectinload(Property.units).selectinload(Unit.leases).joinedload(Lease.tenant),
    )
    today = reference_time.date()
    horizon = today + relativedelta(months=months)

    expirations = []
    for unit in prop.units:
        for lease in active_leases(unit):
            if lease.end_date is None or not today <= lease.end_date <= horizon:
                continue

            days_left = -days_past_due(lease.end_date, today)
            tenant = lease.tenant
            expirations.append({
                "leaseId": lease.id,
                "unitId": unit.id,
                "unitNumber": unit.unit_number,
                "tenant": {
                    "id": tenant.id,
                    "name": tenant.name,
                    "email": tenant.email,
                    "phone": tenant.phone,
                } if tenant else None,
                "leaseStart": lease.start_date,
                "leaseEnd": lease.end_date,
                "rentAmount": to_money(lease.rent_amount),
                "daysUntilExpiry": days_left,
                "urgency": expiration_urgency(days_left).value,
                "monthYear": lease.end_date.strftime("%b %Y"),
            })

    expirations.sort(key=lambda e: e["daysUntilExpiry"])

    by_month = {}
    for item in expirations:
        by_month.setdefault(item["monthYear"], []).append(item)

    def count(urgency):
        return sum(1 for e in expirations if e["urgency"] == urgency.value)

    return {
        "expirations": expirations,
        "byMonth": by_month,
        "summary": {
            "total": len(expirations),
            "critical": count(ExpirationUrgency.critical),
            "warning": count(ExpirationUrgency.warning),
            "notice": count(ExpirationUrgency.notice),
            "totalRentAtRisk": sum((e["rentAmount"] for e in expirations), Decimal("0")),
        },
        "lookAheadMonths": months,
    }
