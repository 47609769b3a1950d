import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload, selectinload

from shared.core.schemas import UserToken
from shared.exporthelper import export_to_csv
from shared.helpers.json_response_helper import forbidden, not_found

from ...enum.billing_enum import (
    AgingBucket, ChargeStatus, COLLECTED_PAYMENT_STATUSES
)
from ...enum.leasing_tenants_enum import InviteStatus, LeaseStatus, RentRollStatus
from ...enum.space_sites_enum import PropertyStatus
from ...helpers.aging_helper import AgingBuckets, as_date, lease_aging
from ...helpers.period_helper import one_decimal_rate, to_money
from ...models.leasing_tenants.leases import Lease
from ...models.space_sites.properties import Property
from ...models.space_sites.units import Unit

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = {
    "propertyName": "Property",
    "address": "Address",
    "unitNumber": "Unit",
    "status": "Status",
    "bedrooms": "Beds",
    "bathrooms": "Baths",
    "sqft": "Sq Ft",
    "marketRent": "Market Rent",
    "leaseRent": "Lease Rent",
    "tenantName": "Tenant Name",
    "tenantEmail": "Tenant Email",
    "tenantPhone": "Tenant Phone",
    "leaseStart": "Lease Start",
    "leaseEnd": "Lease End",
    "currentBalance": "Current Balance",
    "current": "0-30 Days",
    "days30": "31-60 Days",
    "days60": "61-90 Days",
    "days90Plus": "90+ Days",
    "lastPaymentDate": "Last Payment Date",
    "lastPaymentAmount": "Last Payment Amount",
}


def _property_load_options():
    return (
        joinedload(Property.owner),
        selectinload(Property.units).selectinload(Unit.leases).options(
            joinedload(Lease.tenant),
            selectinload(Lease.rent_charges),
            selectinload(Lease.payments),
            joinedload(Lease.payment_aging),
        ),
        selectinload(Property.units).selectinload(Unit.tenant_invites),
    )


def scoped_property_filters(current_user: UserToken, property_id: Optional[UUID] = None,
                            owner_id: Optional[UUID] = None) -> list:
    """OWNER sees own properties; ADMIN sees all or the requested slice."""
    filters = [Property.status == PropertyStatus.ACTIVE.value]

    if current_user.is_owner:
        filters.append(Property.owner_id == current_user.user_id)
    elif current_user.is_admin:
        if property_id:
            filters.append(Property.id == property_id)
        if owner_id:
            filters.append(Property.owner_id == owner_id)
    else:
        forbidden("Access denied")

    return filters


def get_scoped_properties(db: Session, filters: list) -> List[Property]:
    return (
        db.query(Property)
        .options(*_property_load_options())
        .filter(*filters)
        .order_by(Property.name)
        .all()
    )


def find_active_lease(unit: Unit) -> Optional[Lease]:
    return next((l for l in unit.leases if l.status == LeaseStatus.ACTIVE.value), None)


def find_pending_invite(unit: Unit):
    return next(
        (i for i in unit.tenant_invites if i.status == InviteStatus.PENDING.value), None)


def find_last_payment(lease: Lease):
    """Most recent settled rent charge or legacy payment: (date, amount)."""
    settled = [
        (as_date(c.updated_at), to_money(c.paid_amount))
        for c in lease.rent_charges
        if c.status == ChargeStatus.PAID.value and c.updated_at
    ]
    settled += [
        (p.paid_date, to_money(p.amount))
        for p in lease.payments
        if p.status in COLLECTED_PAYMENT_STATUSES and p.paid_date
    ]
    if not settled:
        return None, None
    return max(settled, key=lambda item: item[0])


def build_rent_roll_item(prop: Property, unit: Unit, reference_date: date) -> dict:
    lease = find_active_lease(unit)
    invite = find_pending_invite(unit)

    item = {
        "propertyId": prop.id,
        "propertyName": prop.name,
        "propertyAddress": prop.short_address,
        "owner": {
            "id": prop.owner.id,
            "name": prop.owner.name,
            "email": prop.owner.email,
        } if prop.owner else None,
        "unitId": unit.id,
        "unitNumber": unit.unit_number,
        "status": unit.status,
        "bedrooms": unit.bedrooms,
        "bathrooms": unit.bathrooms,
        "sqft": unit.sqft,
        "marketRent": to_money(unit.rent_amount),
        "leaseRent": None,
        "tenant": None,
        "leaseId": None,
        "leaseStart": None,
        "leaseEnd": None,
        "currentBalance": Decimal("0"),
        "lastPaymentDate": None,
        "lastPaymentAmount": None,
        "pendingInvite": None,
        "aging": AgingBuckets().as_dict(with_total=False),
    }

    if lease is None:
        if invite is not None:
            item["pendingInvite"] = {"email": invite.email, "status": invite.status}
        return item

    aging = lease_aging(lease, reference_date)
    last_date, last_amount = find_last_payment(lease)
    tenant = lease.tenant

    item.update({
        "leaseRent": to_money(lease.rent_amount),
        "tenant": {
            "id": tenant.id,
            "name": tenant.name,
            "email": tenant.email,
            "phone": tenant.phone,
        } if tenant else None,
        "leaseId": lease.id,
        "leaseStart": lease.start_date,
        "leaseEnd": lease.end_date,
        "currentBalance": aging.total_due,
        "lastPaymentDate": last_date,
        "lastPaymentAmount": last_amount,
        "aging": aging.as_dict(with_total=False),
    })
    return item


def matches_status(item: dict, status: RentRollStatus) -> bool:
    if status == RentRollStatus.current:
        return item["currentBalance"] == 0 and item["tenant"] is not None
    if status == RentRollStatus.overdue:
        return item["currentBalance"] > 0
    return True


def rent_roll_totals(rows: List[dict]) -> dict:
    occupied = sum(1 for r in rows if r["tenant"])
    aging_totals = {
        bucket.value: sum((r["aging"][bucket.value] for r in rows), Decimal("0"))
        for bucket in AgingBucket
    }

    return {
        "totalUnits": len(rows),
        "occupiedUnits": occupied,
        "vacantUnits": len(rows) - occupied,
        "totalMarketRent": sum((r["marketRent"] for r in rows), Decimal("0")),
        "totalLeaseRent": sum((r["leaseRent"] or Decimal("0") for r in rows), Decimal("0")),
        "totalBalance": sum((r["currentBalance"] for r in rows), Decimal("0")),
        "agingTotals": aging_totals,
        "occupancyRate": one_decimal_rate(occupied, len(rows)),
    }


def get_property_rent_roll(
    db: Session,
    property_id: UUID,
    current_user: UserToken,
    reference_date: date,
    status: RentRollStatus = RentRollStatus.all,
):
    prop = (
        db.query(Property)
        .options(*_property_load_options())
        .filter(Property.id == property_id)
        .first()
    )
    if not prop:
        return not_found("Property not found")

    if current_user.is_owner and prop.owner_id != current_user.user_id:
        return forbidden("Access denied")
    if not (current_user.is_owner or current_user.is_admin):
        return forbidden("Access denied")

    rows = [build_rent_roll_item(prop, unit, reference_date) for unit in prop.units]

    return {
        "rentRoll": [r for r in rows if matches_status(r, status)],
        # property totals describe every unit regardless of the status filter
        "totals": rent_roll_totals(rows),
    }


def get_portfolio_rent_roll(
    db: Session,
    current_user: UserToken,
    reference_date: date,
    property_id: Optional[UUID] = None,
    owner_id: Optional[UUID] = None,
    status: RentRollStatus = RentRollStatus.all,
):
    filters = scoped_property_filters(current_user, property_id, owner_id)
    properties = get_scoped_properties(db, filters)

    rows = [
        build_rent_roll_item(prop, unit, reference_date)
        for prop in properties
        for unit in prop.units
    ]
    rows = [r for r in rows if matches_status(r, status)]

    totals = rent_roll_totals(rows)
    totals = {"totalProperties": len(properties), **totals}

    return {"rentRoll": rows, "totals": totals}


def get_aging_report(
    db: Session,
    current_user: UserToken,
    reference_date: date,
    property_id: Optional[UUID] = None,
    owner_id: Optional[UUID] = None,
):
    filters = scoped_property_filters(current_user, property_id, owner_id)
    properties = get_scoped_properties(db, filters)

    report = {
        bucket.value: {"count": 0, "amount": Decimal("0"), "tenants": []}
        for bucket in AgingBucket
    }

    for prop in properties:
        for unit in prop.units:
            for lease in unit.leases:
                if lease.status != LeaseStatus.ACTIVE.value or lease.tenant is None:
                    continue

                aging = lease_aging(lease, reference_date).as_dict(with_total=False)
                tenant_info = {
                    "propertyName": prop.name,
                    "unitNumber": unit.unit_number,
                    "tenantName": lease.tenant.name,
                    "tenantEmail": lease.tenant.email,
                    "leaseId": lease.id,
                }

                for bucket, amount in aging.items():
                    if amount <= 0:
                        continue
                    entry = report[bucket]
                    entry["count"] += 1
                    entry["amount"] += amount
                    entry["tenants"].append({**tenant_info, "amount": amount})

    for entry in report.values():
        entry["tenants"].sort(key=lambda t: t["amount"], reverse=True)

    total_outstanding = sum((e["amount"] for e in report.values()), Decimal("0"))
    delinquent = total_outstanding - report[AgingBucket.current.value]["amount"]
    critical = [report[AgingBucket.days60.value], report[AgingBucket.days90Plus.value]]

    return {
        "aging": report,
        "summary": {
            "totalOutstanding": total_outstanding,
            "delinquencyRate": one_decimal_rate(delinquent, total_outstanding),
            "criticalCount": sum(e["count"] for e in critical),
            "criticalAmount": sum((e["amount"] for e in critical), Decimal("0")),
        },
    }


def format_export_date(value) -> str:
    if not value:
        return ""
    value = as_date(value)
    return f"{value.month}/{value.day}/{value.year}"


def format_export_money(value) -> str:
    if value is None:
        return ""
    return f"{to_money(value):.2f}"


def build_export_rows(rent_roll: List[dict], properties_by_id: dict) -> List[dict]:
    rows = []
    for item in rent_roll:
        prop = properties_by_id[item["propertyId"]]
        tenant = item["tenant"] or {}
        aging = item["aging"]
        rows.append({
            "propertyName": item["propertyName"],
            "address": prop.full_address,
            "unitNumber": item["unitNumber"],
            "status": item["status"],
            "bedrooms": str(item["bedrooms"]),
            "bathrooms": f"{to_money(item['bathrooms']).normalize():f}",
            "sqft": "" if item["sqft"] is None else str(item["sqft"]),
            "marketRent": format_export_money(item["marketRent"]),
            "leaseRent": format_export_money(item["leaseRent"]),
            "tenantName": tenant.get("name") or "",
            "tenantEmail": tenant.get("email") or "",
            "tenantPhone": tenant.get("phone") or "",
            "leaseStart": format_export_date(item["leaseStart"]),
            "leaseEnd": format_export_date(item["leaseEnd"]),
            "currentBalance": format_export_money(item["currentBalance"]),
            "current": format_export_money(aging["current"]),
            "days30": format_export_money(aging["days30"]),
            "days60": format_export_money(aging["days60"]),
            "days90Plus": format_export_money(aging["days90Plus"]),
            "lastPaymentDate": format_export_date(item["lastPaymentDate"]),
            "lastPaymentAmount": format_export_money(item["lastPaymentAmount"]),
        })
    return rows


def export_rent_roll(
    db: Session,
    current_user: UserToken,
    reference_date: date,
    property_id: Optional[UUID] = None,
    format: str = "csv",
):
    # owners export their whole portfolio; propertyId only narrows admin exports
    filters = scoped_property_filters(
        current_user, property_id if current_user.is_admin else None)
    properties = get_scoped_properties(db, filters)

    rent_roll = [
        build_rent_roll_item(prop, unit, reference_date)
        for prop in properties
        for unit in prop.units
    ]
    rows = build_export_rows(rent_roll, {p.id: p for p in properties})

    if format != "csv":
        header = list(EXPORT_COLUMNS.values())
        return {"rows": [header] + [[row[key] for key in EXPORT_COLUMNS] for row in rows]}

    scope = property_id or "portfolio"
    filename = f"rent-roll-{scope}-{reference_date.isoformat()}.csv"
    logger.info("Exporting %d rent roll rows to %s", len(rows), filename)
    return export_to_csv(rows, EXPORT_COLUMNS, filename)
