import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ...enum.billing_enum import ChargeStatus, ChargeType
from ...helpers.aging_helper import days_past_due
from ...helpers.late_fee_helper import calculate_late_fee, resolve_late_fee_rule
from ...helpers.period_helper import first_of_month, to_money
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.rent_charges import RentCharge
from ...models.space_sites.properties import Property
from ...models.space_sites.units import Unit

logger = logging.getLogger(__name__)


def get_overdue_rent_charges(db: Session, reference_date, property_id: Optional[UUID] = None):
    query = (
        db.query(RentCharge)
        .join(Lease, RentCharge.lease_id == Lease.id)
        .join(Unit, Lease.unit_id == Unit.id)
        .options(
            joinedload(RentCharge.lease)
            .joinedload(Lease.unit)
            .joinedload(Unit.property)
            .joinedload(Property.late_fee_config)
        )
        .filter(
            RentCharge.charge_type == ChargeType.RENT.value,
            RentCharge.status.in_(
                [ChargeStatus.UNPAID.value, ChargeStatus.PARTIAL.value]),
            RentCharge.due_date < reference_date,
        )
    )

    if property_id:
        query = query.filter(Unit.property_id == property_id)

    return query.order_by(RentCharge.due_date, RentCharge.id).all()


def late_fee_applied_since(db: Session, lease_id: UUID, since: datetime) -> bool:
    return db.query(
        db.query(RentCharge)
        .filter(
            RentCharge.lease_id == lease_id,
            RentCharge.charge_type == ChargeType.LATE_FEE.value,
            RentCharge.created_at >= since,
        )
        .exists()
    ).scalar()


def apply_late_fees(db: Session, reference_time: datetime, property_id: Optional[UUID] = None):
    reference_date = reference_time.date()
    month_start = first_of_month(reference_date)
    month_start_time = datetime(month_start.year, month_start.month, 1)

    charges = get_overdue_rent_charges(db, reference_date, property_id)
    candidates = []
    for charge in charges:
        prop = charge.lease.unit.property
        candidates.append({
            "charge_id": charge.id,
            "lease_id": charge.lease_id,
            "unpaid": to_money(charge.amount) - to_money(charge.paid_amount),
            "due_date": charge.due_date,
            "unit_number": charge.lease.unit.unit_number,
            "property_name": prop.name,
            "rule": resolve_late_fee_rule(prop.late_fee_config),
        })

    applied = []
    skipped = []
    total_fees = Decimal("0")

    for item in candidates:
        rule = item["rule"]
        location = {
            "chargeId": item["charge_id"],
            "leaseId": item["lease_id"],
            "unitNumber": item["unit_number"],
            "propertyName": item["property_name"],
        }

        if not rule.is_active:
            skipped.append({**location, "reason": "Late fees disabled for property"})
            continue

        days = days_past_due(item["due_date"], reference_date)
        if days <= rule.grace_period_days:
            skipped.append({
                **location,
                "reason": f"Within grace period ({days}/{rule.grace_period_days} days)",
            })
            continue

        # checked per charge so a fee created earlier in this run counts
        if late_fee_applied_since(db, item["lease_id"], month_start_time):
            skipped.append({**location, "reason": "Late fee already applied this month"})
            continue

        fee = calculate_late_fee(rule, item["unpaid"])
        late_fee = RentCharge(
            lease_id=item["lease_id"],
            charge_type=ChargeType.LATE_FEE.value,
            amount=fee,
            paid_amount=0,
            due_date=reference_date,
            period_start=month_start,
            status=ChargeStatus.UNPAID.value,
            created_at=reference_time,
            updated_at=reference_time,
        )

        try:
            db.add(late_fee)
            db.commit()
        except IntegrityError:
            db.rollback()
            skipped.append({**location, "reason": "Late fee already applied this month"})
            continue

        total_fees += fee
        applied.append({
            "id": late_fee.id,
            **location,
            "originalAmount": item["unpaid"],
            "feeAmount": fee,
            "daysPastDue": days,
        })

    logger.info(
        "Late fees on %s: %d charges, %d applied, %d skipped, total %s",
        reference_date, len(candidates), len(applied), len(skipped), total_fees)

    return {
        "success": True,
        "date": reference_date,
        "chargesProcessed": len(candidates),
        "lateFeesApplied": len(applied),
        "lateFeesSkipped": len(skipped),
        "totalFeesGenerated": total_fees,
        "details": {
            "applied": applied,
            "skipped": skipped,
        },
    }
