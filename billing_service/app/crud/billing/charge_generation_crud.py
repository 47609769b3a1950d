import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from ...enum.billing_enum import ChargeStatus, ChargeType
from ...enum.leasing_tenants_enum import LeaseStatus
from ...helpers.period_helper import clamp_day, shift_month
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.rent_charges import RentCharge
from ...models.space_sites.units import Unit

logger = logging.getLogger(__name__)


def get_billable_leases(db: Session, period_start, property_id: Optional[UUID] = None):
    """ACTIVE leases whose term covers the first day of the billing month."""
    query = (
        db.query(Lease)
        .join(Unit, Lease.unit_id == Unit.id)
        .options(
            joinedload(Lease.unit).joinedload(Unit.property),
            selectinload(Lease.recurring_charges),
        )
        .filter(
            Lease.status == LeaseStatus.ACTIVE.value,
            Lease.start_date <= period_start,
            or_(Lease.end_date.is_(None), Lease.end_date >= period_start),
        )
    )

    if property_id:
        query = query.filter(Unit.property_id == property_id)

    return query.order_by(Lease.created_at, Lease.id).all()


def existing_charge_types(db: Session, lease_id: UUID, period_start, period_end) -> set:
    rows = (
        db.query(RentCharge.charge_type)
        .filter(
            RentCharge.lease_id == lease_id,
            or_(
                RentCharge.period_start == period_start,
                (RentCharge.due_date >= period_start) & (
                    RentCharge.due_date < period_end),
            ),
        )
        .all()
    )
    return {row.charge_type for row in rows}


def _insert_charge(db: Session, charge: RentCharge) -> bool:
    """Commit one charge; False when the period key already exists."""
    try:
        db.add(charge)
        db.commit()
        return True
    except IntegrityError:
        db.rollback()
        return False


def generate_charges(
    db: Session,
    reference_time: datetime,
    year: Optional[int] = None,
    month: Optional[int] = None,
    property_id: Optional[UUID] = None,
):
    target_year = year or reference_time.year
    target_month = month or reference_time.month
    period_start = clamp_day(target_year, target_month, 1)
    period_end = shift_month(target_year, target_month, 1)

    leases = get_billable_leases(db, period_start, property_id)
    lease_rows = [
        {
            "lease_id": lease.id,
            "rent_amount": lease.rent_amount,
            "unit_number": lease.unit.unit_number,
            "property_name": lease.unit.property.name,
            "recurring": [
                (r.charge_type, r.amount, r.day_of_month)
                for r in lease.recurring_charges if r.is_active
            ],
        }
        for lease in leases
    ]

    created = []
    skipped = []

    for row in lease_rows:
        lease_id = row["lease_id"]
        location = {
            "leaseId": lease_id,
            "unitNumber": row["unit_number"],
            "propertyName": row["property_name"],
        }
        existing = existing_charge_types(db, lease_id, period_start, period_end)

        rent_day = next(
            (day for charge_type, _, day in row["recurring"]
             if charge_type == ChargeType.RENT.value),
            1,
        )
        templates = [(ChargeType.RENT.value, row["rent_amount"], rent_day)]
        templates += [
            template for template in row["recurring"]
            if template[0] != ChargeType.RENT.value
        ]

        for charge_type, amount, day in templates:
            if charge_type in existing:
                if charge_type == ChargeType.RENT.value:
                    skipped.append({
                        **location,
                        "chargeType": charge_type,
                        "reason": "Rent charge already exists for this month",
                    })
                continue

            due_date = clamp_day(target_year, target_month, day)
            charge = RentCharge(
                lease_id=lease_id,
                charge_type=charge_type,
                amount=amount,
                paid_amount=0,
                due_date=due_date,
                period_start=period_start,
                status=ChargeStatus.UNPAID.value,
                created_at=reference_time,
                updated_at=reference_time,
            )

            try:
                inserted = _insert_charge(db, charge)
            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("Charge creation failed for lease %s", lease_id)
                skipped.append({
                    **location,
                    "chargeType": charge_type,
                    "reason": f"Failed to create charge: {e.__class__.__name__}",
                })
                continue

            if not inserted:
                skipped.append({
                    **location,
                    "chargeType": charge_type,
                    "reason": "Charge already exists for this month",
                })
                continue

            created.append({
                "id": charge.id,
                **location,
                "chargeType": charge_type,
                "amount": amount,
                "dueDate": due_date,
            })

    logger.info(
        "Charge generation %04d-%02d: %d leases, %d created, %d skipped",
        target_year, target_month, len(lease_rows), len(created), len(skipped))

    return {
        "success": True,
        "period": f"{target_year}-{target_month:02d}",
        "leasesProcessed": len(lease_rows),
        "chargesCreated": len(created),
        "chargesSkipped": len(skipped),
        "details": {
            "created": created,
            "skipped": skipped,
        },
    }
