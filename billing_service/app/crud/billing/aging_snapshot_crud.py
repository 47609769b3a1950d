import logging
from datetime import datetime

from sqlalchemy.orm import Session, selectinload

from ...enum.leasing_tenants_enum import LeaseStatus
from ...helpers.aging_helper import lease_aging
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.payment_aging import PaymentAging

logger = logging.getLogger(__name__)


def update_payment_aging(db: Session, reference_time: datetime):
    """Refresh the stored aging snapshot of every active lease."""
    reference_date = reference_time.date()
    leases = (
        db.query(Lease)
        .options(
            selectinload(Lease.rent_charges),
            selectinload(Lease.payments),
            selectinload(Lease.payment_aging),
        )
        .filter(Lease.status == LeaseStatus.ACTIVE.value)
        .all()
    )

    updated = 0
    created = 0

    for lease in leases:
        aging = lease_aging(lease, reference_date, use_snapshot=False)
        values = {
            "current": aging.current,
            "days_30": aging.days30,
            "days_60": aging.days60,
            "days_90_plus": aging.days90Plus,
            "total_due": aging.total_due,
            "updated_at": reference_time,
        }

        snapshot = lease.payment_aging
        if snapshot is not None:
            for key, value in values.items():
                setattr(snapshot, key, value)
            updated += 1
        elif aging.total_due > 0:
            db.add(PaymentAging(lease_id=lease.id, **values))
            created += 1

    db.commit()
    logger.info("Aging refresh: %d leases, %d updated, %d created",
                len(leases), updated, created)

    return {
        "success": True,
        "leasesProcessed": len(leases),
        "recordsUpdated": updated,
        "recordsCreated": created,
    }
