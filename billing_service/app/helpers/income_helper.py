from decimal import Decimal

from ..enum.billing_enum import ChargeStatus, ChargeType, COLLECTED_PAYMENT_STATUSES
from .aging_helper import charge_in_period, select_obligations
from .period_helper import ReportPeriod, to_money


def collected_income(lease, period: ReportPeriod) -> dict:
    """Money received on a lease inside the period.

    Rent comes from the charges that cover the period, or from legacy
    payments when no charge does. Late fees only exist as charges.
    """
    income = {
        "rentCollected": Decimal("0"),
        "lateFees": Decimal("0"),
        "otherIncome": Decimal("0"),
    }

    obligations = select_obligations(
        lease.rent_charges,
        lease.payments,
        charge_filter=charge_in_period(period),
        payment_filter=lambda p: p.status in COLLECTED_PAYMENT_STATUSES,
    )
    for obligation in obligations:
        if not obligation.is_settled or not period.contains(obligation.settled_on):
            continue
        key = "rentCollected" if obligation.charge_type == ChargeType.RENT.value else "otherIncome"
        income[key] += obligation.paid_amount

    for charge in lease.rent_charges:
        if (charge.charge_type == ChargeType.LATE_FEE.value
                and charge.status == ChargeStatus.PAID.value
                and period.contains(charge.updated_at)):
            income["lateFees"] += to_money(charge.paid_amount)

    return income


def add_income(total: dict, income: dict):
    for key, value in income.items():
        total[key] = total.get(key, Decimal("0")) + value
    return total
