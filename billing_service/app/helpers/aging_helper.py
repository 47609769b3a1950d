"""Accounts-receivable aging and the shared obligation source for a lease.

A lease's obligations come from exactly one of two sources, chosen by
`select_obligations`: its rent charges when any match the caller's scope,
otherwise its legacy payments. Aging scopes the check to open balances,
reports scope it to their period. A stored PaymentAging snapshot overrides
live aging.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable, List, Optional

from pydantic import BaseModel

from ..enum.billing_enum import (
    AgingBucket, ChargeStatus, ChargeType, COLLECTED_PAYMENT_STATUSES,
    OUTSTANDING_PAYMENT_STATUSES
)
from .period_helper import to_money


class AgingBuckets(BaseModel):
    current: Decimal = Decimal("0")
    days30: Decimal = Decimal("0")
    days60: Decimal = Decimal("0")
    days90Plus: Decimal = Decimal("0")
    # totalDue carried verbatim from a stored snapshot
    stored_total: Optional[Decimal] = None

    @property
    def total_due(self) -> Decimal:
        if self.stored_total is not None:
            return self.stored_total
        return self.current + self.days30 + self.days60 + self.days90Plus

    def add(self, bucket: AgingBucket, amount: Decimal):
        setattr(self, bucket.value, getattr(self, bucket.value) + amount)

    def as_dict(self, with_total: bool = True) -> dict:
        data = {
            "current": self.current,
            "days30": self.days30,
            "days60": self.days60,
            "days90Plus": self.days90Plus,
        }
        if with_total:
            data["totalDue"] = self.total_due
        return data


class BillableObligation:
    """Something a tenant owes, backed by a rent charge or a legacy payment."""

    def __init__(self, source, charge_type: str, due_date: date, amount: Decimal,
                 paid_amount: Decimal, settled_on=None):
        self.source = source
        self.charge_type = charge_type
        self.due_date = due_date
        self.amount = amount
        self.paid_amount = paid_amount
        self.settled_on = settled_on

    @property
    def amount_due(self) -> Decimal:
        return self.amount - self.paid_amount

    @property
    def is_settled(self) -> bool:
        return self.settled_on is not None

    @classmethod
    def from_charge(cls, charge):
        settled_on = charge.updated_at if charge.status == ChargeStatus.PAID.value else None
        return cls(charge, charge.charge_type, charge.due_date, to_money(charge.amount),
                   to_money(charge.paid_amount), settled_on)

    @classmethod
    def from_payment(cls, payment):
        amount = to_money(payment.amount)
        if payment.status in COLLECTED_PAYMENT_STATUSES:
            return cls(payment, ChargeType.RENT.value, payment.due_date, amount, amount,
                       payment.paid_date)
        return cls(payment, ChargeType.RENT.value, payment.due_date, amount, Decimal("0"))


def as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_past_due(due_date, reference_date) -> int:
    return (as_date(reference_date) - as_date(due_date)).days


def bucket_for(days: int) -> AgingBucket:
    # not-yet-due and up to 30 days late share the "current" bucket
    if days <= 30:
        return AgingBucket.current
    if days <= 60:
        return AgingBucket.days30
    if days <= 90:
        return AgingBucket.days60
    return AgingBucket.days90Plus


def is_unpaid_charge(charge) -> bool:
    return charge.status != ChargeStatus.PAID.value


def is_outstanding_payment(payment) -> bool:
    return payment.status in OUTSTANDING_PAYMENT_STATUSES


def charge_in_period(period) -> Callable:
    """Rent-billing charges that fall due or were settled inside the period."""
    def matches(charge) -> bool:
        if charge.charge_type == ChargeType.LATE_FEE.value:
            return False
        settled = charge.status == ChargeStatus.PAID.value and period.contains(charge.updated_at)
        return settled or period.contains(charge.due_date)
    return matches


def select_obligations(charges: Iterable = (), payments: Iterable = (),
                       charge_filter: Optional[Callable] = None,
                       payment_filter: Optional[Callable] = None) -> List[BillableObligation]:
    """The one source of a lease's obligations: charges when any qualify, else payments.

    Each caller scopes the check with its filters (open balances for aging,
    the reporting period for income and rent collection), so legacy payments
    only stand in where no rent charge covers the same ground.
    """
    matching = [c for c in charges if charge_filter is None or charge_filter(c)]
    if matching:
        return [BillableObligation.from_charge(c) for c in matching]
    return [
        BillableObligation.from_payment(p) for p in payments
        if payment_filter is None or payment_filter(p)
    ]


def snapshot_buckets(snapshot) -> AgingBuckets:
    return AgingBuckets(
        current=to_money(snapshot.current),
        days30=to_money(snapshot.days_30),
        days60=to_money(snapshot.days_60),
        days90Plus=to_money(snapshot.days_90_plus),
        stored_total=to_money(snapshot.total_due),
    )


def compute_aging(reference_date, charges: Iterable = (), payments: Iterable = (),
                  snapshot=None) -> AgingBuckets:
    if snapshot is not None:
        return snapshot_buckets(snapshot)

    aging = AgingBuckets()
    obligations = select_obligations(
        charges, payments, is_unpaid_charge, is_outstanding_payment)
    for obligation in obligations:
        days = days_past_due(obligation.due_date, reference_date)
        aging.add(bucket_for(days), obligation.amount_due)
    return aging


def lease_aging(lease, reference_date, use_snapshot: bool = True) -> AgingBuckets:
    snapshot = lease.payment_aging if use_snapshot else None
    return compute_aging(reference_date, lease.rent_charges, lease.payments, snapshot)
