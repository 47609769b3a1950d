from datetime import date, datetime
from decimal import Decimal

from billing_service.app.crud.billing.late_fees_crud import apply_late_fees
from billing_service.app.enum.billing_enum import LateFeeType
from billing_service.app.helpers.late_fee_helper import (
    DEFAULT_LATE_FEE_RULE, LateFeeRule, calculate_late_fee, resolve_late_fee_rule
)
from billing_service.app.models.leasing_tenants.rent_charges import RentCharge

JAN_10 = datetime(2024, 1, 10, 9, 0)


def late_fees(db, lease_id):
    return (
        db.query(RentCharge)
        .filter(RentCharge.lease_id == lease_id, RentCharge.charge_type == "LATE_FEE")
        .all()
    )


def test_flat_fee_ignores_unpaid_amount():
    assert calculate_late_fee(DEFAULT_LATE_FEE_RULE, Decimal("1800")) == Decimal("50.00")
    assert calculate_late_fee(DEFAULT_LATE_FEE_RULE, Decimal("10")) == Decimal("50.00")


def test_percentage_fee_is_capped():
    rule = LateFeeRule(fee_type=LateFeeType.PERCENTAGE, fee_amount=Decimal("5"),
                       max_fee_amount=Decimal("100"))
    assert calculate_late_fee(rule, Decimal("3000")) == Decimal("100.00")
    assert calculate_late_fee(rule, Decimal("1000")) == Decimal("50.00")


def test_missing_config_uses_default_rule():
    rule = resolve_late_fee_rule(None)
    assert rule.grace_period_days == 5
    assert rule.fee_type == LateFeeType.FLAT
    assert rule.fee_amount == Decimal("50")
    assert rule.is_active is True


def test_late_fee_applied_once_per_month(db, factory, owner, tenant):
    prop = factory.property(owner)
    lease = factory.lease(factory.unit(prop), tenant)
    rent = factory.charge(lease, date(2024, 1, 1))

    result = apply_late_fees(db, JAN_10)

    assert result["lateFeesApplied"] == 1
    assert result["chargesProcessed"] == 1
    assert result["totalFeesGenerated"] == Decimal("50.00")
    applied = result["details"]["applied"][0]
    assert applied["chargeId"] == rent.id
    assert applied["daysPastDue"] == 9
    assert applied["feeAmount"] == Decimal("50.00")

    fees = late_fees(db, lease.id)
    assert len(fees) == 1
    assert fees[0].due_date == date(2024, 1, 10)
    assert fees[0].status == "UNPAID"

    rerun = apply_late_fees(db, JAN_10)

    assert rerun["lateFeesApplied"] == 0
    assert rerun["lateFeesSkipped"] == 1
    assert rerun["details"]["skipped"][0]["reason"] == "Late fee already applied this month"
    assert len(late_fees(db, lease.id)) == 1


def test_grace_period_boundary(db, factory, owner):
    prop = factory.property(owner)
    on_boundary = factory.lease(factory.unit(prop), factory.user(role="TENANT"))
    past_boundary = factory.lease(factory.unit(prop), factory.user(role="TENANT"))
    factory.charge(on_boundary, date(2024, 1, 5))
    factory.charge(past_boundary, date(2024, 1, 4))

    result = apply_late_fees(db, JAN_10)

    assert result["lateFeesApplied"] == 1
    assert result["details"]["applied"][0]["leaseId"] == past_boundary.id
    skipped = result["details"]["skipped"][0]
    assert skipped["leaseId"] == on_boundary.id
    assert skipped["reason"] == "Within grace period (5/5 days)"


def test_disabled_config_skips_property(db, factory, owner, tenant):
    prop = factory.property(owner)
    factory.late_fee_config(prop, is_active=False)
    lease = factory.lease(factory.unit(prop), tenant)
    factory.charge(lease, date(2023, 12, 1))

    result = apply_late_fees(db, JAN_10)

    assert result["lateFeesApplied"] == 0
    assert result["details"]["skipped"][0]["reason"] == "Late fees disabled for property"


def test_percentage_config_uses_unpaid_balance(db, factory, owner, tenant):
    prop = factory.property(owner)
    factory.late_fee_config(prop, fee_type="PERCENTAGE", fee_amount=Decimal("10"),
                            max_fee_amount=Decimal("500"), grace_period_days=3)
    lease = factory.lease(factory.unit(prop), tenant)
    factory.charge(lease, date(2024, 1, 1), amount="2000",
                   paid_amount=Decimal("1000"), status="PARTIAL")

    result = apply_late_fees(db, JAN_10)

    assert result["totalFeesGenerated"] == Decimal("100.00")
    assert result["details"]["applied"][0]["originalAmount"] == Decimal("1000")


def test_one_fee_per_lease_even_with_two_overdue_charges(db, factory, owner, tenant):
    prop = factory.property(owner)
    lease = factory.lease(factory.unit(prop), tenant)
    factory.charge(lease, date(2023, 12, 1))
    factory.charge(lease, date(2024, 1, 1))

    result = apply_late_fees(db, JAN_10)

    assert result["chargesProcessed"] == 2
    assert result["lateFeesApplied"] == 1
    assert len(late_fees(db, lease.id)) == 1


def test_paid_and_future_charges_are_not_candidates(db, factory, owner, tenant):
    prop = factory.property(owner)
    lease = factory.lease(factory.unit(prop), tenant)
    factory.charge(lease, date(2023, 12, 1), status="PAID", paid_amount=Decimal("1800"))
    factory.charge(lease, date(2024, 2, 1))

    result = apply_late_fees(db, JAN_10)

    assert result["chargesProcessed"] == 0
    assert result["lateFeesApplied"] == 0


def test_property_filter_limits_candidates(db, factory, owner):
    first = factory.property(owner)
    second = factory.property(owner)
    lease_a = factory.lease(factory.unit(first), factory.user(role="TENANT"))
    lease_b = factory.lease(factory.unit(second), factory.user(role="TENANT"))
    factory.charge(lease_a, date(2024, 1, 1))
    factory.charge(lease_b, date(2024, 1, 1))

    result = apply_late_fees(db, JAN_10, property_id=second.id)

    assert result["lateFeesApplied"] == 1
    assert result["details"]["applied"][0]["leaseId"] == lease_b.id
