from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel

from ..enum.billing_enum import LateFeeType
from .period_helper import to_money

CENTS = Decimal("0.01")


class LateFeeRule(BaseModel):
    grace_period_days: int = 5
    fee_type: LateFeeType = LateFeeType.FLAT
    fee_amount: Decimal = Decimal("50")
    max_fee_amount: Optional[Decimal] = None
    is_active: bool = True

    model_config = {
        "from_attributes": True
    }


DEFAULT_LATE_FEE_RULE = LateFeeRule()


def resolve_late_fee_rule(config) -> LateFeeRule:
    """Property config when one exists, otherwise 5 day grace / $50 flat."""
    if config is None:
        return DEFAULT_LATE_FEE_RULE
    return LateFeeRule.model_validate(config)


def calculate_late_fee(rule: LateFeeRule, unpaid_amount) -> Decimal:
    if rule.fee_type == LateFeeType.PERCENTAGE:
        fee = to_money(unpaid_amount) * rule.fee_amount / Decimal("100")
        if rule.max_fee_amount and fee > rule.max_fee_amount:
            fee = rule.max_fee_amount
    else:
        # flat fee does not scale with the unpaid balance
        fee = rule.fee_amount
    return to_money(fee).quantize(CENTS, rounding=ROUND_HALF_UP)
