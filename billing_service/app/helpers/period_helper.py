import calendar
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel

from ..enum.revenue_enum import ReportPeriodType


class ReportPeriod(BaseModel):
    type: ReportPeriodType
    start: datetime
    end: datetime
    label: str

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def contains(self, value) -> bool:
        if value is None:
            return False
        if isinstance(value, datetime):
            return self.start <= value <= self.end
        return self.start_date <= value <= self.end_date

    def as_dict(self) -> dict:
        return {
            "type": self.type.value,
            "startDate": self.start,
            "endDate": self.end,
            "label": self.label,
        }


def first_of_month(value) -> date:
    return date(value.year, value.month, 1)


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: Optional[int]) -> date:
    """Date for `day` in the month, clamped to the month's last day."""
    day = max(1, min(day or 1, last_day_of_month(year, month)))
    return date(year, month, day)


def month_bounds(year: int, month: int):
    start = datetime(year, month, 1)
    end = datetime.combine(
        date(year, month, last_day_of_month(year, month)), time(23, 59, 59))
    return start, end


def shift_month(year: int, month: int, months: int) -> date:
    return date(year, month, 1) + relativedelta(months=months)


def resolve_period(period_type, year: int, month: int) -> ReportPeriod:
    """Resolve a month / quarter / year reporting window around (year, month)."""
    period_type = ReportPeriodType(period_type)

    if period_type == ReportPeriodType.month:
        start, end = month_bounds(year, month)
        label = f"{calendar.month_name[month]} {year}"
    elif period_type == ReportPeriodType.quarter:
        quarter = math.ceil(month / 3)
        start, _ = month_bounds(year, (quarter - 1) * 3 + 1)
        _, end = month_bounds(year, quarter * 3)
        label = f"Q{quarter} {year}"
    else:
        start, _ = month_bounds(year, 1)
        _, end = month_bounds(year, 12)
        label = f"{year}"

    return ReportPeriod(type=period_type, start=start, end=end, label=label)


def parse_month_param(value: Optional[str], reference: datetime):
    """Parse a YYYY-MM query value; defaults to the reference month."""
    if not value:
        return reference.year, reference.month
    year, month = (int(part) for part in value.split("-", 1))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {value}")
    return year, month


def one_decimal_rate(numerator, denominator) -> float:
    """Percentage rounded half-up to one decimal; 0 when denominator is 0."""
    if not denominator:
        return 0
    return math.floor(float(numerator) / float(denominator) * 1000 + 0.5) / 10


def to_money(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def whole_number(value) -> int:
    """Round half up to an integer."""
    return math.floor(float(value) + 0.5)
