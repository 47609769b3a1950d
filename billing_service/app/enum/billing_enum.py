from enum import Enum


class ChargeType(str, Enum):
    RENT = "RENT"
    LATE_FEE = "LATE_FEE"
    UTILITY = "UTILITY"
    PARKING = "PARKING"
    PET = "PET"
    STORAGE = "STORAGE"
    OTHER = "OTHER"


class ChargeStatus(str, Enum):
    UNPAID = "UNPAID"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


class PaymentStatus(str, Enum):
    PAID = "PAID"
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"


# legacy payment states that count as collected / still owed
COLLECTED_PAYMENT_STATUSES = (PaymentStatus.PAID.value,
                              PaymentStatus.COMPLETED.value)
OUTSTANDING_PAYMENT_STATUSES = (PaymentStatus.PENDING.value,
                                PaymentStatus.OVERDUE.value)


class LateFeeType(str, Enum):
    FLAT = "FLAT"
    PERCENTAGE = "PERCENTAGE"


class InvoiceStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class LineItemType(str, Enum):
    management_fee = "management_fee"
    flat_fee = "flat_fee"
    other = "other"


class AgingBucket(str, Enum):
    current = "current"
    days30 = "days30"
    days60 = "days60"
    days90Plus = "days90Plus"
