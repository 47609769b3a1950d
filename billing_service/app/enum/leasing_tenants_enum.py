from enum import Enum


class LeaseStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


class InviteStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"


class RentRollStatus(str, Enum):
    all = "all"
    current = "current"
    overdue = "overdue"


class ExpirationUrgency(str, Enum):
    critical = "critical"
    warning = "warning"
    notice = "notice"
