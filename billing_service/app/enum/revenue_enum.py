from enum import Enum


class ReportPeriodType(str, Enum):
    month = "month"
    quarter = "quarter"
    year = "year"


class ExpenseCategory(str, Enum):
    MAINTENANCE = "MAINTENANCE"
    REPAIRS = "REPAIRS"
    UTILITIES = "UTILITIES"
    INSURANCE = "INSURANCE"
    TAX = "TAX"
    MORTGAGE = "MORTGAGE"
    HOA = "HOA"
    LEGAL = "LEGAL"
    ADVERTISING = "ADVERTISING"
    OTHER = "OTHER"


class PropertyExpenseBucket(str, Enum):
    maintenance = "maintenance"
    repairs = "repairs"
    utilities = "utilities"
    insurance = "insurance"
    taxes = "taxes"
    managementFee = "managementFee"
    other = "other"


class CompanyExpenseBucket(str, Enum):
    payroll = "payroll"
    software = "software"
    marketing = "marketing"
    office = "office"
    insurance = "insurance"
    other = "other"


# Property-level expense category -> P&L bucket. Anything unlisted is "other".
# Both singular and plural spellings are stored in the wild.
PROPERTY_EXPENSE_BUCKETS = {
    "MAINTENANCE": PropertyExpenseBucket.maintenance,
    "REPAIR": PropertyExpenseBucket.repairs,
    "REPAIRS": PropertyExpenseBucket.repairs,
    "UTILITY": PropertyExpenseBucket.utilities,
    "UTILITIES": PropertyExpenseBucket.utilities,
    "INSURANCE": PropertyExpenseBucket.insurance,
    "TAX": PropertyExpenseBucket.taxes,
    "MANAGEMENT_FEE": PropertyExpenseBucket.managementFee,
}

# Company (overhead) expense category -> P&L bucket. Anything unlisted is "other".
COMPANY_EXPENSE_BUCKETS = {
    "PAYROLL": CompanyExpenseBucket.payroll,
    "SALARY": CompanyExpenseBucket.payroll,
    "SOFTWARE": CompanyExpenseBucket.software,
    "TECH": CompanyExpenseBucket.software,
    "MARKETING": CompanyExpenseBucket.marketing,
    "ADVERTISING": CompanyExpenseBucket.marketing,
    "OFFICE": CompanyExpenseBucket.office,
    "RENT": CompanyExpenseBucket.office,
    "INSURANCE": CompanyExpenseBucket.insurance,
}
