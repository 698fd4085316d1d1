# backend/learnhub/core/constants.py
from datetime import timedelta
from decimal import Decimal
from enum import Enum


class UserRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    COMPANY_ADMIN = "company_admin"
    USER = "user"


class ActivationStatus(str, Enum):
    PENDING_PAYMENT = "pending_payment"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    CANCELLED = "cancelled"


class InvoiceItemType(str, Enum):
    SETUP_FEE = "setup_fee"
    REACTIVATION_FEE = "reactivation_fee"
    SEAT_FEE = "seat_fee"
    TAX = "tax"


class PaymentType(str, Enum):
    COURSE_ACTIVATION = "course_activation"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


# Pricing defaults when no tier supplies a value
DEFAULT_CURRENCY = "USD"
DEFAULT_FEE = Decimal("0")

# Money is kept at two decimal places
MONEY_QUANTUM = Decimal("0.01")

# Invoice tax rates are stored as Numeric(5, 2) percentages
MAX_TAX_RATE_PERCENT = Decimal("100")

# Activations run for one calendar year from activation
ACTIVATION_TERM_YEARS = 1
INVOICE_DUE_DAYS = timedelta(days=14)
INVOICE_NUMBER_PREFIX = "INV"

# eZeePayments webhook success code
EZEE_SUCCESS_CODE = "1"
EZEE_PAYMENT_METHOD = "ezee_payments"
ORDER_ID_PREFIX = "ACT"
