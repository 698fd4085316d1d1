from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

from learnhub.core.constants import MAX_TAX_RATE_PERCENT, MONEY_QUANTUM
from learnhub.core.exceptions import ValidationError
from .models import EffectivePricing, PricingCalculation

Number = Union[int, str, Decimal]


def to_decimal(value: Number, field: str = "value") -> Decimal:
    """Coerce a user-supplied number to Decimal without passing through float."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"{field} must be a number") from e


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def validate_seat_count(seat_count: int) -> int:
    if isinstance(seat_count, bool) or not isinstance(seat_count, int):
        raise ValidationError("Seat count must be a whole number")
    if seat_count < 1:
        raise ValidationError("Seat count must be at least 1")
    return seat_count


def normalize_tax_rate(tax_rate_percent: Number) -> Decimal:
    """Percentage between 0 and 100 with at most two decimal places"""
    rate = to_decimal(tax_rate_percent, "tax_rate_percent")
    if not rate.is_finite():
        raise ValidationError("Tax rate must be a number")
    if rate < 0:
        raise ValidationError("Tax rate cannot be negative")
    if rate > MAX_TAX_RATE_PERCENT:
        raise ValidationError(f"Tax rate cannot exceed {MAX_TAX_RATE_PERCENT}%")
    if rate != rate.quantize(MONEY_QUANTUM):
        raise ValidationError("Tax rate allows at most two decimal places")
    return rate.quantize(MONEY_QUANTUM)


def compute_activation(
    is_renewal: bool,
    seat_count: int,
    pricing: EffectivePricing,
    tax_rate_percent: Number = 0,
) -> PricingCalculation:
    """
    Calculate the money breakdown for a course activation.

    Formula:
        setup_or_reactivation_fee = reactivation_fee if renewal else setup_fee
        seat_total = seat_count * seat_fee
        subtotal   = setup_or_reactivation_fee + seat_total
        tax_amount = subtotal * tax_rate_percent / 100  (rounded half-up to cents)
        total      = subtotal + tax_amount

    Examples:
        - new, 20 seats at 10, setup 500, no tax -> subtotal 700, total 700
        - renewal, 20 seats at 8, reactivation 250 -> subtotal 410, total 410
    """
    validate_seat_count(seat_count)
    rate = normalize_tax_rate(tax_rate_percent)

    fee = pricing.reactivation_fee if is_renewal else pricing.setup_fee
    seat_total = pricing.seat_fee * seat_count
    subtotal = fee + seat_total
    tax_amount = quantize_money(subtotal * rate / Decimal(100)) if rate else Decimal(0)

    return PricingCalculation(
        setup_or_reactivation_fee=fee,
        seat_total=seat_total,
        subtotal=subtotal,
        tax_amount=tax_amount,
        total=subtotal + tax_amount,
    )
