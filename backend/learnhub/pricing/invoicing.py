from datetime import date, datetime
from typing import List

from learnhub.core.constants import INVOICE_DUE_DAYS, INVOICE_NUMBER_PREFIX, InvoiceItemType
from .models import EffectivePricing, InvoiceLine, PricingCalculation


def format_invoice_number(year: int, sequence: int) -> str:
    """INV-{year}-{sequence zero-padded to 4 digits}, e.g. INV-2025-0007"""
    if sequence < 1:
        raise ValueError("invoice sequence starts at 1")
    return f"{INVOICE_NUMBER_PREFIX}-{year:04d}-{sequence:04d}"


def year_bounds(year: int) -> tuple[datetime, datetime]:
    """Half-open [Jan 1 of year, Jan 1 of next year) range"""
    return datetime(year, 1, 1), datetime(year + 1, 1, 1)


def invoice_due_date(issued_at: datetime) -> date:
    return (issued_at + INVOICE_DUE_DAYS).date()


def build_invoice_items(
    course_title: str,
    is_renewal: bool,
    seat_count: int,
    pricing: EffectivePricing,
    calculation: PricingCalculation,
) -> List[InvoiceLine]:
    """
    Build invoice lines for an activation.

    The lines always sum to ``calculation.total``: one setup or reactivation
    fee line, a seat line when seats were bought, and a tax line when tax
    was charged.
    """
    items = [
        InvoiceLine(
            description=f"{'Reactivation' if is_renewal else 'Setup'} Fee - {course_title}",
            quantity=1,
            unit_price=calculation.setup_or_reactivation_fee,
            total=calculation.setup_or_reactivation_fee,
            item_type=InvoiceItemType.REACTIVATION_FEE if is_renewal else InvoiceItemType.SETUP_FEE,
        )
    ]

    if seat_count > 0:
        items.append(
            InvoiceLine(
                description=f"Seat License (12 months) - {course_title}",
                quantity=seat_count,
                unit_price=pricing.seat_fee,
                total=calculation.seat_total,
                item_type=InvoiceItemType.SEAT_FEE,
            )
        )

    if calculation.tax_amount > 0:
        items.append(
            InvoiceLine(
                description="Tax",
                quantity=1,
                unit_price=calculation.tax_amount,
                total=calculation.tax_amount,
                item_type=InvoiceItemType.TAX,
            )
        )

    return items
