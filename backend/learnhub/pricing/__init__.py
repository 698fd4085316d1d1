"""
LearnHub course pricing and activation rules

Pure functions over already-fetched records; no I/O happens here, so the
whole package is testable without a database.

Core components:
- models: frozen pydantic value objects (tiers, effective pricing, breakdowns)
- resolver: three-tier override lookup, resolved per fee field
- calculator: money breakdown for a new activation or a renewal
- classifier: renewal/expiry classification and the double-activation guard
- invoicing: invoice numbering, due dates and line items

Usage:
    from learnhub.pricing import resolve_effective_pricing, compute_activation

    pricing = resolve_effective_pricing(course_default, company_wide, course_specific)
    calculation = compute_activation(is_renewal=False, seat_count=20, pricing=pricing)
"""

from .models import (
    ActivationClassification,
    ActivationRecord,
    CoursePricingTier,
    EffectivePricing,
    InvoiceLine,
    PricingCalculation,
    PricingOverrideTier,
)
from .resolver import resolve_effective_pricing
from .calculator import compute_activation, normalize_tax_rate, validate_seat_count
from .classifier import (
    activation_expiry,
    classify_activation,
    effective_status,
    ensure_can_activate,
)
from .invoicing import build_invoice_items, format_invoice_number, invoice_due_date

__all__ = [
    "ActivationClassification",
    "ActivationRecord",
    "CoursePricingTier",
    "EffectivePricing",
    "InvoiceLine",
    "PricingCalculation",
    "PricingOverrideTier",
    "resolve_effective_pricing",
    "compute_activation",
    "normalize_tax_rate",
    "validate_seat_count",
    "activation_expiry",
    "classify_activation",
    "effective_status",
    "ensure_can_activate",
    "build_invoice_items",
    "format_invoice_number",
    "invoice_due_date",
]
