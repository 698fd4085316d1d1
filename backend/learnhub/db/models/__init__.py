from learnhub.db.models.company import Company
from learnhub.db.models.profile import Profile
from learnhub.db.models.course import Course
from learnhub.db.models.pricing import CoursePricing, CompanyPricingOverride
from learnhub.db.models.activation import CourseActivation
from learnhub.db.models.invoice import Invoice, InvoiceItem, InvoiceSequence
from learnhub.db.models.payment import Payment

__all__ = [
    "Company",
    "Profile",
    "Course",
    "CoursePricing",
    "CompanyPricingOverride",
    "CourseActivation",
    "Invoice",
    "InvoiceItem",
    "InvoiceSequence",
    "Payment",
]
