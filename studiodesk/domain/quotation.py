"""
Quotation statuses
"""
from enum import Enum


class QuotationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CONVERTED = "converted"


# Only open quotations can become events
CONVERTIBLE_STATUSES = (QuotationStatus.PENDING.value, QuotationStatus.ACCEPTED.value)

# Statuses a user may set by hand; CONVERTED is reached only through conversion
MANUAL_STATUSES = (
    QuotationStatus.PENDING,
    QuotationStatus.ACCEPTED,
    QuotationStatus.REJECTED,
)
