"""Database models."""

from .email_log import DeliveryStatus, VendorPaymentEmailLog
from .vendor_payment import (
    VendorPaymentEntry,
    VendorPaymentEntryRead,
    VendorPaymentSubmission,
    VendorPaymentSubmissionRead,
)

__all__ = [
    "DeliveryStatus",
    "VendorPaymentEmailLog",
    "VendorPaymentEntry",
    "VendorPaymentEntryRead",
    "VendorPaymentSubmission",
    "VendorPaymentSubmissionRead",
]
