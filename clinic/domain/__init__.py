"""Clinic domain layer - workflow rules."""

from .policies import (
    PAYMENT_TOLERANCE,
    PrescriptionItemValidator,
    SettlementPolicy,
    SlotAvailabilityPolicy,
    TaxRatePolicy,
)
from .services import (
    AppointmentScheduler,
    ConsultationRecorder,
    DoctorRegistrar,
    InvoiceGenerator,
    PatientRegistrar,
    PaymentRecorder,
    RecordedConsultation,
    utc_now,
)

__all__ = [
    "PAYMENT_TOLERANCE",
    "PrescriptionItemValidator",
    "SettlementPolicy",
    "SlotAvailabilityPolicy",
    "TaxRatePolicy",
    "AppointmentScheduler",
    "ConsultationRecorder",
    "DoctorRegistrar",
    "InvoiceGenerator",
    "PatientRegistrar",
    "PaymentRecorder",
    "RecordedConsultation",
    "utc_now",
]
