"""
Typed workflow failures.

Every rejected operation raises a ClinicError subclass carrying a stable
`code` and a `details` dict, so a driver can decide how to render it
without parsing messages. None of these are fatal, and none leave
partial state behind.
"""

from decimal import Decimal
from typing import Any, Dict, Optional


class ClinicError(Exception):
    """Base class for all recoverable workflow failures."""

    code = "clinic_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class NotFoundError(ClinicError):
    code = "not_found"

    def __init__(self, kind: str, entity_id: str):
        super().__init__(
            f"{kind.capitalize()} '{entity_id}' does not exist",
            {"kind": kind, "id": entity_id},
        )
        self.kind = kind
        self.entity_id = entity_id


class SlotConflictError(ClinicError):
    code = "slot_conflict"

    def __init__(self, doctor_id: str, slot, conflicting_appointment_id: str):
        super().__init__(
            f"Doctor '{doctor_id}' is already booked at {slot:%Y-%m-%d %H:%M}",
            {
                "doctor_id": doctor_id,
                "slot": slot.isoformat(),
                "conflicting_appointment_id": conflicting_appointment_id,
            },
        )


class InvalidTransitionError(ClinicError):
    code = "invalid_transition"

    def __init__(self, appointment_id: str, current: str, target: str):
        super().__init__(
            f"Appointment '{appointment_id}' cannot move from {current} to {target}",
            {"appointment_id": appointment_id, "current": current, "target": target},
        )


class InvalidItemError(ClinicError):
    code = "invalid_item"

    def __init__(self, name: str, field: str, reason: str):
        super().__init__(
            f"Prescription item '{name}' rejected: {reason}",
            {"name": name, "field": field},
        )
        self.field = field


class InvalidFeeError(ClinicError):
    code = "invalid_fee"

    def __init__(self, fee: Any):
        super().__init__(f"Doctor fee must be a non-negative number (got {fee})", {"fee": str(fee)})


class InvalidRateError(ClinicError):
    code = "invalid_rate"

    def __init__(self, rate: Any):
        super().__init__(f"Tax rate must be a number between 0 and 1 (got {rate})", {"tax_rate": str(rate)})


class DuplicateInvoiceError(ClinicError):
    code = "duplicate_invoice"

    def __init__(self, consultation_id: str, invoice_id: str):
        super().__init__(
            f"Consultation '{consultation_id}' is already invoiced as '{invoice_id}'",
            {"consultation_id": consultation_id, "invoice_id": invoice_id},
        )


class AlreadyPaidError(ClinicError):
    code = "already_paid"

    def __init__(self, invoice_id: str):
        super().__init__(f"Invoice '{invoice_id}' is already settled", {"invoice_id": invoice_id})


class AmountMismatchError(ClinicError):
    code = "amount_mismatch"

    def __init__(self, invoice_id: str, expected: Decimal, offered: Any):
        super().__init__(
            f"Payment of {offered} does not settle invoice '{invoice_id}' (total {expected})",
            {"invoice_id": invoice_id, "expected": str(expected), "offered": str(offered)},
        )
        self.expected = expected
        self.offered = offered
