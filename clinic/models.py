"""
Clinic Entities.

Plain dataclasses for every entity kind the workflow manages. Each entity
converts to and from a JSON-safe dictionary for persistence and rendering:
money is written as a decimal string and datetimes as ISO-8601.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, List, Optional, Union

CENT = Decimal("0.01")

MoneyLike = Union[Decimal, int, float, str]


def to_decimal(value: MoneyLike) -> Decimal:
    """Convert a number to Decimal without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def finite_decimal(value: Any) -> Optional[Decimal]:
    """Like to_decimal, but None for anything that is not a finite number."""
    if isinstance(value, bool):
        return None
    try:
        number = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    return number if number.is_finite() else None


def format_money(value: Decimal) -> str:
    """Render an amount with two decimal places, rounding half up."""
    return str(value.quantize(CENT, rounding=ROUND_HALF_UP))


def normalize_slot(slot: datetime) -> datetime:
    """Slots are compared at minute precision."""
    return slot.replace(second=0, microsecond=0)


class AppointmentStatus(Enum):
    """Lifecycle of an appointment. Transitions only move forward."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Patient:
    id: str
    name: str
    phone: str = ""
    email: str = ""
    date_of_birth: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "date_of_birth": self.date_of_birth,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Patient":
        return cls(
            id=data["id"],
            name=data["name"],
            phone=data.get("phone", ""),
            email=data.get("email", ""),
            date_of_birth=data.get("date_of_birth", ""),
        )


@dataclass(frozen=True)
class Doctor:
    id: str
    name: str
    specialization: str
    fee: Decimal
    phone: str = ""
    email: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "specialization": self.specialization,
            "fee": str(self.fee),
            "phone": self.phone,
            "email": self.email,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Doctor":
        return cls(
            id=data["id"],
            name=data["name"],
            specialization=data.get("specialization", ""),
            fee=Decimal(data["fee"]),
            phone=data.get("phone", ""),
            email=data.get("email", ""),
        )


@dataclass
class Appointment:
    """
    A booked slot between one patient and one doctor.

    Only `status` changes after creation.
    """
    id: str
    patient_id: str
    doctor_id: str
    slot: datetime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED

    @property
    def is_scheduled(self) -> bool:
        return self.status == AppointmentStatus.SCHEDULED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "patient_id": self.patient_id,
            "doctor_id": self.doctor_id,
            "slot": self.slot.isoformat(),
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Appointment":
        return cls(
            id=data["id"],
            patient_id=data["patient_id"],
            doctor_id=data["doctor_id"],
            slot=datetime.fromisoformat(data["slot"]),
            status=AppointmentStatus(data["status"]),
        )


@dataclass(frozen=True)
class PrescriptionItem:
    """A prescribed line: quantity units of a medicine at a unit price."""
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrescriptionItem":
        return cls(
            name=data["name"],
            quantity=int(data["quantity"]),
            unit_price=Decimal(data["unit_price"]),
        )


@dataclass
class Consultation:
    id: str
    appointment_id: str
    notes: str = ""
    prescriptions: List[PrescriptionItem] = field(default_factory=list)

    @property
    def items_total(self) -> Decimal:
        return sum((item.line_total for item in self.prescriptions), Decimal("0"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "appointment_id": self.appointment_id,
            "notes": self.notes,
            "prescriptions": [item.to_dict() for item in self.prescriptions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Consultation":
        return cls(
            id=data["id"],
            appointment_id=data["appointment_id"],
            notes=data.get("notes", ""),
            prescriptions=[PrescriptionItem.from_dict(p) for p in data.get("prescriptions", [])],
        )


@dataclass
class Invoice:
    """
    Bill for one consultation.

    Only the snapshot fields are stored. Subtotal, tax and total are
    recomputed from them on every access.
    """
    id: str
    consultation_id: str
    consultation_fee: Decimal
    items_total: Decimal
    tax_rate: Decimal
    closed: bool = False

    @property
    def subtotal(self) -> Decimal:
        return self.consultation_fee + self.items_total

    @property
    def tax(self) -> Decimal:
        return self.subtotal * self.tax_rate

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "consultation_id": self.consultation_id,
            "consultation_fee": str(self.consultation_fee),
            "items_total": str(self.items_total),
            "tax_rate": str(self.tax_rate),
            "closed": self.closed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Invoice":
        return cls(
            id=data["id"],
            consultation_id=data["consultation_id"],
            consultation_fee=Decimal(data["consultation_fee"]),
            items_total=Decimal(data["items_total"]),
            tax_rate=Decimal(data["tax_rate"]),
            closed=bool(data.get("closed", False)),
        )


@dataclass(frozen=True)
class Payment:
    id: str
    invoice_id: str
    amount: Decimal
    paid_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "invoice_id": self.invoice_id,
            "amount": str(self.amount),
            "paid_at": self.paid_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Payment":
        return cls(
            id=data["id"],
            invoice_id=data["invoice_id"],
            amount=Decimal(data["amount"]),
            paid_at=datetime.fromisoformat(data["paid_at"]),
        )
