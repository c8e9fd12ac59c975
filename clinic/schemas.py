"""
Request models for the HTTP driver.

Pydantic handles type coercion at the edge; the business limits (positive
quantities, tax rate range, exact settlement) stay in the domain layer so
every driver gets the same typed failures.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from .models import PrescriptionItem


class PatientCreate(BaseModel):
    """Patient registration request."""
    name: str = Field(min_length=1)
    phone: str = ""
    email: str = ""
    date_of_birth: str = ""


class DoctorCreate(BaseModel):
    """Doctor registration request."""
    name: str = Field(min_length=1)
    specialization: str
    fee: Decimal
    phone: str = ""
    email: str = ""


class AppointmentCreate(BaseModel):
    """Appointment booking request."""
    patient_id: str
    doctor_id: str
    slot: datetime


class PrescriptionLine(BaseModel):
    name: str
    quantity: int
    unit_price: Decimal

    def to_item(self) -> PrescriptionItem:
        return PrescriptionItem(name=self.name, quantity=self.quantity, unit_price=self.unit_price)


class ConsultationCreate(BaseModel):
    """Consultation recording request."""
    appointment_id: str
    notes: str = ""
    prescriptions: List[PrescriptionLine] = Field(default_factory=list)


class InvoiceCreate(BaseModel):
    """Invoice generation request. Without a tax rate the configured default applies."""
    consultation_id: str
    tax_rate: Optional[Decimal] = None


class PaymentCreate(BaseModel):
    """Payment request."""
    invoice_id: str
    amount: Decimal
