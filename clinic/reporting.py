"""
Read-side projections over the clinic repository.

Nothing here writes; every report can be called any number of times and
reflects the repository as it is at the moment of the call.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List

from .models import Invoice, format_money
from .repository import ClinicRepository, EntityKind

SLOT_FORMAT = "%Y-%m-%d %H:%M"


@dataclass
class AppointmentRow:
    appointment_id: str
    patient_name: str
    doctor_name: str
    slot: str
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "appointment_id": self.appointment_id,
            "patient_name": self.patient_name,
            "doctor_name": self.doctor_name,
            "slot": self.slot,
            "status": self.status,
        }


@dataclass
class DueRow:
    invoice_id: str
    consultation_id: str
    patient_name: str
    doctor_name: str
    total: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "consultation_id": self.consultation_id,
            "patient_name": self.patient_name,
            "doctor_name": self.doctor_name,
            "total": format_money(self.total),
        }


@dataclass
class InvoiceBreakdown:
    """Every figure on an invoice, derived ones included."""
    invoice_id: str
    consultation_id: str
    consultation_fee: Decimal
    items_total: Decimal
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    total: Decimal
    closed: bool

    @classmethod
    def of(cls, invoice: Invoice) -> "InvoiceBreakdown":
        return cls(
            invoice_id=invoice.id,
            consultation_id=invoice.consultation_id,
            consultation_fee=invoice.consultation_fee,
            items_total=invoice.items_total,
            subtotal=invoice.subtotal,
            tax_rate=invoice.tax_rate,
            tax=invoice.tax,
            total=invoice.total,
            closed=invoice.closed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "consultation_id": self.consultation_id,
            "consultation_fee": format_money(self.consultation_fee),
            "items_total": format_money(self.items_total),
            "subtotal": format_money(self.subtotal),
            "tax_rate": str(self.tax_rate),
            "tax": format_money(self.tax),
            "total": format_money(self.total),
            "closed": self.closed,
        }


class ClinicReports:
    """Projections used by the driver's listing screens."""

    def __init__(self, repository: ClinicRepository):
        self.repository = repository

    def list_appointments(self) -> List[AppointmentRow]:
        rows = []
        for appointment in self.repository.list_all(EntityKind.APPOINTMENT):
            patient = self.repository.require(EntityKind.PATIENT, appointment.patient_id)
            doctor = self.repository.require(EntityKind.DOCTOR, appointment.doctor_id)
            rows.append(AppointmentRow(
                appointment_id=appointment.id,
                patient_name=patient.name,
                doctor_name=doctor.name,
                slot=appointment.slot.strftime(SLOT_FORMAT),
                status=appointment.status.value,
            ))
        return rows

    def outstanding_dues(self) -> List[DueRow]:
        rows = []
        for invoice in self.repository.list_all(EntityKind.INVOICE):
            if invoice.closed:
                continue
            consultation = self.repository.require(EntityKind.CONSULTATION, invoice.consultation_id)
            appointment = self.repository.require(EntityKind.APPOINTMENT, consultation.appointment_id)
            patient = self.repository.require(EntityKind.PATIENT, appointment.patient_id)
            doctor = self.repository.require(EntityKind.DOCTOR, appointment.doctor_id)
            rows.append(DueRow(
                invoice_id=invoice.id,
                consultation_id=consultation.id,
                patient_name=patient.name,
                doctor_name=doctor.name,
                total=invoice.total,
            ))
        return rows

    def invoice_breakdown(self, invoice_id: str) -> InvoiceBreakdown:
        return InvoiceBreakdown.of(self.repository.require(EntityKind.INVOICE, invoice_id))
