"""
Clinic workflow facade.

The single entry point a driver uses. It wires one repository, one id
source and one clock into every rule, and runs each mutating operation
inside a unit of work so no two operations interleave.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from core.data import LockingUnitOfWork, UnitOfWork

from .domain.services import (
    AppointmentScheduler,
    Clock,
    ConsultationRecorder,
    DoctorRegistrar,
    InvoiceGenerator,
    PatientRegistrar,
    PaymentRecorder,
    RecordedConsultation,
    utc_now,
)
from .identifiers import IdGenerator, SequentialIdGenerator
from .models import Appointment, Doctor, Invoice, MoneyLike, Patient, Payment, PrescriptionItem
from .reporting import AppointmentRow, ClinicReports, DueRow, InvoiceBreakdown
from .repository import ClinicRepository, EntityKind


class ClinicWorkflow:
    """Registration, scheduling, consultation, billing and payment for one clinic."""

    def __init__(
        self,
        repository: Optional[ClinicRepository] = None,
        ids: Optional[IdGenerator] = None,
        clock: Clock = utc_now,
        unit_of_work: Optional[UnitOfWork] = None,
    ):
        self.repository = repository or ClinicRepository.in_memory()
        self.ids = ids or SequentialIdGenerator.seeded_from(self.repository)
        self.unit_of_work = unit_of_work or LockingUnitOfWork()

        self._patients = PatientRegistrar(self.repository, self.ids)
        self._doctors = DoctorRegistrar(self.repository, self.ids)
        self._scheduler = AppointmentScheduler(self.repository, self.ids)
        self._consultations = ConsultationRecorder(self.repository, self.ids)
        self._invoices = InvoiceGenerator(self.repository, self.ids)
        self._payments = PaymentRecorder(self.repository, self.ids, clock)
        self.reports = ClinicReports(self.repository)

    # =========================================================================
    # WORKFLOW OPERATIONS
    # =========================================================================

    def register_patient(self, name: str, phone: str = "", email: str = "", date_of_birth: str = "") -> Patient:
        with self.unit_of_work:
            return self._patients.execute(name, phone=phone, email=email, date_of_birth=date_of_birth)

    def register_doctor(
        self,
        name: str,
        specialization: str,
        fee: MoneyLike,
        phone: str = "",
        email: str = "",
    ) -> Doctor:
        with self.unit_of_work:
            return self._doctors.execute(name, specialization, fee, phone=phone, email=email)

    def schedule_appointment(self, patient_id: str, doctor_id: str, slot: datetime) -> Appointment:
        with self.unit_of_work:
            return self._scheduler.execute(patient_id, doctor_id, slot)

    def cancel_appointment(self, appointment_id: str) -> Appointment:
        with self.unit_of_work:
            return self._scheduler.cancel(appointment_id)

    def record_consultation(
        self,
        appointment_id: str,
        notes: str = "",
        prescription_items: Iterable[PrescriptionItem] = (),
    ) -> RecordedConsultation:
        with self.unit_of_work:
            return self._consultations.execute(appointment_id, notes, prescription_items)

    def generate_invoice(self, consultation_id: str, tax_rate: MoneyLike) -> Invoice:
        with self.unit_of_work:
            return self._invoices.execute(consultation_id, tax_rate)

    def record_payment(self, invoice_id: str, amount: MoneyLike) -> Payment:
        with self.unit_of_work:
            return self._payments.execute(invoice_id, amount)

    # =========================================================================
    # QUERIES
    # =========================================================================

    # Reports join several tables, so they read under the writer lock
    def list_appointments(self) -> List[AppointmentRow]:
        with self.unit_of_work:
            return self.reports.list_appointments()

    def outstanding_dues(self) -> List[DueRow]:
        with self.unit_of_work:
            return self.reports.outstanding_dues()

    def invoice_breakdown(self, invoice_id: str) -> InvoiceBreakdown:
        return self.reports.invoice_breakdown(invoice_id)

    def list_patients(self) -> List[Patient]:
        return self.repository.list_all(EntityKind.PATIENT)

    def list_doctors(self) -> List[Doctor]:
        return self.repository.list_all(EntityKind.DOCTOR)

    def list_payments(self) -> List[Payment]:
        return self.repository.list_all(EntityKind.PAYMENT)
