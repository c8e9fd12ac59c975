"""
Clinic Domain Services.

One service per workflow step. Each service reads what it needs from the
repository, asks its policies for a decision, and only writes once every
check has passed, so a rejected step never leaves partial state behind.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Iterable, List

from core.domain import DomainService

from ..errors import (
    AlreadyPaidError,
    AmountMismatchError,
    DuplicateInvoiceError,
    InvalidFeeError,
    InvalidItemError,
    InvalidRateError,
    InvalidTransitionError,
    SlotConflictError,
)
from ..identifiers import IdGenerator
from ..models import (
    Appointment,
    AppointmentStatus,
    Consultation,
    Doctor,
    Invoice,
    MoneyLike,
    Patient,
    Payment,
    PrescriptionItem,
    finite_decimal,
    normalize_slot,
)
from ..repository import ClinicRepository, EntityKind
from .policies import (
    PrescriptionItemValidator,
    SettlementContext,
    SettlementPolicy,
    SlotAvailabilityPolicy,
    SlotContext,
    TaxRatePolicy,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# SERVICE RESULTS
# =============================================================================

@dataclass
class RecordedConsultation:
    """A stored consultation plus the prescription lines that were turned away."""
    consultation: Consultation
    rejected_items: List[InvalidItemError] = field(default_factory=list)

    @property
    def all_items_accepted(self) -> bool:
        return not self.rejected_items


# =============================================================================
# DOMAIN SERVICES
# =============================================================================

class PatientRegistrar(DomainService):
    """Registers patients."""

    def __init__(self, repository: ClinicRepository, ids: IdGenerator):
        self.repository = repository
        self.ids = ids

    def execute(self, name: str, phone: str = "", email: str = "", date_of_birth: str = "") -> Patient:
        patient = Patient(
            id=self.ids.next_id(EntityKind.PATIENT),
            name=name,
            phone=phone,
            email=email,
            date_of_birth=date_of_birth,
        )
        self.repository.put(EntityKind.PATIENT, patient)
        logger.info(f"Registered patient {patient.id} ({patient.name})")
        return patient


class DoctorRegistrar(DomainService):
    """Registers doctors. The consultation fee may not be negative."""

    def __init__(self, repository: ClinicRepository, ids: IdGenerator):
        self.repository = repository
        self.ids = ids

    def execute(
        self,
        name: str,
        specialization: str,
        fee: MoneyLike,
        phone: str = "",
        email: str = "",
    ) -> Doctor:
        checked_fee = finite_decimal(fee)
        if checked_fee is None or checked_fee < 0:
            logger.warning(f"Rejected doctor registration for {name}: fee {fee!r}")
            raise InvalidFeeError(fee)

        doctor = Doctor(
            id=self.ids.next_id(EntityKind.DOCTOR),
            name=name,
            specialization=specialization,
            fee=checked_fee,
            phone=phone,
            email=email,
        )
        self.repository.put(EntityKind.DOCTOR, doctor)
        logger.info(f"Registered doctor {doctor.id} ({doctor.name}, {doctor.specialization})")
        return doctor


class AppointmentScheduler(DomainService):
    """
    Books appointments and cancels them.

    The caller must run execute() inside a unit of work: the conflict
    check and the insert have to happen as one step.
    """

    def __init__(self, repository: ClinicRepository, ids: IdGenerator):
        self.repository = repository
        self.ids = ids
        self.policy = SlotAvailabilityPolicy()

    def execute(self, patient_id: str, doctor_id: str, slot: datetime) -> Appointment:
        self.repository.require(EntityKind.PATIENT, patient_id)
        self.repository.require(EntityKind.DOCTOR, doctor_id)
        slot = normalize_slot(slot)

        context = SlotContext(
            doctor_id=doctor_id,
            requested_slot=slot,
            existing_appointments=self.repository.find(
                EntityKind.APPOINTMENT, lambda a: a.doctor_id == doctor_id
            ),
        )
        decision = self.policy.evaluate(context)
        if decision.is_denied:
            logger.warning(f"Slot conflict for doctor {doctor_id} at {slot}: {decision.reason}")
            raise SlotConflictError(doctor_id, slot, decision.metadata["conflicting_appointment"])

        appointment = Appointment(
            id=self.ids.next_id(EntityKind.APPOINTMENT),
            patient_id=patient_id,
            doctor_id=doctor_id,
            slot=slot,
        )
        self.repository.put(EntityKind.APPOINTMENT, appointment)
        logger.info(f"Scheduled appointment {appointment.id}: patient {patient_id} with doctor {doctor_id} at {slot}")
        return appointment

    def cancel(self, appointment_id: str) -> Appointment:
        """Cancel a SCHEDULED appointment, freeing its slot."""
        appointment = self.repository.require(EntityKind.APPOINTMENT, appointment_id)
        if not appointment.is_scheduled:
            raise InvalidTransitionError(
                appointment_id, appointment.status.value, AppointmentStatus.CANCELLED.value
            )

        appointment.status = AppointmentStatus.CANCELLED
        self.repository.put(EntityKind.APPOINTMENT, appointment)
        logger.info(f"Cancelled appointment {appointment_id}")
        return appointment


class ConsultationRecorder(DomainService):
    """
    Records the outcome of an appointment.

    The appointment is marked COMPLETED whatever its previous status was,
    including CANCELLED or an already COMPLETED one. Invalid prescription
    lines are dropped and reported; they never abort the consultation.
    """

    def __init__(self, repository: ClinicRepository, ids: IdGenerator):
        self.repository = repository
        self.ids = ids
        self.item_validator = PrescriptionItemValidator()

    def execute(
        self,
        appointment_id: str,
        notes: str = "",
        prescription_items: Iterable[PrescriptionItem] = (),
    ) -> RecordedConsultation:
        appointment = self.repository.require(EntityKind.APPOINTMENT, appointment_id)

        accepted: List[PrescriptionItem] = []
        rejected: List[InvalidItemError] = []
        for item in prescription_items:
            errors = self.item_validator.validate(item)
            if errors:
                first = errors[0]
                logger.warning(f"Rejected prescription item {item.name!r}: {first.message}")
                rejected.append(InvalidItemError(item.name, first.field, first.message))
                continue
            accepted.append(replace(item, unit_price=finite_decimal(item.unit_price)))

        if appointment.status != AppointmentStatus.COMPLETED:
            logger.info(f"Appointment {appointment_id} moves from {appointment.status.value} to completed")
        appointment.status = AppointmentStatus.COMPLETED
        self.repository.put(EntityKind.APPOINTMENT, appointment)

        consultation = Consultation(
            id=self.ids.next_id(EntityKind.CONSULTATION),
            appointment_id=appointment_id,
            notes=notes,
            prescriptions=accepted,
        )
        self.repository.put(EntityKind.CONSULTATION, consultation)
        logger.info(
            f"Recorded consultation {consultation.id} for appointment {appointment_id} "
            f"with {len(accepted)} prescription item(s)"
        )
        return RecordedConsultation(consultation=consultation, rejected_items=rejected)


class InvoiceGenerator(DomainService):
    """
    Bills a consultation.

    The doctor's fee and the prescription total are copied into the
    invoice at generation time; later changes to either do not affect it.
    """

    def __init__(self, repository: ClinicRepository, ids: IdGenerator):
        self.repository = repository
        self.ids = ids
        self.rate_policy = TaxRatePolicy()

    def execute(self, consultation_id: str, tax_rate: MoneyLike) -> Invoice:
        rate = finite_decimal(tax_rate)
        if rate is None or self.rate_policy.evaluate(rate).is_denied:
            logger.warning(f"Rejected tax rate {tax_rate!r} for consultation {consultation_id}")
            raise InvalidRateError(tax_rate)

        consultation = self.repository.require(EntityKind.CONSULTATION, consultation_id)
        existing = self.repository.find(EntityKind.INVOICE, lambda i: i.consultation_id == consultation_id)
        if existing:
            logger.warning(f"Consultation {consultation_id} already invoiced as {existing[0].id}")
            raise DuplicateInvoiceError(consultation_id, existing[0].id)

        appointment = self.repository.require(EntityKind.APPOINTMENT, consultation.appointment_id)
        doctor = self.repository.require(EntityKind.DOCTOR, appointment.doctor_id)

        invoice = Invoice(
            id=self.ids.next_id(EntityKind.INVOICE),
            consultation_id=consultation_id,
            consultation_fee=doctor.fee,
            items_total=consultation.items_total,
            tax_rate=rate,
        )
        self.repository.put(EntityKind.INVOICE, invoice)
        logger.info(f"Generated invoice {invoice.id} for consultation {consultation_id}: total {invoice.total}")
        return invoice


class PaymentRecorder(DomainService):
    """Settles an open invoice with a single payment matching its total."""

    def __init__(self, repository: ClinicRepository, ids: IdGenerator, clock: Clock = utc_now):
        self.repository = repository
        self.ids = ids
        self.clock = clock
        self.policy = SettlementPolicy()

    def execute(self, invoice_id: str, amount: MoneyLike) -> Payment:
        invoice = self.repository.require(EntityKind.INVOICE, invoice_id)
        if invoice.closed:
            logger.warning(f"Payment refused: invoice {invoice_id} is already closed")
            raise AlreadyPaidError(invoice_id)

        offered = finite_decimal(amount)
        if offered is None or self.policy.evaluate(SettlementContext(invoice=invoice, amount=offered)).is_denied:
            logger.warning(f"Payment refused for invoice {invoice_id}: offered {amount!r}, expected {invoice.total}")
            raise AmountMismatchError(invoice_id, invoice.total, amount)

        payment = Payment(
            id=self.ids.next_id(EntityKind.PAYMENT),
            invoice_id=invoice_id,
            amount=offered,
            paid_at=self.clock(),
        )
        self.repository.put(EntityKind.PAYMENT, payment)
        invoice.closed = True
        self.repository.put(EntityKind.INVOICE, invoice)
        logger.info(f"Recorded payment {payment.id} of {offered}; invoice {invoice_id} closed")
        return payment
