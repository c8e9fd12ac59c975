"""
Reporting and registration tests.

Tests cover:
1. Appointment listing order and rendering
2. Outstanding dues exclude closed invoices
3. Reports are side-effect free
4. Doctor registration refuses negative or non-numeric fees
"""
from datetime import datetime
from decimal import Decimal

import pytest

from clinic.errors import InvalidFeeError, NotFoundError
from clinic.models import PrescriptionItem


def test_list_appointments_in_insertion_order(clinic, patient, other_patient, doctor):
    late = clinic.schedule_appointment(patient.id, doctor.id, datetime(2026, 11, 5, 16, 45))
    early = clinic.schedule_appointment(other_patient.id, doctor.id, datetime(2026, 11, 1, 8, 0))
    clinic.cancel_appointment(early.id)

    rows = clinic.list_appointments()

    assert [r.appointment_id for r in rows] == [late.id, early.id]
    assert rows[0].to_dict() == {
        "appointment_id": late.id,
        "patient_name": "Asha Rao",
        "doctor_name": "Dr. Meera Iyer",
        "slot": "2026-11-05 16:45",
        "status": "scheduled",
    }
    assert rows[1].patient_name == "Daniel Kim"
    assert rows[1].status == "cancelled"


def test_list_appointments_empty(clinic):
    assert clinic.list_appointments() == []


def test_outstanding_dues_lists_open_invoices(clinic, patient, doctor, appointment):
    consultation = clinic.record_consultation(
        appointment.id, "", [PrescriptionItem("Paracetamol", 10, Decimal("5.00"))]
    ).consultation
    invoice = clinic.generate_invoice(consultation.id, Decimal("0.12"))

    dues = clinic.outstanding_dues()

    assert len(dues) == 1
    assert dues[0].to_dict() == {
        "invoice_id": invoice.id,
        "consultation_id": consultation.id,
        "patient_name": "Asha Rao",
        "doctor_name": "Dr. Meera Iyer",
        "total": "616.00",
    }


def test_settled_invoice_leaves_dues(clinic, patient, other_patient, doctor, appointment):
    second = clinic.schedule_appointment(other_patient.id, doctor.id, datetime(2026, 11, 2, 11, 0))
    first_invoice = clinic.generate_invoice(
        clinic.record_consultation(appointment.id).consultation.id, Decimal("0.10")
    )
    second_invoice = clinic.generate_invoice(
        clinic.record_consultation(second.id).consultation.id, Decimal("0.10")
    )
    assert [d.invoice_id for d in clinic.outstanding_dues()] == [first_invoice.id, second_invoice.id]

    clinic.record_payment(first_invoice.id, Decimal("550.00"))

    assert [d.invoice_id for d in clinic.outstanding_dues()] == [second_invoice.id]


def test_reports_do_not_change_state(clinic, appointment):
    clinic.generate_invoice(clinic.record_consultation(appointment.id).consultation.id, Decimal("0"))

    first = [r.to_dict() for r in clinic.outstanding_dues()]
    second = [r.to_dict() for r in clinic.outstanding_dues()]

    assert first == second
    assert [r.to_dict() for r in clinic.list_appointments()] == [r.to_dict() for r in clinic.list_appointments()]


def test_breakdown_of_unknown_invoice(clinic):
    with pytest.raises(NotFoundError):
        clinic.invoice_breakdown("INV-4040")


def test_registration_listings(clinic, patient, other_patient, doctor):
    assert [p.id for p in clinic.list_patients()] == ["PAT-0001", "PAT-0002"]
    assert clinic.list_patients()[0].date_of_birth == "1988-04-12"
    assert [d.id for d in clinic.list_doctors()] == ["DOC-0001"]
    assert clinic.list_doctors()[0].fee == Decimal("500.00")


@pytest.mark.parametrize("fee", [Decimal("-1"), float("nan"), "free"])
def test_invalid_fee_rejected(clinic, fee):
    with pytest.raises(InvalidFeeError):
        clinic.register_doctor("Dr. Nobody", "None", fee)

    assert clinic.list_doctors() == []


def test_zero_fee_allowed(clinic):
    doctor = clinic.register_doctor("Dr. Pro Bono", "General Medicine", 0)

    assert doctor.fee == Decimal("0")
