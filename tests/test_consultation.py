"""
Consultation rule tests.

Tests cover:
1. Recording completes the appointment and stores the consultation
2. Status is forced to COMPLETED from any prior status
3. Invalid prescription lines are rejected one by one, never aborting
4. Unknown appointments are rejected with nothing stored
5. Unit prices given as int, float or string are stored as Decimal
"""
from decimal import Decimal

import pytest

from clinic import EntityKind
from clinic.errors import InvalidItemError, NotFoundError
from clinic.models import AppointmentStatus, PrescriptionItem


def test_record_completes_appointment(clinic, appointment):
    items = [
        PrescriptionItem("Paracetamol", 10, Decimal("5.00")),
        PrescriptionItem("Cough syrup", 1, Decimal("85.50")),
    ]

    recorded = clinic.record_consultation(appointment.id, "Seasonal flu", items)

    consultation = recorded.consultation
    assert consultation.id == "CON-0001"
    assert consultation.appointment_id == appointment.id
    assert consultation.notes == "Seasonal flu"
    assert consultation.prescriptions == items
    assert recorded.all_items_accepted
    assert clinic.repository.get(EntityKind.APPOINTMENT, appointment.id).status == AppointmentStatus.COMPLETED


def test_consultation_without_prescriptions(clinic, appointment):
    recorded = clinic.record_consultation(appointment.id, "All clear")

    assert recorded.consultation.prescriptions == []
    assert recorded.consultation.items_total == Decimal("0")


def test_cancelled_appointment_is_forced_to_completed(clinic, appointment):
    clinic.cancel_appointment(appointment.id)

    clinic.record_consultation(appointment.id, "Walked in anyway")

    assert clinic.repository.get(EntityKind.APPOINTMENT, appointment.id).status == AppointmentStatus.COMPLETED


def test_completed_appointment_can_be_recorded_again(clinic, appointment):
    first = clinic.record_consultation(appointment.id, "First visit")
    second = clinic.record_consultation(appointment.id, "Follow-up notes")

    assert first.consultation.id != second.consultation.id
    assert len(clinic.repository.list_all(EntityKind.CONSULTATION)) == 2


@pytest.mark.parametrize(
    "item, field",
    [
        (PrescriptionItem("Zero", 0, Decimal("5.00")), "quantity"),
        (PrescriptionItem("Negative qty", -2, Decimal("5.00")), "quantity"),
        (PrescriptionItem("Negative price", 1, Decimal("-0.01")), "unit_price"),
    ],
)
def test_invalid_item_rejected_without_aborting(clinic, appointment, item, field):
    good = PrescriptionItem("Paracetamol", 10, Decimal("5.00"))

    recorded = clinic.record_consultation(appointment.id, "Mixed", [item, good])

    assert recorded.consultation.prescriptions == [good]
    assert len(recorded.rejected_items) == 1
    error = recorded.rejected_items[0]
    assert isinstance(error, InvalidItemError)
    assert error.field == field
    assert error.details["name"] == item.name


def test_free_items_are_valid(clinic, appointment):
    sample = PrescriptionItem("Sample pack", 2, Decimal("0"))

    recorded = clinic.record_consultation(appointment.id, "", [sample])

    assert recorded.consultation.prescriptions == [sample]


def test_valid_items_keep_input_order(clinic, appointment):
    items = [
        PrescriptionItem("C", 1, Decimal("1")),
        PrescriptionItem("bad", 0, Decimal("1")),
        PrescriptionItem("A", 1, Decimal("1")),
        PrescriptionItem("B", 1, Decimal("1")),
    ]

    recorded = clinic.record_consultation(appointment.id, "", items)

    assert [i.name for i in recorded.consultation.prescriptions] == ["C", "A", "B"]


def test_unknown_appointment_rejected(clinic):
    with pytest.raises(NotFoundError):
        clinic.record_consultation("APT-4040", "Nobody here")

    assert clinic.repository.list_all(EntityKind.CONSULTATION) == []


@pytest.mark.parametrize("price, expected", [(5, Decimal("5")), (5.0, Decimal("5.0")), ("5.00", Decimal("5.00"))])
def test_plain_number_prices_are_accepted(clinic, appointment, price, expected):
    recorded = clinic.record_consultation(appointment.id, "", [PrescriptionItem("Paracetamol", 10, price)])

    assert recorded.all_items_accepted
    stored = recorded.consultation.prescriptions[0]
    assert stored.unit_price == expected
    assert isinstance(stored.unit_price, Decimal)
    assert recorded.consultation.items_total == Decimal("50")


@pytest.mark.parametrize("price", [float("nan"), "NaN", Decimal("Infinity"), "five", None])
def test_non_numeric_price_rejected(clinic, appointment, price):
    recorded = clinic.record_consultation(appointment.id, "", [PrescriptionItem("Odd", 1, price)])

    assert recorded.consultation.prescriptions == []
    assert [error.field for error in recorded.rejected_items] == ["unit_price"]
