"""
Global test fixtures for pytest.

Provides reusable fixtures for workflow testing:
- A fresh in-memory clinic with predictable ids and a fixed clock
- Registered patient and doctor records
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from clinic import ClinicRepository, ClinicWorkflow
from clinic.identifiers import SequentialIdGenerator

FIXED_NOW = datetime(2026, 10, 16, 9, 30, tzinfo=timezone.utc)


# ============================================================================
# Workflow
# ============================================================================

@pytest.fixture
def repository():
    """Empty in-memory repository."""
    return ClinicRepository.in_memory()


@pytest.fixture
def clinic(repository):
    """Workflow over the in-memory repository with deterministic ids and time."""
    return ClinicWorkflow(
        repository,
        ids=SequentialIdGenerator(),
        clock=lambda: FIXED_NOW,
    )


# ============================================================================
# Entities
# ============================================================================

@pytest.fixture
def patient(clinic):
    return clinic.register_patient(
        "Asha Rao",
        phone="555-0101",
        email="asha.rao@example.com",
        date_of_birth="1988-04-12",
    )


@pytest.fixture
def other_patient(clinic):
    return clinic.register_patient("Daniel Kim")


@pytest.fixture
def doctor(clinic):
    """General practitioner charging 500.00 per consultation."""
    return clinic.register_doctor("Dr. Meera Iyer", "General Medicine", Decimal("500.00"))


@pytest.fixture
def slot():
    return datetime(2026, 11, 2, 10, 0)


@pytest.fixture
def appointment(clinic, patient, doctor, slot):
    return clinic.schedule_appointment(patient.id, doctor.id, slot)
