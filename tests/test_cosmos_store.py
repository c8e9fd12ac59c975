"""
Cosmos DB backend tests.

Run against an in-process stand-in for a container client, so no Azure
account is needed. The stand-in answers the two queries the backend issues.
"""
from datetime import datetime
from decimal import Decimal

import pytest
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from clinic import ClinicRepository, ClinicWorkflow, EntityKind
from clinic.cosmos_store import CosmosRepository
from clinic.identifiers import SequentialIdGenerator
from clinic.models import AppointmentStatus, Patient, PrescriptionItem
from clinic.repository import ENTITY_TYPES


class FakeContainer:
    """Minimal container client: read_item, upsert_item and query_items."""

    def __init__(self):
        self.docs = {}
        self.upserts = 0

    def read_item(self, item, partition_key):
        assert item == partition_key
        if item not in self.docs:
            raise CosmosResourceNotFoundError(message="Not found")
        return dict(self.docs[item])

    def upsert_item(self, body):
        self.upserts += 1
        self.docs[body["id"]] = dict(body)
        return body

    def query_items(self, query, enable_cross_partition_query=False, **kwargs):
        if query == "SELECT VALUE MAX(c.seq) FROM c":
            return iter([max(d["seq"] for d in self.docs.values())] if self.docs else [])
        if query == "SELECT * FROM c ORDER BY c.seq":
            return iter(sorted((dict(d) for d in self.docs.values()), key=lambda d: d["seq"]))
        raise AssertionError(f"unexpected query: {query}")


@pytest.fixture
def containers():
    return {kind: FakeContainer() for kind in EntityKind}


@pytest.fixture
def cosmos_repository(containers):
    return ClinicRepository({
        kind: CosmosRepository(containers[kind], ENTITY_TYPES[kind]) for kind in EntityKind
    })


def test_save_assigns_increasing_seq():
    container = FakeContainer()
    table = CosmosRepository(container, Patient)

    table.save(Patient(id="PAT-0002", name="Ben"))
    table.save(Patient(id="PAT-0001", name="Asha"))

    assert container.docs["PAT-0002"]["seq"] == 1
    assert container.docs["PAT-0001"]["seq"] == 2
    assert [p.id for p in table.list_all()] == ["PAT-0002", "PAT-0001"]


def test_update_keeps_seq():
    container = FakeContainer()
    table = CosmosRepository(container, Patient)
    table.save(Patient(id="PAT-0001", name="Asha"))
    table.save(Patient(id="PAT-0002", name="Ben"))

    table.save(Patient(id="PAT-0001", name="Asha Rao"))

    assert container.docs["PAT-0001"]["seq"] == 1
    assert [p.name for p in table.list_all()] == ["Asha Rao", "Ben"]


def test_seq_continues_from_existing_documents():
    container = FakeContainer()
    container.docs["PAT-0007"] = {"id": "PAT-0007", "name": "Old", "seq": 7}
    table = CosmosRepository(container, Patient)

    table.save(Patient(id="PAT-0008", name="New"))

    assert container.docs["PAT-0008"]["seq"] == 8


def test_missing_document_reads_as_none():
    table = CosmosRepository(FakeContainer(), Patient)

    assert table.get_by_id("PAT-4040") is None


def test_full_workflow_over_cosmos_tables(cosmos_repository, containers):
    clinic = ClinicWorkflow(cosmos_repository, ids=SequentialIdGenerator())
    patient = clinic.register_patient("Asha Rao")
    doctor = clinic.register_doctor("Dr. Meera Iyer", "General Medicine", Decimal("500.00"))
    appointment = clinic.schedule_appointment(patient.id, doctor.id, datetime(2026, 11, 2, 10, 0))
    consultation = clinic.record_consultation(
        appointment.id, "Flu", [PrescriptionItem("Paracetamol", 10, Decimal("5.00"))]
    ).consultation
    invoice = clinic.generate_invoice(consultation.id, Decimal("0.12"))

    stored = cosmos_repository.get(EntityKind.INVOICE, invoice.id)
    assert stored is not invoice
    assert stored.total == Decimal("616.00")
    assert "total" not in containers[EntityKind.INVOICE].docs[invoice.id]

    clinic.record_payment(invoice.id, Decimal("616.00"))

    assert cosmos_repository.get(EntityKind.INVOICE, invoice.id).closed is True
    assert cosmos_repository.get(EntityKind.APPOINTMENT, appointment.id).status == AppointmentStatus.COMPLETED
    assert clinic.outstanding_dues() == []


def test_ids_seeded_from_cosmos_tables(cosmos_repository):
    ClinicWorkflow(cosmos_repository, ids=SequentialIdGenerator()).register_patient("Asha Rao")

    restarted = ClinicWorkflow(cosmos_repository)

    assert restarted.register_patient("Ben Ode").id == "PAT-0002"
