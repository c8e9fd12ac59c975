"""
Clinic Workflow Use Case.

Patients book appointments with doctors; a completed appointment gets a
consultation, the consultation is invoiced and the invoice is settled
by one exact payment.

Structure:
- models.py: entities (Patient, Doctor, Appointment, Consultation, Invoice, Payment)
- errors.py: typed workflow failures
- repository.py: ClinicRepository, one table per entity kind
- identifiers.py: injectable id generation
- cosmos_store.py: Azure Cosmos DB tables
- domain/: policies and the per-step services
- reporting.py: read-side projections
- workflow.py: ClinicWorkflow, the facade drivers use
- schemas.py: request bodies for the HTTP driver
"""

from .workflow import ClinicWorkflow
from .repository import ClinicRepository, EntityKind

__all__ = [
    "ClinicWorkflow",
    "ClinicRepository",
    "EntityKind",
]
