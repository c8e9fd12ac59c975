"""
Clinic Repository.

One table per entity kind, each a core.data.Repository. The workflow
rules only ever talk to ClinicRepository, so swapping the in-memory
tables for Cosmos DB containers (see cosmos_store.py) changes nothing above.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from core.data import InMemoryRepository, Repository

from .errors import NotFoundError
from .models import Appointment, Consultation, Doctor, Invoice, Patient, Payment


class EntityKind(Enum):
    """Entity kinds, valued by their logical container name."""
    PATIENT = "patients"
    DOCTOR = "doctors"
    APPOINTMENT = "appointments"
    CONSULTATION = "consultations"
    INVOICE = "invoices"
    PAYMENT = "payments"

    @property
    def label(self) -> str:
        return self.name.lower()


ENTITY_TYPES = {
    EntityKind.PATIENT: Patient,
    EntityKind.DOCTOR: Doctor,
    EntityKind.APPOINTMENT: Appointment,
    EntityKind.CONSULTATION: Consultation,
    EntityKind.INVOICE: Invoice,
    EntityKind.PAYMENT: Payment,
}


class ClinicRepository:
    """Keyed storage for every entity kind of the clinic."""

    def __init__(self, tables: Dict[EntityKind, Repository]):
        missing = set(EntityKind) - set(tables)
        if missing:
            raise ValueError(f"Missing tables for: {sorted(k.value for k in missing)}")
        self._tables = tables

    @classmethod
    def in_memory(cls) -> "ClinicRepository":
        return cls({kind: InMemoryRepository() for kind in EntityKind})

    def table(self, kind: EntityKind) -> Repository:
        return self._tables[kind]

    def put(self, kind: EntityKind, entity: Any) -> Any:
        return self._tables[kind].save(entity)

    def get(self, kind: EntityKind, entity_id: str) -> Optional[Any]:
        return self._tables[kind].get_by_id(entity_id)

    def require(self, kind: EntityKind, entity_id: str) -> Any:
        """Like get(), but a missing id raises NotFoundError."""
        entity = self._tables[kind].get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(kind.label, entity_id)
        return entity

    def list_all(self, kind: EntityKind) -> List[Any]:
        return self._tables[kind].list_all()

    def exists(self, kind: EntityKind, predicate: Callable[[Any], bool]) -> bool:
        return self._tables[kind].exists(predicate)

    def find(self, kind: EntityKind, predicate: Callable[[Any], bool]) -> List[Any]:
        return self._tables[kind].find(predicate)
