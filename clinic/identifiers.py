"""
Identifier generation.

Ids only need to be unique within an entity kind. The generator is
injected into the workflow so tests can use predictable sequences.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from .repository import ClinicRepository, EntityKind

ID_PREFIXES = {
    EntityKind.PATIENT: "PAT",
    EntityKind.DOCTOR: "DOC",
    EntityKind.APPOINTMENT: "APT",
    EntityKind.CONSULTATION: "CON",
    EntityKind.INVOICE: "INV",
    EntityKind.PAYMENT: "PAY",
}


class IdGenerator(ABC):
    """Source of fresh ids, one sequence per entity kind."""

    @abstractmethod
    def next_id(self, kind: EntityKind) -> str:
        pass


class SequentialIdGenerator(IdGenerator):
    """
    Monotonic counters per kind: APT-0001, APT-0002, ...

    Counters start at zero unless seeded, e.g. from a durable
    repository that already holds entities.
    """

    def __init__(self, start: Optional[Dict[EntityKind, int]] = None):
        self._counters = {kind: 0 for kind in EntityKind}
        if start:
            self._counters.update(start)

    @classmethod
    def seeded_from(cls, repository: ClinicRepository) -> "SequentialIdGenerator":
        return cls({kind: len(repository.list_all(kind)) for kind in EntityKind})

    def next_id(self, kind: EntityKind) -> str:
        self._counters[kind] += 1
        return f"{ID_PREFIXES[kind]}-{self._counters[kind]:04d}"
