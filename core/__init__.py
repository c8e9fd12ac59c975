"""
Core Framework for the Clinic Workflow Engine.

This module provides the base classes and interfaces the clinic
rules are built on. The layered architecture ensures:

1. Domain Layer - Business rules expressed as policies, validators and services
2. Data Layer - Repository pattern for data access

The HTTP driver in main.py sits on top and never reaches past the
clinic workflow facade.
"""

from .domain import (
    DomainService,
    PolicyDecision,
    PolicyEngine,
    PolicyResult,
    ValidationError,
    Validator,
)
from .data import InMemoryRepository, LockingUnitOfWork, Repository, UnitOfWork

__all__ = [
    # Domain
    "DomainService",
    "PolicyDecision",
    "PolicyEngine",
    "PolicyResult",
    "ValidationError",
    "Validator",
    # Data
    "Repository",
    "InMemoryRepository",
    "UnitOfWork",
    "LockingUnitOfWork",
]
