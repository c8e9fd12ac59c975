"""
Domain Layer Base Classes.

The domain layer contains the business rules of the clinic workflow.
Rules are kept free of driver concerns (HTTP, console, rendering) which makes them:
- Easy to test against an in-memory repository
- Reusable across different drivers
- Clear and self-documenting

Example Usage:
    class SlotAvailabilityPolicy(PolicyEngine):
        def evaluate(self, context) -> PolicyDecision:
            # Pure business logic here
            ...
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List
from enum import Enum


class PolicyResult(Enum):
    """Result of a policy evaluation."""
    APPROVED = "approved"
    DENIED = "denied"


@dataclass
class PolicyDecision:
    """
    The outcome of a policy evaluation.

    Attributes:
        result: The policy decision result
        reason: Human-readable explanation
        metadata: Additional context for the decision
    """
    result: PolicyResult
    reason: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_denied(self) -> bool:
        return self.result == PolicyResult.DENIED


class PolicyEngine(ABC):
    """
    Abstract base class for policy engines.

    A PolicyEngine encapsulates a set of business rules that can be
    evaluated against a context to produce a decision.

    Example:
        class SettlementPolicy(PolicyEngine):
            def evaluate(self, context) -> PolicyDecision:
                if abs(context.amount - context.total) > TOLERANCE:
                    return PolicyDecision(
                        result=PolicyResult.DENIED,
                        reason="Amount does not match the invoice total"
                    )
                return PolicyDecision(
                    result=PolicyResult.APPROVED,
                    reason="Invoice can be settled"
                )
    """

    @abstractmethod
    def evaluate(self, context: Any) -> PolicyDecision:
        """
        Evaluate the policy against the given context.

        Args:
            context: Object containing all data needed for evaluation

        Returns:
            PolicyDecision with the result and explanation
        """
        pass


class DomainService(ABC):
    """
    Abstract base class for domain services.

    Domain services contain business logic that doesn't belong to a single entity.
    They orchestrate policies and entities to perform one workflow step.

    Key principles:
    - No driver I/O (console, HTTP, rendering)
    - All dependencies (repository, id source, clock) passed in
    - Return domain objects, not DTOs
    - Validate completely before writing anything
    """

    @abstractmethod
    def execute(self, *args, **kwargs) -> Any:
        """
        Execute the domain service operation.
        """
        pass


@dataclass
class ValidationError:
    """A validation error with field and message."""
    field: str
    message: str
    code: str = "invalid"


class Validator(ABC):
    """
    Abstract base class for validators.

    Validators check that data meets business requirements before processing.
    """

    @abstractmethod
    def validate(self, data: Any) -> List[ValidationError]:
        """
        Validate the data and return any errors.

        Args:
            data: The data to validate

        Returns:
            List of ValidationError objects (empty if valid)
        """
        pass
