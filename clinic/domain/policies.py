"""
Clinic Domain Policies.

Pure business rules for scheduling, prescribing, billing and settlement.
These classes have NO storage dependencies - callers gather the context
from the repository and the policies only decide.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, List

from core.domain import PolicyDecision, PolicyEngine, PolicyResult, ValidationError, Validator

from ..models import Appointment, Invoice, finite_decimal


# =============================================================================
# CONSTANTS
# =============================================================================

# A payment settles an invoice only when it is within this distance of the total
PAYMENT_TOLERANCE = Decimal("0.009")

MIN_TAX_RATE = Decimal("0")
MAX_TAX_RATE = Decimal("1")


# =============================================================================
# POLICY ENGINES
# =============================================================================

@dataclass
class SlotContext:
    """Context for slot availability evaluation."""
    doctor_id: str
    requested_slot: datetime
    existing_appointments: List[Appointment] = field(default_factory=list)


class SlotAvailabilityPolicy(PolicyEngine):
    """
    A doctor can hold at most one SCHEDULED appointment per slot.

    Slots are compared by exact equality. Back-to-back or nearby slots are
    fine, and completed or cancelled appointments never block a slot.
    """

    def evaluate(self, context: SlotContext) -> PolicyDecision:
        for existing in context.existing_appointments:
            if (existing.doctor_id == context.doctor_id
                    and existing.is_scheduled
                    and existing.slot == context.requested_slot):
                return PolicyDecision(
                    result=PolicyResult.DENIED,
                    reason=f"Doctor is already booked at {context.requested_slot:%Y-%m-%d %H:%M}",
                    metadata={"conflicting_appointment": existing.id},
                )

        return PolicyDecision(result=PolicyResult.APPROVED, reason="Slot is free")


class TaxRatePolicy(PolicyEngine):
    """Tax rates are fractions between 0 and 1 inclusive."""

    def evaluate(self, context: Decimal) -> PolicyDecision:
        if not context.is_finite() or not (MIN_TAX_RATE <= context <= MAX_TAX_RATE):
            return PolicyDecision(
                result=PolicyResult.DENIED,
                reason="Tax rate must lie between 0 and 1",
                metadata={"tax_rate": str(context)},
            )
        return PolicyDecision(result=PolicyResult.APPROVED, reason="Tax rate accepted")


@dataclass
class SettlementContext:
    """Context for settlement evaluation."""
    invoice: Invoice
    amount: Decimal


class SettlementPolicy(PolicyEngine):
    """
    An invoice is settled by exactly one payment equal to its total.

    No partial payments, no overpayments, no running balance.
    """

    def evaluate(self, context: SettlementContext) -> PolicyDecision:
        total = context.invoice.total
        if not context.amount.is_finite():
            return PolicyDecision(
                result=PolicyResult.DENIED,
                reason="Payment amount is not a number",
                metadata={"expected": total},
            )

        difference = abs(context.amount - total)
        if difference > PAYMENT_TOLERANCE:
            return PolicyDecision(
                result=PolicyResult.DENIED,
                reason="Payment amount does not match the invoice total",
                metadata={"expected": total, "difference": difference},
            )

        return PolicyDecision(
            result=PolicyResult.APPROVED,
            reason="Payment settles the invoice",
            metadata={"expected": total},
        )


# =============================================================================
# VALIDATORS
# =============================================================================

class PrescriptionItemValidator(Validator):
    """Quantity must be a positive integer and unit price must not be negative."""

    def validate(self, data: Any) -> List[ValidationError]:
        errors = []

        quantity = getattr(data, "quantity", None)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            errors.append(ValidationError("quantity", "Quantity must be a whole number"))
        elif quantity <= 0:
            errors.append(ValidationError("quantity", "Quantity must be greater than zero", "not_positive"))

        unit_price = finite_decimal(getattr(data, "unit_price", None))
        if unit_price is None:
            errors.append(ValidationError("unit_price", "Unit price must be a number"))
        elif unit_price < 0:
            errors.append(ValidationError("unit_price", "Unit price must not be negative", "negative"))

        return errors

