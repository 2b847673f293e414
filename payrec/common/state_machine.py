"""Payment status transitions.

Generic status updates are currently unrestricted: every status maps to every
status. Replacing `ALLOWED_TRANSITIONS` with a real table tightens
`update_status` without touching its callers.
"""

from enum import Enum

from payrec.common.errors import InvalidState


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    AUTHORIZED = "AUTHORIZED"
    CAPTURED = "CAPTURED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"
    REFUNDED = "REFUNDED"


ALLOWED_TRANSITIONS: dict[PaymentStatus, set[PaymentStatus]] = {
    status: set(PaymentStatus) for status in PaymentStatus
}

REFUND_ELIGIBLE: frozenset[PaymentStatus] = frozenset({PaymentStatus.AUTHORIZED, PaymentStatus.CAPTURED})


def validate_transition(current: PaymentStatus, new: PaymentStatus) -> None:
    """Raise when a generic status update is not allowed."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidState(f"Invalid transition: {current.value} -> {new.value}")


def validate_refund_source(current: PaymentStatus) -> None:
    """Raise unless a refund may be initiated from `current`."""

    if current not in REFUND_ELIGIBLE:
        raise InvalidState("Only authorized or captured payments can be refunded")
