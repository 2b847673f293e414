"""Unit tests for payment status transition and refund-source guards."""

import pytest

from payrec.common.errors import InvalidState
from payrec.common.state_machine import PaymentStatus, validate_refund_source, validate_transition


@pytest.mark.parametrize("current", list(PaymentStatus))
@pytest.mark.parametrize("new", list(PaymentStatus))
def test_every_status_update_is_allowed(current, new):
    """Generic status updates accept any pair, including REFUNDED -> PENDING."""

    validate_transition(current, new)


@pytest.mark.parametrize("current", [PaymentStatus.AUTHORIZED, PaymentStatus.CAPTURED])
def test_refund_allowed_from_authorized_or_captured(current):
    validate_refund_source(current)


@pytest.mark.parametrize(
    "current",
    [PaymentStatus.PENDING, PaymentStatus.FAILED, PaymentStatus.CANCELED, PaymentStatus.REFUNDED],
)
def test_refund_rejected_from_other_statuses(current):
    """Refund from an ineligible status must raise InvalidState."""

    with pytest.raises(InvalidState):
        validate_refund_source(current)
