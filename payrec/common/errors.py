"""Error taxonomy for payment operations.

Every error maps to exactly one HTTP status; the API layer renders them as
`{"error": <name>, "detail": <message>}`.
"""


class PaymentError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    @property
    def name(self) -> str:
        return type(self).__name__


class NotFound(PaymentError):
    """No payment exists for the given external id."""

    status_code = 404


class Conflict(PaymentError):
    """A payment with the same external id already exists."""

    status_code = 409


class InvalidState(PaymentError):
    """The payment's current status does not allow the operation."""

    status_code = 409


class InvalidArgument(PaymentError):
    """An argument is well-formed but outside the allowed range."""

    status_code = 400


class Unauthorized(PaymentError):
    status_code = 401
