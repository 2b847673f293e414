"""Payment operations.

All business rules live here: external-id uniqueness on create, the status
transition check on generic updates, and the refund guards. Each public
method is one unit of work: it opens one session, commits once, and leaves
nothing behind when it raises.
"""

from decimal import Decimal

from payrec.common.errors import Conflict, InvalidArgument, InvalidState, NotFound, PaymentError
from payrec.common.logging import external_id_ctx, logger
from payrec.common.metrics import payment_operations_total, refund_amount_total
from payrec.common.state_machine import PaymentStatus, validate_refund_source, validate_transition
from payrec.services.payments.models import Payment
from payrec.services.payments.store import PaymentStore

CENTS = Decimal("0.01")


class PaymentService:
    """Owns payment creation, status changes and refunds."""

    def __init__(self, session_factory, service_name: str = "payments-api") -> None:
        self.session_factory = session_factory
        self.service_name = service_name

    def _record(self, operation: str, outcome: str) -> None:
        payment_operations_total.labels(
            service=self.service_name, operation=operation, outcome=outcome
        ).inc()

    def _rejected(self, operation: str, exc: PaymentError) -> None:
        self._record(operation, exc.name)
        logger.warning("%s_rejected: %s", operation, exc.detail)

    def create_payment(
        self, external_id: str, amount: Decimal, currency: str, description: str | None = None
    ) -> Payment:
        """Create a `PENDING` payment; fails with `Conflict` on a duplicate external id."""

        external_id_ctx.set(external_id)
        try:
            if amount <= 0:
                raise InvalidArgument("amount must be greater than zero")
            with self.session_factory() as db:
                store = PaymentStore(db)
                if store.find_by_external_id(external_id) is not None:
                    raise Conflict(f"externalId already exists: {external_id}")
                payment = store.insert(
                    Payment(
                        external_id=external_id,
                        amount=amount.quantize(CENTS),
                        currency=currency.upper(),
                        description=description,
                        status=PaymentStatus.PENDING,
                    )
                )
                db.commit()
        except PaymentError as exc:
            self._rejected("create", exc)
            raise
        self._record("create", "ok")
        logger.info("payment_created amount=%s currency=%s", payment.amount, payment.currency)
        return payment

    def list_all(self) -> list[Payment]:
        with self.session_factory() as db:
            return PaymentStore(db).find_all()

    def get_by_external_id(self, external_id: str) -> Payment:
        with self.session_factory() as db:
            return self._get(PaymentStore(db), external_id)

    def _get(self, store: PaymentStore, external_id: str) -> Payment:
        payment = store.find_by_external_id(external_id)
        if payment is None:
            raise NotFound(f"payment not found: {external_id}")
        return payment

    def update_status(self, external_id: str, status: PaymentStatus) -> Payment:
        """Overwrite the status of a payment.

        Any status is reachable from any status; the only gate is
        `validate_transition`, which currently allows every pair.
        """

        external_id_ctx.set(external_id)
        try:
            with self.session_factory() as db:
                store = PaymentStore(db)
                payment = self._get(store, external_id)
                previous = payment.status
                validate_transition(previous, status)
                payment.status = status
                store.update(payment)
                db.commit()
        except PaymentError as exc:
            self._rejected("update_status", exc)
            raise
        self._record("update_status", "ok")
        logger.info("payment_status_updated from=%s to=%s", previous.value, status.value)
        return payment

    def refund(self, external_id: str, amount: Decimal, reason: str | None = None) -> Payment:
        """Refund an authorized or captured payment.

        `amount` must be positive and no larger than the original amount. The
        payment is closed out as `REFUNDED` whatever the amount; `reason` is
        logged but not stored.
        """

        external_id_ctx.set(external_id)
        try:
            with self.session_factory() as db:
                store = PaymentStore(db)
                payment = self._get(store, external_id)
                validate_refund_source(payment.status)
                if amount <= 0 or amount > payment.amount:
                    raise InvalidArgument("invalid refund amount")
                self._close_out_refund(store, payment)
                db.commit()
        except PaymentError as exc:
            self._rejected("refund", exc)
            raise
        self._record("refund", "ok")
        refund_amount_total.labels(service=self.service_name, currency=payment.currency).inc(float(amount))
        logger.info("payment_refunded amount=%s reason=%s", amount, reason or "")
        return payment

    def _close_out_refund(self, store: PaymentStore, payment: Payment) -> None:
        # No refundable balance is tracked: any accepted refund closes the payment.
        if not store.swap_status(payment, payment.status, PaymentStatus.REFUNDED):
            raise InvalidState("payment status changed concurrently; refund not applied")
