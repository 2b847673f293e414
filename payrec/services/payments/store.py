"""Keyed storage for payment records.

A `PaymentStore` wraps one SQLAlchemy session, i.e. one unit of work. It
flushes but never commits; the caller owns the transaction boundary.
"""

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from payrec.common.errors import Conflict
from payrec.common.state_machine import PaymentStatus
from payrec.services.payments.models import Payment, utcnow


class PaymentStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def insert(self, payment: Payment) -> Payment:
        """Persist a new payment, assigning id and timestamps.

        Raises `Conflict` when the external id is already taken, including
        when a concurrent insert wins the unique constraint.
        """

        self.db.add(payment)
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            raise Conflict(f"externalId already exists: {payment.external_id}") from exc
        return payment

    def find_by_external_id(self, external_id: str) -> Payment | None:
        return self.db.execute(
            select(Payment).where(Payment.external_id == external_id)
        ).scalar_one_or_none()

    def find_all(self) -> list[Payment]:
        return list(self.db.execute(select(Payment).order_by(Payment.id)).scalars().all())

    def update(self, payment: Payment) -> Payment:
        """Flush mutated fields and refresh `updated_at`.

        `updated_at` is set explicitly so a re-set of an unchanged status
        still counts as an update.
        """

        payment.updated_at = utcnow()
        self.db.flush()
        return payment

    def swap_status(self, payment: Payment, expected: PaymentStatus, new: PaymentStatus) -> bool:
        """Atomically move `payment` from `expected` to `new`.

        Issues a single conditional UPDATE keyed on the expected prior status
        and returns False when no row matched (the status changed since it was
        read).
        """

        now = utcnow()
        result = self.db.execute(
            update(Payment)
            .where(Payment.external_id == payment.external_id, Payment.status == expected)
            .values(status=new, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        set_committed_value(payment, "status", new)
        set_committed_value(payment, "updated_at", now)
        return True
