"""API request/response schemas for payment endpoints.

Field names travel as camelCase on the wire (`externalId`, `createdAt`).
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from payrec.common.state_machine import PaymentStatus

# Amounts serialize as JSON numbers.
JsonAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaymentCreateRequest(CamelModel):
    """Payload accepted by `POST /payments`."""

    external_id: str = Field(min_length=1, max_length=255, pattern=r"\S")
    amount: Decimal = Field(ge=Decimal("0.01"), max_digits=19, decimal_places=2)
    currency: str = Field(min_length=3, max_length=3, pattern=r"^[A-Za-z]{3}$")
    description: str | None = Field(default=None, max_length=255)


class StatusUpdateRequest(CamelModel):
    """Payload accepted by `PATCH /payments/{externalId}/status`."""

    status: PaymentStatus

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        if isinstance(value, str):
            if not value.strip():
                raise ValueError("status must not be blank")
            return value.strip().upper()
        return value


class RefundRequest(CamelModel):
    """Payload accepted by `POST /payments/{externalId}/refund`."""

    amount: Decimal = Field(ge=Decimal("0.01"))
    reason: str | None = Field(default=None, max_length=255)


class PaymentResponse(CamelModel):
    """Full payment record returned to clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    external_id: str
    amount: JsonAmount
    currency: str
    status: PaymentStatus
    description: str | None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes; stored values are always UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
