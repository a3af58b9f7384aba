# pagamentos/domain/pagamento/entities.py
#
# Payment aggregate and its lifecycle operations.
#
# Design decisions:
#   - Payment is frozen. Every lifecycle operation returns a new Payment with
#     updated_at set to the caller-supplied `now` (Functional Core pattern).
#   - Every status change goes through status.transitions.transition(), so the
#     static table is the single source of legality.
#   - Amounts are Decimal. Policy bounds (min/max) are an explicit AmountLimits
#     argument; get_config() is only the fallback when none is given.
#
# Invariants:
#   - amount >= 0 and tax >= 0 after construction.
#   - paid_at is set iff the payment has ever reached PAID.
#   - end_to_end_id, when set, has exactly 32 characters.
from __future__ import annotations

import hashlib
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from decimal import Decimal
from enum import StrEnum

from pagamentos.config import AmountLimits, get_config
from pagamentos.domain.pix.value_objects import END_TO_END_ID_LEN
from pagamentos.domain.status.enums import PaymentStatus
from pagamentos.domain.status.transitions import (
    can_be_cancelled,
    can_be_refunded,
    is_final_status,
    transition,
)
from pagamentos.errors import AmountOutOfRange, InvalidAmount, InvalidPixData, InvalidStateTransition
from pagamentos.log import log

IDEMPOTENCY_PREFIX = "pay_"
DEFAULT_EXPIRY_MINUTES = 30


def check_amount(valor: Decimal, limits: AmountLimits | None = None) -> None:
    """Raises InvalidAmount (<= 0) or AmountOutOfRange (outside limits)."""
    faixa = limits or get_config().amount_limits
    if valor <= 0:
        raise InvalidAmount(f"valor deve ser positivo, recebido {valor}")
    if valor < faixa.minimo:
        raise AmountOutOfRange("min", faixa.minimo, valor)
    if valor > faixa.maximo:
        raise AmountOutOfRange("max", faixa.maximo, valor)


class PaymentMethod(StrEnum):
    PIX = "pix"
    BOLETO = "boleto"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"


@dataclass(frozen=True)
class Payment:
    """Aggregate Root do pagamento. Imutavel."""

    id: uuid.UUID
    amount: Decimal
    method: PaymentMethod
    created_at: datetime
    updated_at: datetime
    status: PaymentStatus = PaymentStatus.PENDING
    tax: Decimal = Decimal("0")
    currency: str = "BRL"
    description: str | None = None
    paid_at: datetime | None = None
    failure_reason: str | None = None
    end_to_end_id: str | None = None
    psp_reference: str | None = None

    def __post_init__(self) -> None:
        for nome in ("amount", "tax"):
            valor = getattr(self, nome)
            if isinstance(valor, float):
                raise TypeError(f"Payment.{nome} deve ser Decimal, nunca float")
            if valor < 0:
                raise InvalidAmount(f"{nome} negativo: {valor}")
        if self.end_to_end_id is not None and len(self.end_to_end_id) != END_TO_END_ID_LEN:
            raise InvalidPixData(f"end_to_end_id deve ter {END_TO_END_ID_LEN} caracteres")

    @classmethod
    def new(
        cls,
        amount: Decimal,
        method: PaymentMethod,
        now: datetime,
        *,
        tax: Decimal = Decimal("0"),
        description: str | None = None,
        payment_id: uuid.UUID | None = None,
    ) -> Payment:
        return cls(
            id=payment_id or uuid.uuid4(),
            amount=amount,
            method=method,
            created_at=now,
            updated_at=now,
            tax=tax,
            description=description,
        )

    # ---------- derived values ----------

    @property
    def total_amount(self) -> Decimal:
        return self.amount + self.tax

    def net_amount(self, fee_percentage: Decimal) -> Decimal:
        """Valor liquido apos taxa percentual (2.5 = 2,5%)."""
        return self.amount - self.amount * fee_percentage / Decimal("100")

    @property
    def idempotency_key(self) -> str:
        """pay_ + SHA-256(id, amount, created_at). Stable for the same payment."""
        material = f"{self.id}{self.amount}{self.created_at.isoformat()}"
        return IDEMPOTENCY_PREFIX + hashlib.sha256(material.encode("utf-8")).hexdigest()

    @property
    def is_final(self) -> bool:
        return is_final_status(self.status)

    @property
    def can_be_cancelled(self) -> bool:
        return can_be_cancelled(self.status)

    @property
    def can_be_refunded(self) -> bool:
        return can_be_refunded(self.status)

    def age(self, now: datetime) -> timedelta:
        return now - self.created_at

    def is_expired(self, now: datetime, expiry_minutes: int = DEFAULT_EXPIRY_MINUTES) -> bool:
        """Pendente ha mais de expiry_minutes."""
        return self.status is PaymentStatus.PENDING and self.age(now) > timedelta(minutes=expiry_minutes)

    def validate_amount(self, limits: AmountLimits | None = None) -> None:
        """Raises InvalidAmount (<= 0) or AmountOutOfRange (outside limits)."""
        check_amount(self.amount, limits)

    # ---------- lifecycle ----------

    def transition_to(self, target: PaymentStatus, now: datetime, **changes: object) -> Payment:
        novo = transition(self.status, target)
        log(f"Pagamento {self.id}: {self.status.value} -> {novo.value}")
        return replace(self, status=novo, updated_at=now, **changes)

    def mark_processing(self, now: datetime) -> Payment:
        return self.transition_to(PaymentStatus.PAYMENT_PROCESSING, now)

    def mark_paid(self, now: datetime, *, psp_reference: str | None = None) -> Payment:
        return self.transition_to(
            PaymentStatus.PAID,
            now,
            paid_at=now,
            psp_reference=psp_reference if psp_reference is not None else self.psp_reference,
        )

    def mark_failed(self, reason: str, now: datetime) -> Payment:
        return self.transition_to(PaymentStatus.FAILED, now, failure_reason=reason)

    def mark_refunded(self, now: datetime) -> Payment:
        if not self.can_be_refunded:
            raise InvalidStateTransition(self.status, PaymentStatus.REFUNDED)
        return self.transition_to(PaymentStatus.REFUNDED, now)

    def cancel(self, now: datetime) -> Payment:
        if not self.can_be_cancelled:
            raise InvalidStateTransition(self.status, PaymentStatus.CANCELLED)
        return self.transition_to(PaymentStatus.CANCELLED, now)

    def confirm_pix(self, end_to_end_id: str, now: datetime) -> Payment:
        """Liquidacao PIX: grava o E2E id e marca como pago.

        Raises:
            InvalidPixData: not a PIX payment, or E2E id is not 32 characters.
            InvalidStateTransition: current status cannot move to PAID.
        """
        if self.method is not PaymentMethod.PIX:
            raise InvalidPixData(f"pagamento {self.id} nao e PIX ({self.method.value})")
        e2e = end_to_end_id.strip()
        if len(e2e) != END_TO_END_ID_LEN:
            raise InvalidPixData(f"end_to_end_id deve ter {END_TO_END_ID_LEN} caracteres, recebido {len(e2e)}")
        pago = self.transition_to(PaymentStatus.PAID, now, paid_at=now, end_to_end_id=e2e, psp_reference=e2e)
        log(f"PIX confirmado: pagamento={self.id} valor={self.amount}")
        return pago
