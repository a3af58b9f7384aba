# pagamentos/domain/assinatura/entities.py
#
# Subscription aggregate: billing periods, trial, pause/resume, proration.
#
# Design decisions:
#   - Frozen, like Payment. Operations take `now` and return a new value.
#   - Each operation lists the statuses it accepts (OPERATION_SOURCES) and then
#     passes through the SubscriptionStatus transition table, so a move is
#     legal only when both agree.
#   - Proration uses exact Decimal: the remaining/total ratio is computed from
#     integer microseconds, clamped to [0, 1], and the result quantized to
#     centavos.
#   - Resuming after the paid period has ended opens a fresh period starting
#     at `now`.
#
# Invariants:
#   - current_period_start < current_period_end.
#   - price >= 0.
from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from decimal import Decimal
from enum import StrEnum

from pagamentos.domain.dinheiro.value_objects import centavos
from pagamentos.domain.status.enums import SubscriptionStatus
from pagamentos.domain.status.transitions import transition
from pagamentos.errors import InvalidAmount, InvalidStateTransition
from pagamentos.log import log

S = SubscriptionStatus

DEFAULT_GRACE_DAYS = 3
_MICROSECOND = timedelta(microseconds=1)


class BillingInterval(StrEnum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


INTERVAL_DAYS: dict[BillingInterval, int] = {
    BillingInterval.MONTHLY: 30,
    BillingInterval.QUARTERLY: 90,
    BillingInterval.YEARLY: 365,
}

# Meses cobertos por um ciclo, para normalizar MRR.
INTERVAL_MONTHS: dict[BillingInterval, int] = {
    BillingInterval.MONTHLY: 1,
    BillingInterval.QUARTERLY: 3,
    BillingInterval.YEARLY: 12,
}

OPERATION_SOURCES: dict[str, frozenset[SubscriptionStatus]] = {
    "start_trial": frozenset({S.ACTIVE, S.TRIALING}),
    "convert_trial_to_paid": frozenset({S.TRIALING}),
    "pause": frozenset({S.ACTIVE, S.TRIALING}),
    "cancel": frozenset({S.ACTIVE, S.TRIALING, S.PAST_DUE}),
    "mark_past_due": frozenset({S.ACTIVE}),
}


@dataclass(frozen=True)
class SubscriptionMetrics:
    is_active: bool
    in_trial: bool
    mrr: Decimal
    age_days: int
    lifetime_value: Decimal


@dataclass(frozen=True)
class Subscription:
    """Assinatura recorrente. Imutavel."""

    id: uuid.UUID
    customer_id: str
    plan_id: str
    price: Decimal
    interval: BillingInterval
    status: SubscriptionStatus
    current_period_start: datetime
    current_period_end: datetime
    created_at: datetime
    updated_at: datetime
    trial_start: datetime | None = None
    trial_end: datetime | None = None
    trial_converted_at: datetime | None = None
    pause_collection: datetime | None = None
    pause_reason: str | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.price, float):
            raise TypeError("Subscription.price deve ser Decimal, nunca float")
        if self.price < 0:
            raise InvalidAmount(f"preco negativo: {self.price}")
        if self.current_period_start >= self.current_period_end:
            raise ValueError("current_period_start deve ser anterior a current_period_end")

    @classmethod
    def new(
        cls,
        customer_id: str,
        plan_id: str,
        price: Decimal,
        interval: BillingInterval,
        now: datetime,
        *,
        subscription_id: uuid.UUID | None = None,
    ) -> Subscription:
        return cls(
            id=subscription_id or uuid.uuid4(),
            customer_id=customer_id,
            plan_id=plan_id,
            price=price,
            interval=interval,
            status=S.ACTIVE,
            current_period_start=now,
            current_period_end=now + cls.interval_length(interval),
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def interval_length(interval: BillingInterval) -> timedelta:
        return timedelta(days=INTERVAL_DAYS[interval])

    # ---------- queries ----------

    def is_active(self, now: datetime) -> bool:
        return self.status in (S.ACTIVE, S.TRIALING) and self.current_period_end > now

    def in_trial(self, now: datetime) -> bool:
        return self.status is S.TRIALING and self.trial_end is not None and self.trial_end > now

    def trial_days_remaining(self, now: datetime) -> int | None:
        """Dias inteiros restantes de trial. None quando nao ha trial ou acabou."""
        if self.trial_end is None:
            return None
        dias = (self.trial_end - now).days
        return dias if dias > 0 else None

    @property
    def can_cancel(self) -> bool:
        return self.status in OPERATION_SOURCES["cancel"]

    def can_resume(self, now: datetime) -> bool:
        return self.status is S.PAUSED or (self.status is S.CANCELLED and self.current_period_end > now)

    @property
    def next_billing_date(self) -> datetime:
        return self.current_period_end + self.interval_length(self.interval)

    def calculate_proration(self, new_price: Decimal, now: datetime) -> Decimal:
        """(new - old) * remaining / total. After the period ends: new_price."""
        if now >= self.current_period_end:
            return new_price
        total = (self.current_period_end - self.current_period_start) // _MICROSECOND
        remaining = (self.current_period_end - now) // _MICROSECOND
        ratio = min(Decimal("1"), max(Decimal("0"), Decimal(remaining) / Decimal(total)))
        return centavos((new_price - self.price) * ratio)

    def monthly_recurring_revenue(self, now: datetime) -> Decimal:
        if not self.is_active(now):
            return Decimal("0")
        return self.price / INTERVAL_MONTHS[self.interval]

    def age_days(self, now: datetime) -> int:
        return (now - self.created_at).days

    def in_grace_period(self, now: datetime, grace_days: int = DEFAULT_GRACE_DAYS) -> bool:
        if self.status is not S.PAST_DUE:
            return False
        return now <= self.current_period_end + timedelta(days=grace_days)

    def metrics(self, now: datetime) -> SubscriptionMetrics:
        age = self.age_days(now)
        return SubscriptionMetrics(
            is_active=self.is_active(now),
            in_trial=self.in_trial(now),
            mrr=self.monthly_recurring_revenue(now),
            age_days=age,
            lifetime_value=self.price * (age // 30),
        )

    # ---------- lifecycle ----------

    def _move(self, operacao: str | None, target: SubscriptionStatus, now: datetime, **changes: object) -> Subscription:
        if operacao is not None and self.status not in OPERATION_SOURCES[operacao]:
            raise InvalidStateTransition(self.status, target)
        novo = transition(self.status, target)
        log(f"Assinatura {self.id}: {self.status.value} -> {novo.value}")
        return replace(self, status=novo, updated_at=now, **changes)

    def start_trial(self, trial_days: int, now: datetime) -> Subscription:
        return self._move(
            "start_trial", S.TRIALING, now,
            trial_start=now, trial_end=now + timedelta(days=trial_days),
        )

    def convert_trial_to_paid(self, now: datetime) -> Subscription:
        return self._move("convert_trial_to_paid", S.ACTIVE, now, trial_converted_at=now)

    def pause(self, now: datetime, reason: str | None = None) -> Subscription:
        """Acesso mantido ate o fim do periodo; cobranca suspensa ate la."""
        return self._move(
            "pause", S.PAUSED, now,
            pause_collection=self.current_period_end, pause_reason=reason,
        )

    def resume(self, now: datetime) -> Subscription:
        if not self.can_resume(now):
            raise InvalidStateTransition(self.status, S.ACTIVE)
        changes: dict[str, object] = {"pause_collection": None, "pause_reason": None}
        if self.current_period_end < now:
            changes["current_period_start"] = now
            changes["current_period_end"] = now + self.interval_length(self.interval)
        return self._move(None, S.ACTIVE, now, **changes)

    def cancel(self, now: datetime, reason: str | None = None) -> Subscription:
        """Acesso ate current_period_end."""
        return self._move("cancel", S.CANCELLED, now, cancelled_at=now, cancellation_reason=reason)

    def mark_past_due(self, now: datetime) -> Subscription:
        return self._move("mark_past_due", S.PAST_DUE, now)

    def update_billing_period(self, now: datetime) -> Subscription:
        """Apos pagamento confirmado: avanca um ciclo se o atual acabou e limpa PAST_DUE."""
        changes: dict[str, object] = {}
        if self.current_period_end <= now:
            changes["current_period_start"] = self.current_period_end
            changes["current_period_end"] = self.next_billing_date
        if self.status is S.PAST_DUE:
            return self._move(None, S.ACTIVE, now, **changes)
        log(f"Assinatura {self.id}: periodo ate {changes.get('current_period_end', self.current_period_end)}")
        return replace(self, updated_at=now, **changes)
