# pagamentos/domain/status/transitions.py
#
# Static transition tables and lifecycle predicates.
#
# Design decisions:
#   - Legality is an enumerated edge table, never computed. A status missing
#     from a table has no outgoing edges.
#   - Self-transition is always legal (idempotent updates).
#   - "Final" is a cancellation notion, not a dead end: DELIVERED is final yet
#     DELIVERED -> REFUNDED is a legal edge.
#   - One generic can_transition_to/transition pair works for every status
#     enum by dispatching on the enum's own table.
from __future__ import annotations

from typing import TypeVar

from pagamentos.domain.status.enums import EntityStatus, PaymentStatus, SubscriptionStatus
from pagamentos.errors import InvalidStateTransition

P = PaymentStatus
E = EntityStatus
S = SubscriptionStatus

_St = TypeVar("_St", PaymentStatus, EntityStatus, SubscriptionStatus)

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    P.PENDING: frozenset({P.AWAITING_PAYMENT, P.PAYMENT_PROCESSING, P.PAID, P.FAILED, P.CANCELLED}),
    P.AWAITING_PAYMENT: frozenset({P.PAYMENT_PROCESSING, P.PAID, P.FAILED, P.CANCELLED, P.EXPIRED}),
    P.PAYMENT_PROCESSING: frozenset({P.PAID, P.FAILED, P.CANCELLED, P.AUTHORIZED}),
    P.AUTHORIZED: frozenset({P.CAPTURED, P.CANCELLED, P.EXPIRED}),
    P.CAPTURED: frozenset({P.PROCESSING, P.REFUNDED}),
    P.PAID: frozenset({P.PROCESSING, P.CANCELLED, P.REFUNDED}),
    P.PROCESSING: frozenset({P.FULFILLED, P.PARTIALLY_FULFILLED, P.CANCELLED, P.FAILED}),
    P.PARTIALLY_FULFILLED: frozenset({P.FULFILLED, P.CANCELLED}),
    P.FULFILLED: frozenset({P.SHIPPED, P.PARTIALLY_SHIPPED}),
    P.PARTIALLY_SHIPPED: frozenset({P.SHIPPED}),
    P.SHIPPED: frozenset({P.OUT_FOR_DELIVERY, P.DELIVERED, P.RETURNED}),
    P.OUT_FOR_DELIVERY: frozenset({P.DELIVERED, P.RETURNED}),
    P.DELIVERED: frozenset({P.REFUNDED, P.PARTIALLY_REFUNDED, P.DISPUTED, P.RETURNED}),
    P.PARTIALLY_REFUNDED: frozenset({P.REFUNDED, P.DISPUTED}),
    P.RETURNED: frozenset({P.REFUNDED}),
}

ENTITY_TRANSITIONS: dict[EntityStatus, frozenset[EntityStatus]] = {
    E.ACTIVE: frozenset({E.INACTIVE, E.SUSPENDED, E.DELETED}),
    E.INACTIVE: frozenset({E.ACTIVE, E.DELETED}),
    E.SUSPENDED: frozenset({E.ACTIVE, E.DELETED}),
}

# CANCELLED -> ACTIVE so existe para retomada dentro do periodo ja pago
# (Subscription.can_resume verifica a data).
SUBSCRIPTION_TRANSITIONS: dict[SubscriptionStatus, frozenset[SubscriptionStatus]] = {
    S.TRIALING: frozenset({S.ACTIVE, S.PAUSED, S.CANCELLED}),
    S.ACTIVE: frozenset({S.TRIALING, S.PAST_DUE, S.PAUSED, S.CANCELLED}),
    S.PAST_DUE: frozenset({S.ACTIVE, S.CANCELLED}),
    S.PAUSED: frozenset({S.ACTIVE}),
    S.CANCELLED: frozenset({S.ACTIVE}),
}

FINAL_PAYMENT_STATUSES: frozenset[PaymentStatus] = frozenset({
    P.DELIVERED, P.CANCELLED, P.REFUNDED, P.FAILED, P.EXPIRED, P.DISPUTED, P.RETURNED,
})
FINAL_ENTITY_STATUSES: frozenset[EntityStatus] = frozenset({E.DELETED})

CANCELLABLE_STATUSES: frozenset[PaymentStatus] = frozenset({
    P.PENDING, P.AWAITING_PAYMENT, P.PAYMENT_PROCESSING, P.PAID, P.PROCESSING, P.AUTHORIZED,
})

REFUNDABLE_STATUSES: frozenset[PaymentStatus] = frozenset({
    P.PAID, P.CAPTURED, P.PROCESSING, P.PARTIALLY_FULFILLED, P.FULFILLED, P.SHIPPED,
    P.PARTIALLY_SHIPPED, P.OUT_FOR_DELIVERY, P.DELIVERED, P.PARTIALLY_REFUNDED, P.RETURNED,
})

_TABLES: dict[type, dict] = {
    PaymentStatus: PAYMENT_TRANSITIONS,
    EntityStatus: ENTITY_TRANSITIONS,
    SubscriptionStatus: SUBSCRIPTION_TRANSITIONS,
}


def allowed_transitions(status: _St) -> frozenset[_St]:
    return _TABLES[type(status)].get(status, frozenset())


def can_transition_to(current: _St, target: _St) -> bool:
    """True for self-transitions and for edges present in the table."""
    if type(current) is not type(target):
        return False
    return current is target or target in allowed_transitions(current)


def transition(current: _St, target: _St) -> _St:
    """Return *target* if the move is legal.

    Raises:
        InvalidStateTransition: the edge is not in the table.
    """
    if not can_transition_to(current, target):
        raise InvalidStateTransition(current, target)
    return target


def is_final_status(status: PaymentStatus | EntityStatus) -> bool:
    if isinstance(status, PaymentStatus):
        return status in FINAL_PAYMENT_STATUSES
    return status in FINAL_ENTITY_STATUSES


def can_be_cancelled(status: PaymentStatus) -> bool:
    return not is_final_status(status) and status in CANCELLABLE_STATUSES


def can_be_refunded(status: PaymentStatus) -> bool:
    return status in REFUNDABLE_STATUSES
