# pagamentos/domain/status/enums.py
#
# Lifecycle enumerations. Wire values are snake_case.
from __future__ import annotations

import re
from enum import StrEnum
from typing import TypeVar

_E = TypeVar("_E", bound=StrEnum)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class PaymentStatus(StrEnum):
    """Superset usado por pagamentos e pedidos. Nem toda entidade usa todos."""

    PENDING = "pending"
    AWAITING_PAYMENT = "awaiting_payment"
    PAYMENT_PROCESSING = "payment_processing"
    AUTHORIZED = "authorized"
    CAPTURED = "captured"
    PAID = "paid"
    PROCESSING = "processing"
    PARTIALLY_FULFILLED = "partially_fulfilled"
    FULFILLED = "fulfilled"
    SHIPPED = "shipped"
    PARTIALLY_SHIPPED = "partially_shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"
    DISPUTED = "disputed"
    FAILED = "failed"
    EXPIRED = "expired"
    RETURNED = "returned"


class EntityStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    DELETED = "deleted"


class SubscriptionStatus(StrEnum):
    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    PAUSED = "paused"
    CANCELLED = "cancelled"


PAYMENT_LABELS: dict[PaymentStatus, str] = {
    PaymentStatus.PENDING: "Pendente",
    PaymentStatus.AWAITING_PAYMENT: "Aguardando pagamento",
    PaymentStatus.PAYMENT_PROCESSING: "Processando",
    PaymentStatus.AUTHORIZED: "Autorizado",
    PaymentStatus.CAPTURED: "Capturado",
    PaymentStatus.PAID: "Concluído",
    PaymentStatus.PROCESSING: "Em preparação",
    PaymentStatus.PARTIALLY_FULFILLED: "Parcialmente atendido",
    PaymentStatus.FULFILLED: "Atendido",
    PaymentStatus.SHIPPED: "Enviado",
    PaymentStatus.PARTIALLY_SHIPPED: "Parcialmente enviado",
    PaymentStatus.OUT_FOR_DELIVERY: "Saiu para entrega",
    PaymentStatus.DELIVERED: "Entregue",
    PaymentStatus.CANCELLED: "Cancelado",
    PaymentStatus.REFUNDED: "Estornado",
    PaymentStatus.PARTIALLY_REFUNDED: "Parcialmente estornado",
    PaymentStatus.DISPUTED: "Em disputa",
    PaymentStatus.FAILED: "Falhou",
    PaymentStatus.EXPIRED: "Expirado",
    PaymentStatus.RETURNED: "Devolvido",
}

ENTITY_LABELS: dict[EntityStatus, str] = {
    EntityStatus.ACTIVE: "Ativo",
    EntityStatus.INACTIVE: "Inativo",
    EntityStatus.SUSPENDED: "Suspenso",
    EntityStatus.DELETED: "Excluído",
}

SUBSCRIPTION_LABELS: dict[SubscriptionStatus, str] = {
    SubscriptionStatus.TRIALING: "Em período de teste",
    SubscriptionStatus.ACTIVE: "Ativa",
    SubscriptionStatus.PAST_DUE: "Em atraso",
    SubscriptionStatus.PAUSED: "Pausada",
    SubscriptionStatus.CANCELLED: "Cancelada",
}


def parse_status(enum_cls: type[_E], raw: str) -> _E:
    """Accept the snake_case wire value or the PascalCase name.

    parse_status(PaymentStatus, "AwaitingPayment") is AWAITING_PAYMENT.

    Raises:
        ValueError: unknown status.
    """
    texto = raw.strip()
    if "_" not in texto and texto[:1].isupper() and not texto.isupper():
        texto = _CAMEL_BOUNDARY.sub("_", texto)
    try:
        return enum_cls(texto.lower())
    except ValueError:
        raise ValueError(f"{enum_cls.__name__} desconhecido: {raw!r}") from None


def label(status: PaymentStatus | EntityStatus | SubscriptionStatus) -> str:
    """Rotulo em portugues para exibicao."""
    if isinstance(status, PaymentStatus):
        return PAYMENT_LABELS[status]
    if isinstance(status, EntityStatus):
        return ENTITY_LABELS[status]
    return SUBSCRIPTION_LABELS[status]
