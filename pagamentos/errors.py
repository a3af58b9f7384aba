# pagamentos/errors.py
#
# Error taxonomy for the payment kernel.
#
# Design decisions:
#   - One base class (PagamentoError) so callers can catch every kernel failure
#     with a single except clause and decide whether it is user-facing.
#   - Input-validation errors also subclass ValueError, matching the value
#     objects, which raise ValueError from their constructors.
#   - Every error keeps its structured fields as attributes; the message is
#     derived from them and never contains a clear-text CPF.
#   - Boolean validators (validate_cpf, validate_pix_key, ...) never raise.
#     Only constructors, encoders and lifecycle operations raise.
from __future__ import annotations

from decimal import Decimal
from typing import Literal


class PagamentoError(Exception):
    """Base of every failure raised by the kernel."""


class InvalidDocument(PagamentoError, ValueError):
    """Document failed its length or check-digit validation."""

    def __init__(self, kind: str, value: str) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"{kind} invalido: {value}")


class InvalidPixKey(PagamentoError, ValueError):
    """PIX key does not satisfy the validator for its key type."""

    def __init__(self, key_type: str, reason: str) -> None:
        self.key_type = key_type
        self.reason = reason
        super().__init__(f"Chave PIX invalida ({key_type}): {reason}")


class InvalidPixData(PagamentoError, ValueError):
    """PIX settlement data (end-to-end id, txid) is malformed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Dados PIX invalidos: {reason}")


class InvalidStateTransition(PagamentoError):
    """Lifecycle move not present in the static transition table."""

    def __init__(self, from_status: object, to_status: object) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Transicao invalida: {from_status} -> {to_status}")


class InvalidAmount(PagamentoError, ValueError):
    """Amount is non-positive, unparseable, or otherwise unusable."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Valor invalido: {reason}")


class AmountOutOfRange(InvalidAmount):
    """Amount falls outside the configured policy bounds."""

    def __init__(self, bound: Literal["min", "max"], limit: Decimal, actual: Decimal) -> None:
        self.bound = bound
        self.limit = limit
        self.actual = actual
        if bound == "min":
            reason = f"{actual} abaixo do minimo {limit}"
        else:
            reason = f"{actual} acima do maximo {limit}"
        super().__init__(reason)


class EncodingFailure(PagamentoError):
    """Payload construction impossible (e.g. TLV field longer than 99 bytes)."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Falha de codificacao: {reason}")


class InsufficientFunds(PagamentoError):
    """Debit larger than the available balance."""

    def __init__(self, requested: Decimal | int, available: Decimal | int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(f"Saldo insuficiente: solicitado {requested}, disponivel {available}")


class WalletLockError(PagamentoError):
    """Lock/unlock requested on a wallet already in that state."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)
