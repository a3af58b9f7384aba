# pagamentos/domain/carteira/entities.py
#
# Wallet ledger: confirmed balance, pending balance, tokens.
#
# Design decisions:
#   - Frozen. Each movement returns a new Wallet with updated_at = now and a
#     log line carrying before/after values.
#   - Money amounts must be strictly positive; token counts must be >= 0.
#   - A locked wallet still accepts credits but refuses every debit
#     (subtract_balance, spend_tokens, calculate_payout).
#
# Invariants:
#   - balance >= 0, pending_balance >= 0, tokens >= 0.
#   - lifetime_earnings only grows on confirmed credits (add_balance,
#     clear_pending); lifetime_spending only on subtract_balance.
from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from pagamentos.errors import InsufficientFunds, InvalidAmount, WalletLockError
from pagamentos.log import log

ZERO = Decimal("0")


@dataclass(frozen=True)
class PayoutCalculation:
    gross_amount: Decimal
    fee_percentage: Decimal
    fee_amount: Decimal
    net_amount: Decimal


@dataclass(frozen=True)
class WalletHealthMetrics:
    balance: Decimal
    pending_balance: Decimal
    total_balance: Decimal
    tokens: int
    lifetime_earnings: Decimal
    lifetime_spending: Decimal
    net_earnings: Decimal
    pending_ratio: Decimal
    last_activity: datetime


def _positivo(amount: Decimal) -> None:
    if isinstance(amount, float):
        raise TypeError("amount deve ser Decimal, nunca float")
    if amount <= ZERO:
        raise InvalidAmount(f"movimentacao deve ser positiva, recebido {amount}")


@dataclass(frozen=True)
class Wallet:
    id: uuid.UUID
    user_id: str
    created_at: datetime
    updated_at: datetime
    balance: Decimal = ZERO
    pending_balance: Decimal = ZERO
    tokens: int = 0
    lifetime_earnings: Decimal = ZERO
    lifetime_spending: Decimal = ZERO
    locked: bool = False
    locked_at: datetime | None = None
    lock_reason: str | None = None

    def __post_init__(self) -> None:
        if self.balance < ZERO or self.pending_balance < ZERO:
            raise InvalidAmount("saldo negativo")
        if self.tokens < 0:
            raise InvalidAmount(f"tokens negativos: {self.tokens}")

    @classmethod
    def new(cls, user_id: str, now: datetime, *, wallet_id: uuid.UUID | None = None) -> Wallet:
        return cls(id=wallet_id or uuid.uuid4(), user_id=user_id, created_at=now, updated_at=now)

    @property
    def available_balance(self) -> Decimal:
        return self.balance

    @property
    def total_balance(self) -> Decimal:
        return self.balance + self.pending_balance

    @property
    def is_active(self) -> bool:
        return not self.locked

    def _exigir_desbloqueada(self, operacao: str) -> None:
        if self.locked:
            raise WalletLockError(f"carteira {self.id} bloqueada: {operacao} recusado ({self.lock_reason})")

    # ---------- balance ----------

    def add_balance(self, amount: Decimal, description: str, now: datetime) -> Wallet:
        _positivo(amount)
        novo = replace(
            self,
            balance=self.balance + amount,
            lifetime_earnings=self.lifetime_earnings + amount,
            updated_at=now,
        )
        log(f"Carteira {self.id}: +{amount} ({description}) saldo {self.balance} -> {novo.balance}")
        return novo

    def subtract_balance(self, amount: Decimal, description: str, now: datetime) -> Wallet:
        _positivo(amount)
        self._exigir_desbloqueada("debito")
        if amount > self.balance:
            raise InsufficientFunds(amount, self.balance)
        novo = replace(
            self,
            balance=self.balance - amount,
            lifetime_spending=self.lifetime_spending + amount,
            updated_at=now,
        )
        log(f"Carteira {self.id}: -{amount} ({description}) saldo {self.balance} -> {novo.balance}")
        return novo

    def validate_minimum_balance(self, minimum: Decimal) -> None:
        if self.balance < minimum:
            raise InsufficientFunds(minimum, self.balance)

    # ---------- tokens ----------

    def add_tokens(self, tokens: int, description: str, now: datetime) -> Wallet:
        if tokens < 0:
            raise InvalidAmount(f"quantidade de tokens negativa: {tokens}")
        log(f"Carteira {self.id}: +{tokens} tokens ({description})")
        return replace(self, tokens=self.tokens + tokens, updated_at=now)

    def spend_tokens(self, tokens: int, description: str, now: datetime) -> Wallet:
        if tokens < 0:
            raise InvalidAmount(f"quantidade de tokens negativa: {tokens}")
        self._exigir_desbloqueada("gasto de tokens")
        if tokens > self.tokens:
            raise InsufficientFunds(tokens, self.tokens)
        log(f"Carteira {self.id}: -{tokens} tokens ({description})")
        return replace(self, tokens=self.tokens - tokens, updated_at=now)

    # ---------- pending ----------

    def add_pending(self, amount: Decimal, description: str, now: datetime) -> Wallet:
        _positivo(amount)
        log(f"Carteira {self.id}: pendente +{amount} ({description})")
        return replace(self, pending_balance=self.pending_balance + amount, updated_at=now)

    def clear_pending(self, amount: Decimal, description: str, now: datetime) -> Wallet:
        """Move *amount* from pending to the confirmed balance."""
        _positivo(amount)
        if amount > self.pending_balance:
            raise InvalidAmount(f"{amount} maior que o saldo pendente {self.pending_balance}")
        log(f"Carteira {self.id}: pendente liberado {amount} ({description})")
        return replace(
            self,
            pending_balance=self.pending_balance - amount,
            balance=self.balance + amount,
            lifetime_earnings=self.lifetime_earnings + amount,
            updated_at=now,
        )

    def cancel_pending(self, amount: Decimal, description: str, now: datetime) -> Wallet:
        _positivo(amount)
        if amount > self.pending_balance:
            raise InvalidAmount(f"{amount} maior que o saldo pendente {self.pending_balance}")
        log(f"Carteira {self.id}: pendente cancelado {amount} ({description})")
        return replace(self, pending_balance=self.pending_balance - amount, updated_at=now)

    # ---------- payout / metrics ----------

    def calculate_payout(self, amount: Decimal, fee_percentage: Decimal) -> PayoutCalculation:
        """Saque: taxa = amount * pct / 100. Nao altera a carteira."""
        _positivo(amount)
        self._exigir_desbloqueada("saque")
        if amount > self.balance:
            raise InsufficientFunds(amount, self.balance)
        fee = amount * fee_percentage / Decimal("100")
        return PayoutCalculation(
            gross_amount=amount,
            fee_percentage=fee_percentage,
            fee_amount=fee,
            net_amount=amount - fee,
        )

    def health_metrics(self) -> WalletHealthMetrics:
        total = self.total_balance
        return WalletHealthMetrics(
            balance=self.balance,
            pending_balance=self.pending_balance,
            total_balance=total,
            tokens=self.tokens,
            lifetime_earnings=self.lifetime_earnings,
            lifetime_spending=self.lifetime_spending,
            net_earnings=self.lifetime_earnings - self.lifetime_spending,
            pending_ratio=self.pending_balance / total if total > ZERO else ZERO,
            last_activity=self.updated_at,
        )

    # ---------- lock ----------

    def lock(self, reason: str, now: datetime) -> Wallet:
        if self.locked:
            raise WalletLockError(f"carteira {self.id} ja bloqueada")
        log(f"Carteira {self.id} bloqueada: {reason}")
        return replace(self, locked=True, locked_at=now, lock_reason=reason, updated_at=now)

    def unlock(self, now: datetime) -> Wallet:
        if not self.locked:
            raise WalletLockError(f"carteira {self.id} nao esta bloqueada")
        log(f"Carteira {self.id} desbloqueada")
        return replace(self, locked=False, locked_at=None, lock_reason=None, updated_at=now)
