# tests/domain/test_carteira.py
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pagamentos.domain.carteira.entities import Wallet
from pagamentos.errors import InsufficientFunds, InvalidAmount, WalletLockError

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _carteira(saldo: Decimal = Decimal("0"), pendente: Decimal = Decimal("0")) -> Wallet:
    w = Wallet.new("usuario-1", NOW, wallet_id=uuid.UUID(int=7))
    if saldo:
        w = w.add_balance(saldo, "deposito inicial", NOW)
    if pendente:
        w = w.add_pending(pendente, "venda", NOW)
    return w


# ---------- SALDO ----------


def test_credito():
    w = _carteira()
    depois = w.add_balance(Decimal("100"), "deposito", NOW + timedelta(minutes=1))
    assert w.balance == Decimal("0")
    assert depois.balance == Decimal("100")
    assert depois.lifetime_earnings == Decimal("100")
    assert depois.updated_at == NOW + timedelta(minutes=1)


def test_credito_nao_positivo():
    for valor in (Decimal("0"), Decimal("-1")):
        with pytest.raises(InvalidAmount):
            _carteira().add_balance(valor, "x", NOW)


def test_debito():
    w = _carteira(Decimal("100")).subtract_balance(Decimal("40"), "compra", NOW)
    assert w.balance == Decimal("60")
    assert w.lifetime_spending == Decimal("40")
    assert w.available_balance == Decimal("60")


def test_debito_maior_que_saldo():
    with pytest.raises(InsufficientFunds) as exc:
        _carteira(Decimal("100")).subtract_balance(Decimal("150"), "compra", NOW)
    assert exc.value.requested == Decimal("150")
    assert exc.value.available == Decimal("100")


def test_saldo_minimo():
    _carteira(Decimal("10")).validate_minimum_balance(Decimal("10"))
    with pytest.raises(InsufficientFunds):
        _carteira().validate_minimum_balance(Decimal("10"))


# ---------- TOKENS ----------


def test_tokens():
    w = _carteira().add_tokens(10, "bonus", NOW).spend_tokens(4, "uso", NOW)
    assert w.tokens == 6
    with pytest.raises(InsufficientFunds):
        w.spend_tokens(7, "uso", NOW)
    with pytest.raises(InvalidAmount):
        w.add_tokens(-1, "x", NOW)
    with pytest.raises(InvalidAmount):
        w.spend_tokens(-1, "x", NOW)


# ---------- PENDENTE ----------


def test_pendente_liberado_vira_saldo():
    w = _carteira(pendente=Decimal("50")).clear_pending(Decimal("20"), "compensado", NOW)
    assert w.pending_balance == Decimal("30")
    assert w.balance == Decimal("20")
    assert w.lifetime_earnings == Decimal("20")
    assert w.total_balance == Decimal("50")


def test_pendente_maior_que_disponivel():
    with pytest.raises(InvalidAmount):
        _carteira(pendente=Decimal("50")).clear_pending(Decimal("60"), "x", NOW)
    with pytest.raises(InvalidAmount):
        _carteira(pendente=Decimal("50")).cancel_pending(Decimal("60"), "x", NOW)


def test_pendente_cancelado_nao_vira_saldo():
    w = _carteira(pendente=Decimal("30")).cancel_pending(Decimal("30"), "estorno", NOW)
    assert w.pending_balance == Decimal("0")
    assert w.balance == Decimal("0")


# ---------- SAQUE / METRICAS ----------


def test_calculo_de_saque():
    p = _carteira(Decimal("100")).calculate_payout(Decimal("100"), Decimal("2.5"))
    assert p.fee_amount == Decimal("2.5")
    assert p.net_amount == Decimal("97.5")
    assert p.gross_amount == Decimal("100")


def test_saque_maior_que_saldo():
    with pytest.raises(InsufficientFunds):
        _carteira(Decimal("100")).calculate_payout(Decimal("101"), Decimal("1"))


def test_health_metrics():
    m = _carteira(Decimal("60"), Decimal("40")).health_metrics()
    assert m.total_balance == Decimal("100")
    assert m.pending_ratio == Decimal("0.4")
    assert m.net_earnings == Decimal("60")
    assert m.last_activity == NOW


def test_health_metrics_carteira_vazia():
    assert _carteira().health_metrics().pending_ratio == Decimal("0")


# ---------- BLOQUEIO ----------


def test_bloqueio_e_desbloqueio():
    w = _carteira(Decimal("10")).lock("suspeita de fraude", NOW)
    assert w.locked
    assert not w.is_active
    assert w.lock_reason == "suspeita de fraude"
    with pytest.raises(WalletLockError):
        w.lock("de novo", NOW)
    livre = w.unlock(NOW)
    assert livre.is_active
    assert livre.locked_at is None
    with pytest.raises(WalletLockError):
        livre.unlock(NOW)


def test_carteira_bloqueada_recusa_debitos_aceita_creditos():
    w = _carteira(Decimal("10")).add_tokens(5, "bonus", NOW).lock("auditoria", NOW)
    assert w.add_balance(Decimal("1"), "credito", NOW).balance == Decimal("11")
    with pytest.raises(WalletLockError):
        w.subtract_balance(Decimal("1"), "x", NOW)
    with pytest.raises(WalletLockError):
        w.spend_tokens(1, "x", NOW)
    with pytest.raises(WalletLockError):
        w.calculate_payout(Decimal("1"), Decimal("0"))
