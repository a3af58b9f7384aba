# tests/domain/test_assinatura.py
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pagamentos.domain.assinatura.entities import BillingInterval, Subscription
from pagamentos.domain.status.enums import SubscriptionStatus
from pagamentos.errors import InvalidAmount, InvalidStateTransition

S = SubscriptionStatus
INICIO = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _dia(n: int) -> datetime:
    return INICIO + timedelta(days=n)


def _assinatura(
    price: Decimal = Decimal("90.00"),
    interval: BillingInterval = BillingInterval.MONTHLY,
) -> Subscription:
    return Subscription.new("cliente-1", "plano-pro", price, interval, INICIO, subscription_id=uuid.UUID(int=1))


# ---------- CRIACAO ----------


def test_nova_assinatura_ativa_com_periodo_do_intervalo():
    s = _assinatura()
    assert s.status is S.ACTIVE
    assert s.current_period_start == INICIO
    assert s.current_period_end == _dia(30)
    assert s.next_billing_date == _dia(60)


def test_intervalos():
    assert _assinatura(interval=BillingInterval.QUARTERLY).current_period_end == _dia(90)
    assert _assinatura(interval=BillingInterval.YEARLY).current_period_end == _dia(365)


def test_periodo_invalido():
    with pytest.raises(ValueError):
        Subscription(
            id=uuid.UUID(int=2), customer_id="c", plan_id="p", price=Decimal("1"),
            interval=BillingInterval.MONTHLY, status=S.ACTIVE,
            current_period_start=INICIO, current_period_end=INICIO,
            created_at=INICIO, updated_at=INICIO,
        )


def test_preco_negativo():
    with pytest.raises(InvalidAmount):
        _assinatura(price=Decimal("-1"))


# ---------- PRORRATA ----------


def test_prorrata_no_inicio_do_periodo_e_a_diferenca_cheia():
    assert _assinatura().calculate_proration(Decimal("120.00"), INICIO) == Decimal("30.00")


def test_prorrata_na_metade():
    assert _assinatura().calculate_proration(Decimal("120.00"), _dia(15)) == Decimal("15.00")


def test_prorrata_downgrade_negativa():
    assert _assinatura().calculate_proration(Decimal("60.00"), _dia(15)) == Decimal("-15.00")


def test_prorrata_apos_fim_do_periodo_e_o_novo_preco():
    s = _assinatura()
    assert s.calculate_proration(Decimal("120.00"), _dia(30)) == Decimal("120.00")
    assert s.calculate_proration(Decimal("120.00"), _dia(45)) == Decimal("120.00")


def test_prorrata_antes_do_inicio_limitada_a_diferenca():
    assert _assinatura().calculate_proration(Decimal("120.00"), _dia(-1)) == Decimal("30.00")


def test_prorrata_arredonda_centavos():
    # 10 dias restantes de 30, diferenca 10 -> 3,333... -> 3.33
    s = _assinatura()
    assert s.calculate_proration(Decimal("100.00"), _dia(20)) == Decimal("3.33")


# ---------- TRIAL ----------


def test_trial():
    s = _assinatura().start_trial(14, INICIO)
    assert s.status is S.TRIALING
    assert s.trial_start == INICIO
    assert s.trial_end == _dia(14)
    assert s.in_trial(_dia(1))
    assert s.trial_days_remaining(_dia(1)) == 13
    assert s.trial_days_remaining(_dia(14)) is None
    assert not s.in_trial(_dia(15))


def test_trial_days_sem_trial():
    assert _assinatura().trial_days_remaining(INICIO) is None


def test_converter_trial():
    s = _assinatura().start_trial(7, INICIO).convert_trial_to_paid(_dia(3))
    assert s.status is S.ACTIVE
    assert s.trial_converted_at == _dia(3)


def test_converter_sem_trial_levanta():
    with pytest.raises(InvalidStateTransition):
        _assinatura().convert_trial_to_paid(INICIO)


# ---------- PAUSA / RETOMADA ----------


def test_pausa_mantem_acesso_ate_fim_do_periodo():
    s = _assinatura().pause(_dia(5), reason="ferias")
    assert s.status is S.PAUSED
    assert s.pause_collection == _dia(30)
    assert s.pause_reason == "ferias"
    with pytest.raises(InvalidStateTransition):
        s.pause(_dia(6))


def test_retomada_dentro_do_periodo_mantem_periodo():
    s = _assinatura().pause(_dia(5)).resume(_dia(10))
    assert s.status is S.ACTIVE
    assert s.pause_collection is None
    assert s.current_period_end == _dia(30)


def test_retomada_apos_periodo_abre_novo_ciclo():
    s = _assinatura().pause(_dia(5)).resume(_dia(40))
    assert s.current_period_start == _dia(40)
    assert s.current_period_end == _dia(70)
    assert s.is_active(_dia(41))


def test_retomada_de_cancelada_dentro_do_periodo():
    cancelada = _assinatura().cancel(_dia(5))
    assert cancelada.can_resume(_dia(10))
    assert cancelada.resume(_dia(10)).status is S.ACTIVE
    assert not cancelada.can_resume(_dia(31))
    with pytest.raises(InvalidStateTransition):
        cancelada.resume(_dia(31))


def test_retomar_ativa_levanta():
    with pytest.raises(InvalidStateTransition):
        _assinatura().resume(INICIO)


# ---------- CANCELAMENTO / ATRASO ----------


def test_cancelamento():
    s = _assinatura().cancel(_dia(2), reason="caro")
    assert s.status is S.CANCELLED
    assert s.cancelled_at == _dia(2)
    assert s.cancellation_reason == "caro"
    assert not s.can_cancel


def test_cancelar_pausada_levanta():
    with pytest.raises(InvalidStateTransition):
        _assinatura().pause(INICIO).cancel(_dia(1))


def test_atraso_e_carencia():
    s = _assinatura().mark_past_due(_dia(31))
    assert s.status is S.PAST_DUE
    assert s.can_cancel
    assert s.in_grace_period(_dia(32))
    assert s.in_grace_period(_dia(33))
    assert not s.in_grace_period(_dia(34))
    assert s.in_grace_period(_dia(34), grace_days=5)
    assert not _assinatura().in_grace_period(_dia(31))


def test_atraso_so_de_ativa():
    with pytest.raises(InvalidStateTransition):
        _assinatura().start_trial(7, INICIO).mark_past_due(_dia(1))


def test_update_billing_period_avanca_e_limpa_atraso():
    s = _assinatura().mark_past_due(_dia(31)).update_billing_period(_dia(31))
    assert s.status is S.ACTIVE
    assert s.current_period_start == _dia(30)
    assert s.current_period_end == _dia(60)
    assert s.updated_at == _dia(31)


def test_update_billing_period_antes_do_fim_nao_muda_periodo():
    s = _assinatura().update_billing_period(_dia(10))
    assert s.current_period_end == _dia(30)
    assert s.status is S.ACTIVE


# ---------- METRICAS ----------


def test_mrr_por_intervalo():
    assert _assinatura().monthly_recurring_revenue(INICIO) == Decimal("90.00")
    assert _assinatura(interval=BillingInterval.QUARTERLY).monthly_recurring_revenue(INICIO) == Decimal("30")
    assert _assinatura(price=Decimal("120"), interval=BillingInterval.YEARLY).monthly_recurring_revenue(INICIO) == Decimal("10")


def test_mrr_zero_quando_inativa():
    assert _assinatura().monthly_recurring_revenue(_dia(31)) == Decimal("0")
    assert _assinatura().pause(INICIO).monthly_recurring_revenue(_dia(1)) == Decimal("0")


def test_metrics():
    s = _assinatura(interval=BillingInterval.YEARLY)
    m = s.metrics(_dia(65))
    assert m.is_active
    assert not m.in_trial
    assert m.age_days == 65
    assert m.lifetime_value == Decimal("180.00")
    assert m.mrr == Decimal("7.5")
