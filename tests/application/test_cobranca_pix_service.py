# tests/application/test_cobranca_pix_service.py
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pagamentos.application.services.cobranca_pix_service import gerar_cobranca_pix, txid_for
from pagamentos.config import AmountLimits, KernelConfig
from pagamentos.domain.pagamento.entities import Payment, PaymentMethod
from pagamentos.domain.pix.encoder import parse_tlv, verify_crc
from pagamentos.domain.pix.value_objects import PixKey, PixKeyType
from pagamentos.domain.status.enums import PaymentStatus
from pagamentos.errors import AmountOutOfRange, InvalidAmount, InvalidPixData, InvalidStateTransition

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
PAYMENT_ID = uuid.UUID("12345678-1234-5678-1234-567812345678")
CHAVE = PixKey(PixKeyType.EMAIL, "pagamentos@pleme.com.br")
CONFIG = KernelConfig(merchant_name="Pleme Payment", merchant_city="Sao Paulo")


def _pagamento(valor: str = "150.00", metodo: PaymentMethod = PaymentMethod.PIX) -> Payment:
    return Payment.new(Decimal(valor), metodo, NOW, payment_id=PAYMENT_ID)


def _campos(payload: str) -> dict[str, str]:
    return {f.tag: f.value for f in parse_tlv(payload)}


def test_cobranca_pix():
    dto = gerar_cobranca_pix(_pagamento(), CHAVE, NOW, CONFIG)
    assert verify_crc(dto.payload)
    campos = _campos(dto.payload)
    assert campos["54"] == "150.00"
    assert campos["59"] == "Pleme Payment"
    assert campos["60"] == "Sao Paulo"
    assert dto.txid == PAYMENT_ID.hex[:25]
    assert dto.txid == txid_for(_pagamento())
    assert dto.valor == "150.00"
    assert dto.valor_formatado == "R$ 150,00"
    assert dto.chave_tipo == "email"
    assert dto.payment_id == str(PAYMENT_ID)
    assert dto.expira_em == NOW + timedelta(minutes=30)


def test_mesmo_pagamento_mesmo_payload():
    a = gerar_cobranca_pix(_pagamento(), CHAVE, NOW, CONFIG)
    b = gerar_cobranca_pix(_pagamento(), CHAVE, NOW + timedelta(minutes=5), CONFIG)
    assert a.payload == b.payload


def test_sem_cidade_omite_campo_60():
    dto = gerar_cobranca_pix(_pagamento(), CHAVE, NOW, KernelConfig(merchant_city=""))
    assert "60" not in _campos(dto.payload)


def test_pagamento_que_nao_e_pix():
    with pytest.raises(InvalidPixData):
        gerar_cobranca_pix(_pagamento(metodo=PaymentMethod.BOLETO), CHAVE, NOW, CONFIG)


def test_valor_fora_dos_limites():
    config = KernelConfig(amount_limits=AmountLimits(minimo=Decimal("0.01"), maximo=Decimal("100")))
    with pytest.raises(AmountOutOfRange) as exc:
        gerar_cobranca_pix(_pagamento(), CHAVE, NOW, config)
    assert exc.value.bound == "max"


def test_valor_zero():
    with pytest.raises(InvalidAmount):
        gerar_cobranca_pix(_pagamento("0"), CHAVE, NOW, CONFIG)


def test_limite_aplicado_ao_valor_com_imposto():
    pagamento = Payment.new(Decimal("1000000.00"), PaymentMethod.PIX, NOW, tax=Decimal("500"), payment_id=PAYMENT_ID)
    with pytest.raises(AmountOutOfRange) as exc:
        gerar_cobranca_pix(pagamento, CHAVE, NOW, CONFIG)
    assert exc.value.actual == Decimal("1000500.00")


def test_valor_com_imposto_no_limite_e_aceito():
    pagamento = Payment.new(Decimal("999500.00"), PaymentMethod.PIX, NOW, tax=Decimal("500"), payment_id=PAYMENT_ID)
    dto = gerar_cobranca_pix(pagamento, CHAVE, NOW, CONFIG)
    assert dto.valor == "1000000.00"
    assert _campos(dto.payload)["54"] == "1000000.00"


# ---------- STATUS ----------


def test_pagamento_cancelado_nao_gera_cobranca():
    with pytest.raises(InvalidStateTransition):
        gerar_cobranca_pix(_pagamento().cancel(NOW), CHAVE, NOW, CONFIG)


def test_pagamento_ja_pago_nao_gera_cobranca():
    with pytest.raises(InvalidStateTransition):
        gerar_cobranca_pix(_pagamento().mark_paid(NOW), CHAVE, NOW, CONFIG)


def test_pagamento_falho_nao_gera_cobranca():
    with pytest.raises(InvalidStateTransition):
        gerar_cobranca_pix(_pagamento().mark_failed("recusado", NOW), CHAVE, NOW, CONFIG)


def test_pagamento_aguardando_gera_cobranca():
    aguardando = _pagamento().transition_to(PaymentStatus.AWAITING_PAYMENT, NOW)
    assert verify_crc(gerar_cobranca_pix(aguardando, CHAVE, NOW, CONFIG).payload)
