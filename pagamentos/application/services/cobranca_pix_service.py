# pagamentos/application/services/cobranca_pix_service.py
#
# PIX charge for a payment: validates, encodes the BR Code, returns a DTO.
#
# The merchant name and city come from KernelConfig, passed in explicitly or
# taken from get_config() when omitted. The txid is derived from the payment
# id, so the same payment always yields the same BR Code.
from __future__ import annotations

from datetime import datetime, timedelta

from pagamentos.config import KernelConfig, get_config
from pagamentos.domain.dinheiro.value_objects import centavos, format_brl
from pagamentos.domain.pagamento.entities import DEFAULT_EXPIRY_MINUTES, Payment, PaymentMethod, check_amount
from pagamentos.domain.pix.encoder import TXID_LEN, PixCharge, generate_qr_payload
from pagamentos.domain.pix.value_objects import PixKey
from pagamentos.domain.status.enums import PaymentStatus
from pagamentos.domain.status.transitions import can_transition_to
from pagamentos.errors import InvalidPixData, InvalidStateTransition
from pagamentos.log import log

from ..dtos.cobranca_pix_dto import CobrancaPixDTO


def txid_for(payment: Payment) -> str:
    return payment.id.hex[:TXID_LEN]


def gerar_cobranca_pix(
    payment: Payment,
    chave: PixKey,
    now: datetime,
    config: KernelConfig | None = None,
) -> CobrancaPixDTO:
    """Raises InvalidPixData, InvalidStateTransition, InvalidAmount/AmountOutOfRange
    or EncodingFailure.

    The limits apply to the charged value (amount + tax), which is what goes
    into tag 54.
    """
    cfg = config or get_config()
    if payment.method is not PaymentMethod.PIX:
        raise InvalidPixData(f"pagamento {payment.id} nao e PIX ({payment.method.value})")
    if payment.status is PaymentStatus.PAID or not can_transition_to(payment.status, PaymentStatus.PAID):
        raise InvalidStateTransition(payment.status, PaymentStatus.PAID)
    valor = payment.total_amount
    check_amount(valor, cfg.amount_limits)

    charge = PixCharge(
        chave=chave,
        merchant_name=cfg.merchant_name,
        amount=valor,
        transaction_id=txid_for(payment),
        merchant_city=cfg.merchant_city,
    )
    payload = generate_qr_payload(charge)
    log(f"Cobranca PIX criada: pagamento={payment.id} produto={cfg.product}")

    return CobrancaPixDTO(
        payment_id=str(payment.id),
        txid=charge.transaction_id or "",
        payload=payload,
        valor=str(centavos(charge.amount)),
        valor_formatado=format_brl(charge.amount),
        chave_tipo=chave.tipo.value,
        merchant_name=cfg.merchant_name,
        merchant_city=cfg.merchant_city,
        gerado_em=now,
        expira_em=now + timedelta(minutes=DEFAULT_EXPIRY_MINUTES),
    )
