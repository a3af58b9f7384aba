# pagamentos/application/services/recibo_service.py
from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from pagamentos.config import KernelConfig, get_config
from pagamentos.domain.dinheiro.value_objects import centavos, format_brl
from pagamentos.domain.documento.value_objects import format_cnpj, mask_cpf, only_digits
from pagamentos.domain.pagamento.entities import Payment, PaymentMethod
from pagamentos.domain.status.enums import label
from pagamentos.log import log

from ..dtos.recibo_dto import ReciboDTO

SAO_PAULO = ZoneInfo("America/Sao_Paulo")

METODO_DESCRICAO: dict[PaymentMethod, str] = {
    PaymentMethod.PIX: "PIX",
    PaymentMethod.BOLETO: "Boleto bancário",
    PaymentMethod.CREDIT_CARD: "Cartão de crédito",
    PaymentMethod.DEBIT_CARD: "Cartão de débito",
}


def _documento_exibicao(documento: str | None) -> str:
    """CPF sempre mascarado; CNPJ formatado; vazio quando ausente."""
    if not documento:
        return ""
    digitos = only_digits(documento)
    if len(digitos) == 14:
        return format_cnpj(digitos)
    return mask_cpf(digitos)


def gerar_recibo(
    payment: Payment,
    now: datetime,
    customer_document: str | None = None,
    config: KernelConfig | None = None,
) -> ReciboDTO:
    cfg = config or get_config()
    momento = now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)
    recibo = ReciboDTO(
        transaction_id=str(payment.id),
        data=momento.astimezone(SAO_PAULO),
        valor=str(centavos(payment.total_amount)),
        valor_formatado=format_brl(payment.total_amount),
        metodo_pagamento=METODO_DESCRICAO[payment.method],
        status=label(payment.status),
        merchant_name=cfg.receipt_merchant_name,
        merchant_cnpj=cfg.receipt_merchant_cnpj,
        customer_document=_documento_exibicao(customer_document),
        end_to_end_id=payment.end_to_end_id,
    )
    log(f"Recibo gerado: transacao={recibo.transaction_id}")
    return recibo
