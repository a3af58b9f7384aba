# pagamentos/application/dtos/cobranca_pix_dto.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class CobrancaPixDTO(BaseModel):
    payment_id: str
    txid: str
    payload: str
    valor: str
    valor_formatado: str
    chave_tipo: str
    merchant_name: str
    merchant_city: str | None
    gerado_em: datetime
    expira_em: datetime
