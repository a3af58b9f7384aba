# pagamentos/application/dtos/recibo_dto.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ReciboDTO(BaseModel):
    """Comprovante de pagamento em portugues. Documento do cliente sempre mascarado."""

    transaction_id: str
    data: datetime
    valor: str
    valor_formatado: str
    metodo_pagamento: str
    status: str
    merchant_name: str
    merchant_cnpj: str
    customer_document: str
    end_to_end_id: str | None = None

    def linhas(self) -> list[str]:
        """Texto pronto para impressao, uma linha por campo."""
        out = [
            self.merchant_name,
            f"CNPJ: {self.merchant_cnpj}",
            f"Transacao: {self.transaction_id}",
            f"Data: {self.data:%d/%m/%Y %H:%M}",
            f"Valor: {self.valor_formatado}",
            f"Forma de pagamento: {self.metodo_pagamento}",
            f"Situacao: {self.status}",
        ]
        if self.customer_document:
            out.append(f"Pagador: {self.customer_document}")
        if self.end_to_end_id:
            out.append(f"ID fim-a-fim: {self.end_to_end_id}")
        return out
