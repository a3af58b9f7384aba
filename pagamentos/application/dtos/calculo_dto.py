# pagamentos/application/dtos/calculo_dto.py
from __future__ import annotations

from pydantic import BaseModel

from pagamentos.domain.dinheiro.value_objects import centavos, format_brl
from pagamentos.domain.frete.calculator import ShippingQuote
from pagamentos.domain.tributos.calculator import TaxBreakdown


class TributoDTO(BaseModel):
    tipo: str
    aliquota: str
    valor: str


class TributosDTO(BaseModel):
    valor_bruto: str
    tributos: list[TributoDTO]
    total_tributos: str
    valor_liquido: str
    valor_liquido_formatado: str
    moeda: str

    @classmethod
    def from_domain(cls, breakdown: TaxBreakdown) -> TributosDTO:
        return cls(
            valor_bruto=str(centavos(breakdown.gross_amount)),
            tributos=[
                TributoDTO(tipo=c.tipo.value, aliquota=str(c.rate), valor=str(centavos(c.amount)))
                for c in breakdown.components
            ],
            total_tributos=str(centavos(breakdown.total_taxes)),
            valor_liquido=str(centavos(breakdown.net_amount)),
            valor_liquido_formatado=format_brl(breakdown.net_amount),
            moeda=breakdown.currency,
        )


class FreteDTO(BaseModel):
    custo: str
    custo_formatado: str
    prazo_dias_uteis: int
    transportadora: str
    multiplicador: str

    @classmethod
    def from_domain(cls, quote: ShippingQuote) -> FreteDTO:
        return cls(
            custo=str(centavos(quote.cost)),
            custo_formatado=format_brl(quote.cost),
            prazo_dias_uteis=quote.delivery_days,
            transportadora=quote.carrier,
            multiplicador=str(quote.multiplier),
        )
