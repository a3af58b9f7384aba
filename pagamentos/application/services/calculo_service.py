# pagamentos/application/services/calculo_service.py
#
# Tax and shipping quotes over the tables in data/*.json.
#
# Imperative shell: loads the tables (cached) and calls the pure calculators.
from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from pathlib import Path

from pagamentos.domain.frete.calculator import ShippingService, quote_shipping
from pagamentos.domain.tributos.calculator import (
    TaxBreakdown,
    TaxExemption,
    apply_exemptions,
    calculate_tax_breakdown,
)
from pagamentos.infrastructure.tabelas import load_shipping_table, load_tax_table

from ..dtos.calculo_dto import FreteDTO, TributosDTO


def calcular_tributos(
    gross_amount: Decimal,
    uf: str,
    *,
    is_service: bool = False,
    municipio: str | None = None,
    exemptions: Iterable[TaxExemption] = (),
    tabelas_dir: Path | None = None,
) -> TaxBreakdown:
    tabela = load_tax_table(tabelas_dir)
    breakdown = calculate_tax_breakdown(gross_amount, uf, tabela, is_service=is_service, municipio=municipio)
    return apply_exemptions(breakdown, exemptions)


def resumo_tributos(
    gross_amount: Decimal,
    uf: str,
    *,
    is_service: bool = False,
    municipio: str | None = None,
    exemptions: Iterable[TaxExemption] = (),
    tabelas_dir: Path | None = None,
) -> TributosDTO:
    return TributosDTO.from_domain(
        calcular_tributos(
            gross_amount, uf,
            is_service=is_service, municipio=municipio, exemptions=exemptions, tabelas_dir=tabelas_dir,
        )
    )


def cotar_frete(
    weight_kg: Decimal,
    origem: str,
    destino: str,
    *,
    service: ShippingService = ShippingService.STANDARD,
    country: str = "BR",
    tabelas_dir: Path | None = None,
) -> FreteDTO:
    quote = quote_shipping(weight_kg, origem, destino, load_shipping_table(tabelas_dir), service=service, country=country)
    return FreteDTO.from_domain(quote)
