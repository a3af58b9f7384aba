# pagamentos/domain/tributos/calculator.py
#
# ICMS / ISS / PIS / COFINS computation.
#
# Design decisions:
#   - Rates are data (TaxTable), loaded from data/tributos.json by the
#     infrastructure layer. This module only holds the algorithm that consumes
#     them, so a rate change never touches code.
#   - Every multiplication is Decimal * Decimal. No rounding happens here; the
#     breakdown keeps exact values and display code quantizes.
#   - TaxBreakdown stores only the gross amount and the components. total and
#     net are derived properties, so net = gross - sum(components) cannot drift.
#   - Goods: ICMS + PIS + COFINS. Services: ISS + PIS + COFINS.
#   - Unknown UF / municipio falls back to the table's default rate.
from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import StrEnum

from pagamentos.errors import InvalidAmount
from pagamentos.log import log

ZERO = Decimal("0")


class TaxType(StrEnum):
    ICMS = "ICMS"
    ISS = "ISS"
    PIS = "PIS"
    COFINS = "COFINS"


@dataclass(frozen=True)
class TaxTable:
    """Aliquotas em fracao (0.18 = 18%). Construida por infrastructure.tabelas."""

    icms_por_uf: Mapping[str, Decimal]
    icms_padrao: Decimal
    iss_por_municipio: Mapping[str, Decimal]
    iss_padrao: Decimal
    pis: Decimal
    cofins: Decimal


@dataclass(frozen=True)
class TaxComponent:
    tipo: TaxType
    rate: Decimal
    amount: Decimal


@dataclass(frozen=True)
class TaxExemption:
    """Isencao parcial: exemption_rate 0.5 reduz o tributo pela metade."""

    tipo: TaxType
    exemption_rate: Decimal

    def __post_init__(self) -> None:
        if not ZERO <= self.exemption_rate <= Decimal("1"):
            raise ValueError(f"exemption_rate fora de [0, 1]: {self.exemption_rate}")


@dataclass(frozen=True)
class TaxBreakdown:
    """Valor bruto + componentes. Total e liquido sao derivados, nunca armazenados."""

    gross_amount: Decimal
    components: tuple[TaxComponent, ...]
    currency: str = "BRL"

    def amount_of(self, tipo: TaxType) -> Decimal:
        return sum((c.amount for c in self.components if c.tipo is tipo), ZERO)

    def rate_of(self, tipo: TaxType) -> Decimal | None:
        for c in self.components:
            if c.tipo is tipo:
                return c.rate
        return None

    @property
    def icms(self) -> Decimal:
        return self.amount_of(TaxType.ICMS)

    @property
    def iss(self) -> Decimal:
        return self.amount_of(TaxType.ISS)

    @property
    def pis(self) -> Decimal:
        return self.amount_of(TaxType.PIS)

    @property
    def cofins(self) -> Decimal:
        return self.amount_of(TaxType.COFINS)

    @property
    def is_service(self) -> bool:
        return any(c.tipo is TaxType.ISS for c in self.components)

    @property
    def total_taxes(self) -> Decimal:
        return sum((c.amount for c in self.components), ZERO)

    @property
    def net_amount(self) -> Decimal:
        return self.gross_amount - self.total_taxes


def _normalizar(chave: str) -> str:
    """'São Paulo ' -> 'SAO PAULO'."""
    decomposed = unicodedata.normalize("NFKD", chave.strip().upper())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def _checar_valor(subtotal: Decimal) -> None:
    if isinstance(subtotal, float):
        raise TypeError("subtotal deve ser Decimal, nunca float")
    if subtotal < ZERO:
        raise InvalidAmount(f"subtotal negativo: {subtotal}")


def icms_rate(uf: str, tabela: TaxTable) -> Decimal:
    return tabela.icms_por_uf.get(_normalizar(uf), tabela.icms_padrao)


def iss_rate(municipio: str, tabela: TaxTable) -> Decimal:
    return tabela.iss_por_municipio.get(_normalizar(municipio), tabela.iss_padrao)


def calculate_icms(subtotal: Decimal, uf: str, tabela: TaxTable) -> Decimal:
    _checar_valor(subtotal)
    return subtotal * icms_rate(uf, tabela)


def calculate_iss(subtotal: Decimal, municipio: str, tabela: TaxTable) -> Decimal:
    _checar_valor(subtotal)
    return subtotal * iss_rate(municipio, tabela)


def calculate_pis(subtotal: Decimal, tabela: TaxTable) -> Decimal:
    _checar_valor(subtotal)
    return subtotal * tabela.pis


def calculate_cofins(subtotal: Decimal, tabela: TaxTable) -> Decimal:
    _checar_valor(subtotal)
    return subtotal * tabela.cofins


def calculate_tax_breakdown(
    gross_amount: Decimal,
    uf: str,
    tabela: TaxTable,
    *,
    is_service: bool = False,
    municipio: str | None = None,
) -> TaxBreakdown:
    """Funcao pura. Mesma entrada = mesma saida.

    For services the ISS lookup uses *municipio* when given, otherwise the UF
    code itself (the ISS table carries UF aliases such as "SP").

    Raises:
        InvalidAmount: gross_amount is negative.
    """
    _checar_valor(gross_amount)
    if is_service:
        local = municipio if municipio is not None else uf
        primeiro = TaxComponent(TaxType.ISS, iss_rate(local, tabela), calculate_iss(gross_amount, local, tabela))
    else:
        primeiro = TaxComponent(TaxType.ICMS, icms_rate(uf, tabela), calculate_icms(gross_amount, uf, tabela))

    breakdown = TaxBreakdown(
        gross_amount=gross_amount,
        components=(
            primeiro,
            TaxComponent(TaxType.PIS, tabela.pis, calculate_pis(gross_amount, tabela)),
            TaxComponent(TaxType.COFINS, tabela.cofins, calculate_cofins(gross_amount, tabela)),
        ),
    )
    log(
        f"Tributos calculados: uf={uf} servico={is_service} bruto={gross_amount} "
        f"total={breakdown.total_taxes} liquido={breakdown.net_amount}"
    )
    return breakdown


def calculate_total_tax(
    subtotal: Decimal,
    uf: str,
    tabela: TaxTable,
    *,
    is_service: bool = False,
    municipio: str | None = None,
) -> Decimal:
    return calculate_tax_breakdown(
        subtotal, uf, tabela, is_service=is_service, municipio=municipio
    ).total_taxes


def apply_exemptions(breakdown: TaxBreakdown, exemptions: Iterable[TaxExemption]) -> TaxBreakdown:
    """Reduce matching components by each exemption, in order.

    Two exemptions on the same tax compound. An exemption for a tax that is
    not in the breakdown is ignored.
    """
    components = list(breakdown.components)
    for exemption in exemptions:
        for i, c in enumerate(components):
            if c.tipo is exemption.tipo:
                components[i] = replace(c, amount=c.amount * (Decimal("1") - exemption.exemption_rate))
        log(f"Isencao aplicada: {exemption.tipo.value} {exemption.exemption_rate}")
    return replace(breakdown, components=tuple(components))
