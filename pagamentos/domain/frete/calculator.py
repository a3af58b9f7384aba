# pagamentos/domain/frete/calculator.py
#
# Shipping zone classification, cost and delivery estimate.
#
# Design decisions:
#   - The UF -> region partition and tariff constants are data (ShippingTable,
#     from data/frete.json). The tier rules below are the algorithm.
#   - zone_multiplier evaluates its rules in a fixed order and stops at the
#     first match. The result is deterministic for an ordered (origem, destino)
#     pair but NOT symmetric: CO -> SE and N -> NE fall through to the default.
#     Downstream quotes depend on this exact behavior; keep the order.
#   - UF codes are compared case-insensitively. An unknown UF has no region and
#     can only match the same-state rule or the default.
#
# Invariants:
#   - zone_multiplier(x, x) == mesmo_estado for any x.
#   - Costs are Decimal, never rounded here.
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal
from enum import StrEnum

from pagamentos.errors import InvalidAmount
from pagamentos.log import log


class Region(StrEnum):
    SUDESTE = "sudeste"
    SUL = "sul"
    NORDESTE = "nordeste"
    NORTE = "norte"
    CENTRO_OESTE = "centro_oeste"


class ShippingService(StrEnum):
    EXPRESS = "express"
    STANDARD = "standard"
    ECONOMY = "economy"


@dataclass(frozen=True)
class ZoneMultipliers:
    mesmo_estado: Decimal
    mesma_regiao: Decimal
    regiao_adjacente: Decimal
    regiao_distante: Decimal
    padrao: Decimal


@dataclass(frozen=True)
class ShippingTable:
    """Particao UF -> regiao e constantes de tarifa. Construida por infrastructure.tabelas."""

    regioes: Mapping[Region, frozenset[str]]
    custo_base: Decimal
    custo_por_kg: Decimal
    custo_internacional: Decimal
    multiplicadores: ZoneMultipliers


@dataclass(frozen=True)
class ShippingQuote:
    cost: Decimal
    delivery_days: int
    carrier: str
    multiplier: Decimal


# Pares (origem, destino) ordenados: CO->SE e N->NE caem no padrao.
ADJACENT_PAIRS: frozenset[tuple[Region, Region]] = frozenset({
    (Region.SUDESTE, Region.SUL),
    (Region.SUDESTE, Region.CENTRO_OESTE),
    (Region.SUL, Region.SUDESTE),
})

DISTANT_PAIRS: frozenset[tuple[Region, Region]] = frozenset({
    (Region.SUDESTE, Region.NORTE),
    (Region.NORTE, Region.SUDESTE),
    (Region.SUL, Region.NORTE),
    (Region.NORTE, Region.SUL),
})

# Prazo base em dias uteis: (mesmo estado, demais rotas).
DELIVERY_DAYS: dict[ShippingService, tuple[int, int]] = {
    ShippingService.EXPRESS: (1, 2),
    ShippingService.STANDARD: (2, 5),
    ShippingService.ECONOMY: (3, 7),
}

# Faixas de peso (kg, exclusivo) -> transportadora. Ultima faixa sem limite.
CARRIER_BY_WEIGHT: tuple[tuple[Decimal | None, str], ...] = (
    (Decimal("1"), "Correios PAC Mini"),
    (Decimal("30"), "Correios PAC"),
    (Decimal("100"), "Transportadora Regional"),
    (None, "Transportadora Pesada"),
)
LOCAL_CARRIER = "Local Courier"


def _uf(codigo: str) -> str:
    return codigo.strip().upper()


def region_of(uf: str, tabela: ShippingTable) -> Region | None:
    codigo = _uf(uf)
    for regiao, ufs in tabela.regioes.items():
        if codigo in ufs:
            return regiao
    return None


def zone_multiplier(origem: str, destino: str, tabela: ShippingTable) -> Decimal:
    """Tier multiplier for shipping from *origem* to *destino* (first match wins).

    1. same state        -> mesmo_estado (1.00)
    2. same region       -> mesma_regiao (1.20)
    3. adjacent pair     -> regiao_adjacente (1.50)
    4. distant pair      -> regiao_distante (1.80)
    5. anything else     -> padrao (1.60)
    """
    m = tabela.multiplicadores
    if _uf(origem) == _uf(destino):
        return m.mesmo_estado

    r_origem = region_of(origem, tabela)
    r_destino = region_of(destino, tabela)
    if r_origem is None or r_destino is None:
        return m.padrao
    if r_origem is r_destino:
        return m.mesma_regiao
    if (r_origem, r_destino) in ADJACENT_PAIRS:
        return m.regiao_adjacente
    if (r_origem, r_destino) in DISTANT_PAIRS:
        return m.regiao_distante
    return m.padrao


def calculate_shipping_cost(
    weight_kg: Decimal,
    origem: str,
    destino: str,
    tabela: ShippingTable,
    *,
    country: str = "BR",
) -> Decimal:
    """(custo_base + peso * custo_por_kg) * multiplicador. Fora do Brasil: tarifa fixa.

    Raises:
        InvalidAmount: negative weight.
    """
    if isinstance(weight_kg, float):
        raise TypeError("weight_kg deve ser Decimal, nunca float")
    if weight_kg < 0:
        raise InvalidAmount(f"peso negativo: {weight_kg}")
    if _uf(country) != "BR":
        return tabela.custo_internacional
    base = tabela.custo_base + weight_kg * tabela.custo_por_kg
    return base * zone_multiplier(origem, destino, tabela)


def estimate_delivery_days(
    origem: str,
    destino: str,
    tabela: ShippingTable,
    *,
    service: ShippingService = ShippingService.STANDARD,
) -> int:
    mesmo_estado, base = DELIVERY_DAYS[service]
    if _uf(origem) == _uf(destino):
        return mesmo_estado
    dias = Decimal(base) * zone_multiplier(origem, destino, tabela)
    return int(dias.to_integral_value(rounding=ROUND_CEILING))


def recommend_carrier(weight_kg: Decimal, origem: str, destino: str) -> str:
    if _uf(origem) == _uf(destino):
        return LOCAL_CARRIER
    for limite, carrier in CARRIER_BY_WEIGHT:
        if limite is None or weight_kg < limite:
            return carrier
    return CARRIER_BY_WEIGHT[-1][1]


def quote_shipping(
    weight_kg: Decimal,
    origem: str,
    destino: str,
    tabela: ShippingTable,
    *,
    service: ShippingService = ShippingService.STANDARD,
    country: str = "BR",
) -> ShippingQuote:
    """Cost, ETA and carrier in one call."""
    quote = ShippingQuote(
        cost=calculate_shipping_cost(weight_kg, origem, destino, tabela, country=country),
        delivery_days=estimate_delivery_days(origem, destino, tabela, service=service),
        carrier=recommend_carrier(weight_kg, origem, destino),
        multiplier=zone_multiplier(origem, destino, tabela),
    )
    log(
        f"Frete cotado: {_uf(origem)}->{_uf(destino)} peso={weight_kg} "
        f"custo={quote.cost} prazo={quote.delivery_days}d"
    )
    return quote
