# pagamentos/domain/dinheiro/value_objects.py
#
# Money value object and the BRL display format (R$ 1.234,56).
#
# Design decisions:
#   - Decimal only. Constructing Money from a float raises TypeError: a float
#     has already lost the exact cents by the time it reaches us.
#   - Money is non-negative unless built with signed=True, which marks a ledger
#     delta (credit/debit). Subtraction always yields a signed result.
#   - format_brl rounds half-up to centavos for display. Arithmetic itself
#     never rounds; callers quantize explicitly with centavos().
#   - parse_brl accepts exactly what format_brl produces, plus the same format
#     without the "R$" prefix or the thousands dots ("100,50").
from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from pagamentos.errors import InvalidAmount

CENTAVO = Decimal("0.01")

_BRL_RE = re.compile(r"^(-)?\s*(?:R\$\s*)?(\d{1,3}(?:\.\d{3})+|\d+)(?:,(\d{1,2}))?$")


def centavos(valor: Decimal) -> Decimal:
    """Quantize to two fraction digits, half-up (regra comercial)."""
    return valor.quantize(CENTAVO, rounding=ROUND_HALF_UP)


def format_brl(valor: Decimal) -> str:
    """R$ 1.234,56: ponto como milhar, virgula como decimal."""
    if isinstance(valor, float):
        raise TypeError("format_brl exige Decimal, nunca float")
    q = centavos(Decimal(valor))
    sinal = "-" if q < 0 else ""
    inteiro, _, fracao = f"{abs(q):.2f}".partition(".")
    grupos: list[str] = []
    while len(inteiro) > 3:
        grupos.insert(0, inteiro[-3:])
        inteiro = inteiro[:-3]
    grupos.insert(0, inteiro)
    return f"{sinal}R$ {'.'.join(grupos)},{fracao}"


def parse_brl(texto: str) -> Decimal:
    """Inverse of format_brl.

    Raises:
        InvalidAmount: if *texto* is not in the R$ display format.
    """
    m = _BRL_RE.match(texto.strip())
    if m is None:
        raise InvalidAmount(f"formato BRL nao reconhecido: {texto!r}")
    sinal, inteiro, fracao = m.groups()
    valor = Decimal(f"{inteiro.replace('.', '')}.{(fracao or '0').ljust(2, '0')}")
    return -valor if sinal else valor


@dataclass(frozen=True)
class Money:
    """Valor monetario em Decimal. Nunca float. Negativo so como delta de razao."""

    valor: Decimal
    signed: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.valor, float):
            raise TypeError("Money exige Decimal, nunca float")
        if not isinstance(self.valor, Decimal):
            object.__setattr__(self, "valor", Decimal(self.valor))
        if not self.valor.is_finite():
            raise InvalidAmount(f"valor nao finito: {self.valor}")
        if self.valor < 0 and not self.signed:
            raise InvalidAmount(f"valor negativo: {self.valor}")

    @classmethod
    def zero(cls) -> Money:
        return cls(Decimal("0"))

    @classmethod
    def delta(cls, valor: Decimal) -> Money:
        """Signed ledger movement (credit > 0, debit < 0)."""
        return cls(valor, signed=True)

    @classmethod
    def from_brl(cls, texto: str) -> Money:
        return cls(parse_brl(texto))

    def __add__(self, other: Money) -> Money:
        return Money(self.valor + other.valor, signed=self.signed or other.signed)

    def __sub__(self, other: Money) -> Money:
        return Money.delta(self.valor - other.valor)

    def __mul__(self, fator: Decimal) -> Money:
        if isinstance(fator, float):
            raise TypeError("fator deve ser Decimal, nunca float")
        return Money(self.valor * fator, signed=self.signed)

    def __neg__(self) -> Money:
        return Money.delta(-self.valor)

    def __lt__(self, other: Money) -> bool:
        return self.valor < other.valor

    def __le__(self, other: Money) -> bool:
        return self.valor <= other.valor

    def centavos(self) -> Money:
        return Money(centavos(self.valor), signed=self.signed)

    @property
    def formatado(self) -> str:
        return format_brl(self.valor)

    def __str__(self) -> str:
        return self.formatado
