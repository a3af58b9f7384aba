# pagamentos/config.py
#
# Kernel configuration loaded from environment variables.
#
# Design decisions:
#   - Frozen dataclasses, same as the rest of the domain. pydantic is used only
#     where data crosses a boundary (JSON tables, outward DTOs).
#   - The product/tenant name is a config field handed to callers explicitly.
#     Nothing inside the domain reads os.environ on its own.
#   - Monetary limits are parsed with Decimal(str), never float.
#   - get_config() is cached. Tests that need different values build a
#     KernelConfig directly and pass it (or its parts) as arguments.
#
# Invariants:
#   - AmountLimits.minimo <= AmountLimits.maximo, both positive.
#   - tabelas_dir is an existing directory path (checked lazily by the loader).
from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_PACKAGE_DIR = Path(__file__).parent


@dataclass(frozen=True)
class AmountLimits:
    """Faixa aceita para valor de um pagamento (PIX: minimo R$0,01)."""

    minimo: Decimal = Decimal("0.01")
    maximo: Decimal = Decimal("1000000.00")

    def __post_init__(self) -> None:
        if self.minimo <= Decimal("0"):
            raise ValueError("AmountLimits.minimo deve ser positivo")
        if self.minimo > self.maximo:
            raise ValueError("AmountLimits.minimo maior que maximo")


@dataclass(frozen=True)
class PixLimits:
    """Limites usados pela verificacao de conformidade BCB."""

    diario: Decimal = Decimal("20000")
    mensal: Decimal = Decimal("100000")
    valor_alto: Decimal = Decimal("1000")
    horario_inicio: int = 6
    horario_fim: int = 20


@dataclass(frozen=True)
class KernelConfig:
    """Immutable kernel configuration.

    Invariants:
      - merchant_name and product are non-empty.
      - amount_limits and pix_limits are always populated.
    """

    product: str = "pleme"
    merchant_name: str = "Pleme Payment"
    merchant_city: str = "Sao Paulo"
    receipt_merchant_name: str = "Pleme Tecnologia Ltda"
    receipt_merchant_cnpj: str = "11.222.333/0001-81"
    tabelas_dir: Path = _PACKAGE_DIR / "data"
    log_enabled: bool = False
    amount_limits: AmountLimits = field(default_factory=AmountLimits)
    pix_limits: PixLimits = field(default_factory=PixLimits)


def _decimal_env(name: str, default: str) -> Decimal:
    raw = os.environ.get(name, default)
    try:
        return Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError(f"{name} invalido: {raw!r} nao e um decimal") from exc


def load_config() -> KernelConfig:
    """Build KernelConfig from environment variables.

    Raises:
        ValueError: if a numeric variable cannot be parsed, or PIX_MERCHANT_NAME
            is set to an empty string.
    """
    merchant_name = os.environ.get("PIX_MERCHANT_NAME", "Pleme Payment").strip()
    if not merchant_name:
        raise ValueError("PIX_MERCHANT_NAME nao pode ser vazio")

    tabelas_dir = Path(os.environ.get("PAGAMENTOS_TABELAS_DIR", str(_PACKAGE_DIR / "data")))

    return KernelConfig(
        product=os.environ.get("PAGAMENTOS_PRODUCT", "pleme"),
        merchant_name=merchant_name,
        merchant_city=os.environ.get("PIX_MERCHANT_CITY", "Sao Paulo"),
        receipt_merchant_name=os.environ.get("RECEIPT_MERCHANT_NAME", "Pleme Tecnologia Ltda"),
        receipt_merchant_cnpj=os.environ.get("RECEIPT_MERCHANT_CNPJ", "11.222.333/0001-81"),
        tabelas_dir=tabelas_dir,
        log_enabled=os.environ.get("PAGAMENTOS_LOG", "false").lower() == "true",
        amount_limits=AmountLimits(
            minimo=_decimal_env("PAYMENT_MIN_AMOUNT", "0.01"),
            maximo=_decimal_env("PAYMENT_MAX_AMOUNT", "1000000.00"),
        ),
        pix_limits=PixLimits(
            diario=_decimal_env("PIX_DAILY_LIMIT", "20000"),
            mensal=_decimal_env("PIX_MONTHLY_LIMIT", "100000"),
        ),
    )


@lru_cache(maxsize=1)
def get_config() -> KernelConfig:
    return load_config()
