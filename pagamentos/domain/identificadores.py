# pagamentos/domain/identificadores.py
#
# Structured identifier generation and parsing.
#
# Design decisions:
#   - Fixed format, random content. Every generator takes the timestamp `now`
#     and an optional random.Random, so tests can pin both.
#   - Default randomness is random.SystemRandom (OS entropy).
#   - Tracking codes and short codes use alphabets without ambiguous symbols
#     (no 0/O, 1/I/l).
#   - parse_identifier / is_valid_identifier check structure only (segment
#     count, prefix, timestamp length), never temporal plausibility.
from __future__ import annotations

import random
from datetime import datetime

from pagamentos.domain.checksum import ean13_check_digit

TRACKING_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
SHORT_CODE_ALPHABET = "abcdefghijkmnpqrstuvwxyz23456789"

CUSTOMER_PREFIX = "CLI"
NFE_PREFIX = "NFE"
ORDER_PREFIX = "PED"
INVOICE_PREFIX = "NF"
TRANSACTION_PREFIX = "TXN"

_system_random = random.SystemRandom()


def _rng(rng: random.Random | None) -> random.Random:
    return rng if rng is not None else _system_random


def _hex(rng: random.Random, n: int) -> str:
    return f"{rng.getrandbits(4 * n):0{n}X}"


def generate_identifier(prefix: str, now: datetime, rng: random.Random | None = None) -> str:
    """PREFIX-YYYYMMDDHHMMSS-XXXXXXXX (8 hex maiusculos)."""
    return f"{prefix}-{now:%Y%m%d%H%M%S}-{_hex(_rng(rng), 8)}"


def generate_order_number(now: datetime, rng: random.Random | None = None) -> str:
    """PED-YYYYMMDD####"""
    return f"{ORDER_PREFIX}-{now:%Y%m%d}{_rng(rng).randrange(10_000):04d}"


def generate_invoice_number(now: datetime, sequential: int | None = None, rng: random.Random | None = None) -> str:
    """NF-YYYYMM-######. Sem sequencial do chamador, usa um aleatorio."""
    seq = sequential if sequential is not None else _rng(rng).randrange(1_000_000)
    if not 0 <= seq < 1_000_000:
        raise ValueError(f"sequencial fora de 0..999999: {seq}")
    return f"{INVOICE_PREFIX}-{now:%Y%m}-{seq:06d}"


def generate_tracking_code(rng: random.Random | None = None) -> str:
    """BR-XXXX-XXXX-XXXX-XXXX"""
    r = _rng(rng)
    chars = "".join(r.choice(TRACKING_ALPHABET) for _ in range(16))
    return "BR-" + "-".join(chars[i : i + 4] for i in range(0, 16, 4))


def generate_customer_code(now: datetime, rng: random.Random | None = None) -> str:
    return generate_identifier(CUSTOMER_PREFIX, now, rng)


def generate_nfe_key(now: datetime, rng: random.Random | None = None) -> str:
    """NFE-YYYYMMDDHHMMSS-XXXXXXXX"""
    return generate_identifier(NFE_PREFIX, now, rng)


def generate_sku(category: str, now: datetime, rng: random.Random | None = None) -> str:
    """CAT-YYMM#####"""
    return f"{category.upper()}-{now:%y%m}{_rng(rng).randrange(65_536):05d}"


def generate_transaction_id(now: datetime, rng: random.Random | None = None) -> str:
    """TXN-<unix>-<12 hex minusculos>"""
    return f"{TRANSACTION_PREFIX}-{int(now.timestamp())}-{_hex(_rng(rng), 12).lower()}"


def generate_short_code(length: int = 8, rng: random.Random | None = None) -> str:
    if length <= 0:
        raise ValueError(f"length deve ser positivo: {length}")
    r = _rng(rng)
    return "".join(r.choice(SHORT_CODE_ALPHABET) for _ in range(length))


def generate_barcode(country_code: str, manufacturer_code: str, rng: random.Random | None = None) -> str:
    """EAN-13: pais + fabricante + produto (5 digitos) + DV.

    With a 3-digit country and 4-digit manufacturer code the result has
    exactly 13 digits.
    """
    base = f"{country_code}{manufacturer_code}{_rng(rng).randrange(10_000):05d}"
    return f"{base}{ean13_check_digit(base)}"


def parse_identifier(identifier: str) -> tuple[str, str, str] | None:
    """Split on '-' into (prefix, timestamp, unique). None with fewer than 3 parts."""
    parts = identifier.split("-")
    if len(parts) < 3:
        return None
    return parts[0], parts[1], parts[2]


def is_valid_identifier(identifier: str, expected_prefix: str) -> bool:
    parsed = parse_identifier(identifier)
    if parsed is None:
        return False
    prefix, timestamp, unique = parsed
    return prefix == expected_prefix and len(timestamp) >= 8 and bool(unique)
