# pagamentos/domain/checksum.py
#
# Check-digit and checksum primitives shared by documents, PIX and barcodes.
#
# Design decisions:
#   - Plain functions over digit strings / bytes. No classes: there is no state.
#   - modulo 11 reduction is one function used by CPF, CNPJ and boleto DV so the
#     "0 or 1 -> 0" rule lives in exactly one place.
#   - EAN-13 is mod 10 with alternating 1/3 weights; it is a separate primitive.
#   - CRC16 is CRC-16/CCITT-FALSE (poly 0x1021, init 0xFFFF, no reflection,
#     no final xor), bit-by-bit over the UTF-8 bytes of the input.
#
# Invariants:
#   - mod11_check_digit always returns an int in 0..9.
#   - crc16_ccitt always returns an int in 0..0xFFFF; crc16_hex is 4 uppercase hex.
from __future__ import annotations

from collections.abc import Sequence

CRC16_POLYNOMIAL = 0x1021
CRC16_INITIAL = 0xFFFF

# Pesos do DV do boleto: 2..9 ciclicos, aplicados da direita para a esquerda.
BOLETO_PESOS: tuple[int, ...] = (2, 3, 4, 5, 6, 7, 8, 9)


def mod11_check_digit(total: int) -> int:
    """Reduce a weighted sum to a modulo-11 check digit (remainder 0/1 -> 0)."""
    resto = total % 11
    return 0 if resto < 2 else 11 - resto


def weighted_sum(digitos: str, pesos: Sequence[int]) -> int:
    """Sum of digit * weight over the first len(pesos) digits."""
    return sum(int(digitos[i]) * pesos[i] for i in range(len(pesos)))


def ean13_check_digit(code: str) -> int:
    """EAN-13 check digit over the digits of *code* (normally the leading 12).

    Non-digit characters are ignored. Even positions weigh 1, odd weigh 3.
    """
    digitos = [int(c) for c in code if c.isdigit()]
    soma = sum(d if i % 2 == 0 else d * 3 for i, d in enumerate(digitos))
    return (10 - (soma % 10)) % 10


def boleto_check_digit(code: str) -> int:
    """Modulo-11 DV of a boleto field, weights 2..9 cycling from the right."""
    digitos = [int(c) for c in reversed(code) if c.isdigit()]
    soma = sum(d * BOLETO_PESOS[i % len(BOLETO_PESOS)] for i, d in enumerate(digitos))
    return mod11_check_digit(soma)


def crc16_ccitt(data: str | bytes) -> int:
    """CRC-16/CCITT-FALSE of *data*. Strings are encoded as UTF-8."""
    payload = data.encode("utf-8") if isinstance(data, str) else data
    crc = CRC16_INITIAL
    for byte in payload:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ CRC16_POLYNOMIAL) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def crc16_hex(data: str | bytes) -> str:
    """CRC16 rendered as 4 uppercase hex digits, zero-padded."""
    return f"{crc16_ccitt(data):04X}"
