# pagamentos/domain/pix/encoder.py
#
# BR Code (EMV-MPM) payload assembly for PIX charges.
#
# Design decisions:
#   - Every field goes through tlv(), so the two-digit zero-padded length rule
#     lives in one place. Lengths count UTF-8 bytes, the same bytes the CRC
#     is computed over.
#   - Values longer than 99 bytes cannot be represented and raise
#     EncodingFailure instead of silently producing a broken payload.
#   - The merchant name is truncated to 25 bytes without splitting a
#     multi-byte character.
#   - The CRC covers everything before it, including the literal "6304".
#   - parse_tlv/verify_crc are the inverse operations; they let callers (and
#     tests) check a payload without a QR scanner.
#
# Wire layout (order is fixed):
#   00 01 | 01 12 | 26 {00 BR.GOV.BCB.PIX, 01 chave} | 52 0000 | 53 986 |
#   54 valor | 58 BR | 59 nome | [60 cidade] | 62 {05 txid} | 63 04 CRC
from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

from pagamentos.domain.checksum import crc16_hex
from pagamentos.domain.dinheiro.value_objects import centavos
from pagamentos.domain.pix.value_objects import PixKey
from pagamentos.errors import EncodingFailure, InvalidAmount, InvalidPixData
from pagamentos.log import log

PAYLOAD_FORMAT_INDICATOR = "000201"
POINT_OF_INITIATION_DYNAMIC = "010212"
PIX_GUI = "BR.GOV.BCB.PIX"
MERCHANT_CATEGORY_CODE = "0000"
CURRENCY_BRL = "986"
COUNTRY_CODE = "BR"
CRC_PREFIX = "6304"

MERCHANT_NAME_MAX_BYTES = 25
TXID_LEN = 25
TLV_MAX_LEN = 99

_TXID_RE = re.compile(r"^(?:[A-Za-z0-9]{1,25}|\*\*\*)$")


@dataclass(frozen=True)
class TlvField:
    tag: str
    value: str


@dataclass(frozen=True)
class PixCharge:
    """Dados de uma cobranca PIX dinamica."""

    chave: PixKey
    merchant_name: str
    amount: Decimal
    transaction_id: str | None = None
    merchant_city: str | None = None


def tlv(tag: str, value: str) -> str:
    """Render one TLV unit: tag + 2-digit byte length + value.

    Raises:
        EncodingFailure: tag is not two digits or value exceeds 99 bytes.
    """
    if len(tag) != 2 or not tag.isdigit():
        raise EncodingFailure(f"tag TLV invalida: {tag!r}")
    size = len(value.encode("utf-8"))
    if size > TLV_MAX_LEN:
        raise EncodingFailure(f"campo {tag} com {size} bytes (maximo {TLV_MAX_LEN})")
    return f"{tag}{size:02d}{value}"


def truncate_bytes(text: str, limit: int) -> str:
    """Cut *text* to at most *limit* UTF-8 bytes on a character boundary."""
    return text.encode("utf-8")[:limit].decode("utf-8", errors="ignore")


def default_txid() -> str:
    return uuid.uuid4().hex[:TXID_LEN]


def format_amount(amount: Decimal) -> str:
    """Exactly two fraction digits, '.' as separator (EMV convention)."""
    if isinstance(amount, float):
        raise TypeError("amount deve ser Decimal, nunca float")
    valor = centavos(amount)
    if valor <= 0:
        raise InvalidAmount(f"PIX exige valor positivo em centavos, recebido {amount}")
    return f"{valor:.2f}"


def generate_qr_payload(
    charge: PixCharge,
    *,
    txid_factory: Callable[[], str] = default_txid,
) -> str:
    """Build the full BR Code text for *charge*, CRC trailer included.

    Raises:
        InvalidAmount: amount is not positive.
        InvalidPixData: the transaction id is not 1-25 alphanumerics.
        EncodingFailure: merchant name is empty or a field exceeds 99 bytes.
    """
    nome = truncate_bytes(charge.merchant_name.strip(), MERCHANT_NAME_MAX_BYTES)
    if not nome:
        raise EncodingFailure("nome do recebedor vazio")

    txid = charge.transaction_id if charge.transaction_id is not None else txid_factory()
    if not _TXID_RE.match(txid):
        raise InvalidPixData(f"txid deve ter 1-{TXID_LEN} caracteres alfanumericos: {txid!r}")

    merchant_info = tlv("00", PIX_GUI) + tlv("01", charge.chave.payload_value)

    parts = [
        PAYLOAD_FORMAT_INDICATOR,
        POINT_OF_INITIATION_DYNAMIC,
        tlv("26", merchant_info),
        tlv("52", MERCHANT_CATEGORY_CODE),
        tlv("53", CURRENCY_BRL),
        tlv("54", format_amount(charge.amount)),
        tlv("58", COUNTRY_CODE),
        tlv("59", nome),
    ]
    if charge.merchant_city:
        parts.append(tlv("60", truncate_bytes(charge.merchant_city.strip(), 15)))
    parts.append(tlv("62", tlv("05", txid)))
    parts.append(CRC_PREFIX)

    payload = "".join(parts)
    payload += crc16_hex(payload)

    log(f"PIX payload gerado: chave={charge.chave.tipo.value} txid={txid} valor={charge.amount}")
    return payload


def parse_tlv(payload: str) -> list[TlvField]:
    """Split a flat TLV string into fields (one level, no recursion).

    Raises:
        EncodingFailure: truncated field or non-numeric length.
    """
    data = payload.encode("utf-8")
    fields: list[TlvField] = []
    pos = 0
    while pos < len(data):
        header = data[pos : pos + 4].decode("ascii", errors="replace")
        if len(header) < 4 or not header[2:].isdigit():
            raise EncodingFailure(f"cabecalho TLV invalido na posicao {pos}: {header!r}")
        size = int(header[2:])
        end = pos + 4 + size
        if end > len(data):
            raise EncodingFailure(f"campo {header[:2]} truncado na posicao {pos}")
        fields.append(TlvField(tag=header[:2], value=data[pos + 4 : end].decode("utf-8")))
        pos = end
    return fields


def verify_crc(payload: str) -> bool:
    """True when the trailing 4 hex digits match CRC16 of everything before them."""
    if len(payload) < 8 or payload[-8:-4] != CRC_PREFIX:
        return False
    return crc16_hex(payload[:-4]) == payload[-4:].upper()
