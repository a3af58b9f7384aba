# tests/domain/test_checksum.py
from pagamentos.domain.checksum import (
    boleto_check_digit,
    crc16_ccitt,
    crc16_hex,
    ean13_check_digit,
    mod11_check_digit,
    weighted_sum,
)


# ---------- CRC16-CCITT ----------


def test_crc16_vetor_conhecido_ccitt_false():
    """Vetor publico do CRC-16/CCITT-FALSE: "123456789" -> 0x29B1."""
    assert crc16_ccitt("123456789") == 0x29B1
    assert crc16_hex("123456789") == "29B1"


def test_crc16_entrada_vazia_e_registro_inicial():
    assert crc16_ccitt(b"") == 0xFFFF
    assert crc16_hex("") == "FFFF"


def test_crc16_str_e_bytes_utf8_equivalentes():
    assert crc16_ccitt("São Paulo") == crc16_ccitt("São Paulo".encode("utf-8"))


def test_crc16_hex_sempre_quatro_digitos_maiusculos():
    for texto in ("a", "PIX", "000201", "6304"):
        h = crc16_hex(texto)
        assert len(h) == 4
        assert h == h.upper()
        assert int(h, 16) == crc16_ccitt(texto)


# ---------- MODULO 11 ----------


def test_mod11_restos_zero_e_um_viram_zero():
    assert mod11_check_digit(0) == 0
    assert mod11_check_digit(11) == 0
    assert mod11_check_digit(12) == 0


def test_mod11_demais_restos():
    assert mod11_check_digit(13) == 9  # resto 2
    assert mod11_check_digit(21) == 1  # resto 10


def test_weighted_sum_usa_apenas_tamanho_dos_pesos():
    assert weighted_sum("123456", (1, 1, 1)) == 6


# ---------- EAN-13 ----------


def test_ean13_digito_conhecido():
    assert ean13_check_digit("400638133393") == 1


def test_ean13_ignora_nao_digitos():
    assert ean13_check_digit("4006-3813-3393") == 1


# ---------- BOLETO ----------


def test_boleto_dv_pesos_ciclicos_da_direita():
    # 5*2 + 4*3 + 3*4 + 2*5 + 1*6 = 50, resto 6 -> 5
    assert boleto_check_digit("12345") == 5


def test_boleto_dv_nosso_numero():
    assert boleto_check_digit("0000123456789") == 7


def test_boleto_dv_zeros():
    assert boleto_check_digit("0000000000000") == 0
