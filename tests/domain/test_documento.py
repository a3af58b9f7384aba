# tests/domain/test_documento.py
import pytest

from pagamentos.domain.documento.value_objects import (
    CNPJ,
    CPF,
    Document,
    DocumentKind,
    format_cep,
    format_cnpj,
    format_cpf,
    format_phone,
    mask_cpf,
    strip_formatting,
    validate_cep,
    validate_cnpj,
    validate_cpf,
    validate_phone,
)
from pagamentos.errors import InvalidDocument, PagamentoError


# ---------- CPF ----------


def test_cpf_valido_formatado_e_sem_formatacao():
    assert validate_cpf("111.444.777-35")
    assert validate_cpf("11144477735")
    assert validate_cpf("529.982.247-25")


def test_cpf_digito_verificador_errado():
    assert not validate_cpf("123.456.789-00")
    assert not validate_cpf("111.444.777-36")


def test_cpf_exemplo_classico_passa_no_modulo_11():
    """123.456.789-09 tem os dois DVs corretos, entao e aceito."""
    assert validate_cpf("123.456.789-09")
    assert validate_cpf("12345678909")


def test_cpf_todos_iguais_rejeitado():
    for d in "0123456789":
        assert not validate_cpf(d * 11)


def test_cpf_comprimento_errado():
    assert not validate_cpf("")
    assert not validate_cpf("1114447773")
    assert not validate_cpf("111444777350")


def test_cpf_validador_nunca_levanta():
    assert validate_cpf("abc") is False


# ---------- CNPJ ----------


def test_cnpj_valido():
    assert validate_cnpj("11.222.333/0001-81")
    assert validate_cnpj("11222333000181")


def test_cnpj_invalido():
    assert not validate_cnpj("11.222.333/0001-82")
    assert not validate_cnpj("11111111111111")
    assert not validate_cnpj("1122233300018")


# ---------- CEP / TELEFONE ----------


def test_cep_oito_digitos():
    assert validate_cep("01310-100")
    assert not validate_cep("0131010")


def test_cep_todo_zero_so_rejeitado_na_variante():
    assert validate_cep("00000-000")
    assert not validate_cep("00000-000", reject_all_zero=True)


def test_telefone_fixo_dez_digitos():
    assert validate_phone("(11) 3333-4444")


def test_telefone_celular_terceiro_digito_minimo_seis():
    assert validate_phone("11987654321")
    assert validate_phone("11687654321")
    assert not validate_phone("11387654321")


def test_telefone_treze_digitos_exige_55():
    assert validate_phone("+55 11 98765-4321")
    assert not validate_phone("4411987654321")


def test_telefone_outros_comprimentos():
    assert not validate_phone("987654321")
    assert not validate_phone("551198765432100")


# ---------- FORMATACAO ----------


def test_formatos_de_exibicao():
    assert format_cpf("11144477735") == "111.444.777-35"
    assert format_cnpj("11222333000181") == "11.222.333/0001-81"
    assert format_cep("01310100") == "01310-100"


def test_formatos_de_telefone():
    assert format_phone("1133334444") == "(11) 3333-4444"
    assert format_phone("11987654321") == "(11) 9 8765-4321"
    assert format_phone("5511987654321") == "+55 (11) 9 8765-4321"


def test_formatacao_total_devolve_entrada_com_comprimento_errado():
    assert format_cpf("123") == "123"
    assert format_cnpj("12.345") == "12.345"
    assert format_cep("abc") == "abc"
    assert format_phone("999") == "999"


def test_round_trip_cpf():
    for cpf in ("11144477735", "52998224725"):
        assert strip_formatting(format_cpf(cpf)) == cpf
    assert format_cpf(strip_formatting("111.444.777-35")) == "111.444.777-35"


# ---------- Document ----------


def test_document_parse_valido():
    doc = Document.parse(DocumentKind.CNPJ, "11.222.333/0001-81")
    assert doc.digits == "11222333000181"
    assert doc.is_valid
    assert doc.formatted == "11.222.333/0001-81"


def test_document_parse_invalido_levanta_invalid_document():
    with pytest.raises(InvalidDocument) as exc:
        Document.parse(DocumentKind.CEP, "123")
    assert exc.value.kind == "CEP"
    assert isinstance(exc.value, PagamentoError)
    assert isinstance(exc.value, ValueError)


def test_document_parse_cpf_invalido_nao_expoe_numero():
    with pytest.raises(InvalidDocument) as exc:
        Document.parse(DocumentKind.CPF, "123.456.789-00")
    assert "12345678900" not in str(exc.value)
    assert "***" in str(exc.value)


def test_document_nao_valida_na_construcao_direta():
    doc = Document(DocumentKind.TELEFONE, "123")
    assert not doc.is_valid
    assert doc.formatted == "123"


# ---------- CPF / CNPJ value objects ----------


def test_cpf_vo_repr_e_str_mascarados():
    """CPF nunca aparece completo em logs/repr (LGPD)."""
    cpf = CPF("111.444.777-35")
    assert cpf.valor == "11144477735"
    assert "11144477735" not in repr(cpf)
    assert str(cpf) == "***.444.777-**"
    assert cpf.formatado == "111.444.777-35"


def test_cpf_vo_invalido():
    with pytest.raises(ValueError, match="CPF invalido"):
        CPF("111.444.777-00")


def test_cpf_vo_igualdade_por_valor():
    assert CPF("11144477735") == CPF("111.444.777-35")
    assert hash(CPF("11144477735")) == hash(CPF("111.444.777-35"))


def test_mask_cpf_entrada_curta():
    assert mask_cpf("123") == "***"


def test_cnpj_vo():
    cnpj = CNPJ("11222333000181")
    assert str(cnpj) == "11.222.333/0001-81"
    with pytest.raises(InvalidDocument):
        CNPJ("11222333000100")
