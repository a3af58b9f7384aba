# pagamentos/domain/documento/value_objects.py
#
# Brazilian document validation and formatting (CPF, CNPJ, CEP, telefone).
#
# Design decisions:
#   - One Document type parameterised by DocumentKind, with a validator and a
#     formatter per kind in module-level tables, instead of one copy of the
#     same body per field.
#   - validate_* are total boolean predicates and never raise.
#   - format_* are total: when the digit count does not match the expected
#     length the original string is returned unchanged.
#   - CPF keeps its own value object because it must never appear unmasked in
#     repr/str (LGPD). CNPJ is public data and formats in full.
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from pagamentos.domain.checksum import mod11_check_digit, weighted_sum
from pagamentos.errors import InvalidDocument

CPF_PESOS_1 = (10, 9, 8, 7, 6, 5, 4, 3, 2)
CPF_PESOS_2 = (11, 10, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_PESOS_1 = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_PESOS_2 = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


class DocumentKind(StrEnum):
    CPF = "CPF"
    CNPJ = "CNPJ"
    CEP = "CEP"
    TELEFONE = "TELEFONE"


def only_digits(raw: str) -> str:
    return "".join(c for c in raw if c.isdigit())


def strip_formatting(raw: str) -> str:
    """Inverse of the format_* functions: keeps only the digits."""
    return only_digits(raw)


def _todos_iguais(digitos: str) -> bool:
    return len(set(digitos)) == 1


def validate_cpf(raw: str) -> bool:
    """Algoritmo padrao brasileiro de verificacao de CPF."""
    d = only_digits(raw)
    if len(d) != 11 or _todos_iguais(d):
        return False
    if int(d[9]) != mod11_check_digit(weighted_sum(d, CPF_PESOS_1)):
        return False
    return int(d[10]) == mod11_check_digit(weighted_sum(d, CPF_PESOS_2))


def validate_cnpj(raw: str) -> bool:
    """Algoritmo padrao brasileiro de verificacao de CNPJ."""
    d = only_digits(raw)
    if len(d) != 14 or _todos_iguais(d):
        return False
    if int(d[12]) != mod11_check_digit(weighted_sum(d, CNPJ_PESOS_1)):
        return False
    return int(d[13]) == mod11_check_digit(weighted_sum(d, CNPJ_PESOS_2))


def validate_cep(raw: str, *, reject_all_zero: bool = False) -> bool:
    d = only_digits(raw)
    if len(d) != 8:
        return False
    return not (reject_all_zero and d == "00000000")


def validate_phone(raw: str) -> bool:
    """10 digitos: fixo. 11: celular (terceiro digito >= 6). 13: com DDI 55."""
    d = only_digits(raw)
    if len(d) == 10:
        return True
    if len(d) == 11:
        return d[2] >= "6"
    if len(d) == 13:
        return d.startswith("55")
    return False


def format_cpf(raw: str) -> str:
    """XXX.XXX.XXX-XX"""
    d = only_digits(raw)
    if len(d) != 11:
        return raw
    return f"{d[:3]}.{d[3:6]}.{d[6:9]}-{d[9:]}"


def format_cnpj(raw: str) -> str:
    """XX.XXX.XXX/XXXX-XX"""
    d = only_digits(raw)
    if len(d) != 14:
        return raw
    return f"{d[:2]}.{d[2:5]}.{d[5:8]}/{d[8:12]}-{d[12:]}"


def format_cep(raw: str) -> str:
    """XXXXX-XXX"""
    d = only_digits(raw)
    if len(d) != 8:
        return raw
    return f"{d[:5]}-{d[5:]}"


def format_phone(raw: str) -> str:
    d = only_digits(raw)
    if len(d) == 10:
        return f"({d[:2]}) {d[2:6]}-{d[6:]}"
    if len(d) == 11:
        return f"({d[:2]}) {d[2]} {d[3:7]}-{d[7:]}"
    if len(d) == 13:
        return f"+{d[:2]} ({d[2:4]}) {d[4]} {d[5:9]}-{d[9:]}"
    return raw


_VALIDATORS: dict[DocumentKind, Callable[[str], bool]] = {
    DocumentKind.CPF: validate_cpf,
    DocumentKind.CNPJ: validate_cnpj,
    DocumentKind.CEP: validate_cep,
    DocumentKind.TELEFONE: validate_phone,
}

_FORMATTERS: dict[DocumentKind, Callable[[str], str]] = {
    DocumentKind.CPF: format_cpf,
    DocumentKind.CNPJ: format_cnpj,
    DocumentKind.CEP: format_cep,
    DocumentKind.TELEFONE: format_phone,
}


@dataclass(frozen=True)
class Document:
    """Documento bruto + estrategia de validacao. Nunca mutado."""

    kind: DocumentKind
    raw: str

    @classmethod
    def parse(cls, kind: DocumentKind, raw: str) -> Document:
        """Build a Document, raising InvalidDocument if it does not validate."""
        doc = cls(kind=kind, raw=raw)
        if not doc.is_valid:
            shown = mask_cpf(raw) if kind is DocumentKind.CPF else raw
            raise InvalidDocument(kind.value, shown)
        return doc

    @property
    def digits(self) -> str:
        return only_digits(self.raw)

    @property
    def is_valid(self) -> bool:
        return _VALIDATORS[self.kind](self.raw)

    @property
    def formatted(self) -> str:
        return _FORMATTERS[self.kind](self.raw)


def mask_cpf(raw: str) -> str:
    """***.XXX.XXX-**, formato seguro para logs. Entrada curta vira '***'."""
    d = only_digits(raw)
    if len(d) != 11:
        return "***"
    return f"***.{d[3:6]}.{d[6:9]}-**"


@dataclass(frozen=True)
class CPF:
    """Value Object imutavel para CPF. NUNCA expoe valor completo em repr/str (LGPD)."""

    _valor: str  # sempre 11 digitos

    def __init__(self, raw: str) -> None:
        if not validate_cpf(raw):
            raise InvalidDocument(DocumentKind.CPF.value, mask_cpf(raw))
        object.__setattr__(self, "_valor", only_digits(raw))

    @property
    def valor(self) -> str:
        """11 digitos sem formatacao. Usar com cuidado, nunca logar."""
        return self._valor

    @property
    def formatado(self) -> str:
        return format_cpf(self._valor)

    @property
    def mascarado(self) -> str:
        return mask_cpf(self._valor)

    def __repr__(self) -> str:
        return f"CPF({self.mascarado!r})"

    def __str__(self) -> str:
        return self.mascarado


@dataclass(frozen=True)
class CNPJ:
    """Value Object imutavel para CNPJ. Valida digitos verificadores no construtor."""

    _valor: str  # sempre 14 digitos sem formatacao

    def __init__(self, raw: str) -> None:
        if not validate_cnpj(raw):
            raise InvalidDocument(DocumentKind.CNPJ.value, raw)
        object.__setattr__(self, "_valor", only_digits(raw))

    @property
    def valor(self) -> str:
        return self._valor

    @property
    def formatado(self) -> str:
        return format_cnpj(self._valor)

    def __repr__(self) -> str:
        return f"CNPJ({self.formatado!r})"

    def __str__(self) -> str:
        return self.formatado
