# pagamentos/domain/pix/value_objects.py
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from pagamentos.domain.documento.value_objects import (
    mask_cpf,
    only_digits,
    validate_cnpj,
    validate_cpf,
    validate_phone,
)
from pagamentos.errors import InvalidPixKey
from pagamentos.log import log

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_EVP_RE = re.compile(r"^\S{32}$")

EMAIL_MAX_LEN = 77
EVP_LEN = 32
END_TO_END_ID_LEN = 32


class PixKeyType(StrEnum):
    CPF = "cpf"
    CNPJ = "cnpj"
    EMAIL = "email"
    PHONE = "phone"
    RANDOM = "evp"  # chave aleatoria


def _validate_email(valor: str) -> bool:
    return len(valor) <= EMAIL_MAX_LEN and _EMAIL_RE.match(valor) is not None


def _validate_evp(valor: str) -> bool:
    """Token opaco de 32 caracteres. Nao re-deriva a estrutura de UUID."""
    return _EVP_RE.match(valor) is not None


_KEY_VALIDATORS = {
    PixKeyType.CPF: validate_cpf,
    PixKeyType.CNPJ: validate_cnpj,
    PixKeyType.EMAIL: _validate_email,
    PixKeyType.PHONE: validate_phone,
    PixKeyType.RANDOM: _validate_evp,
}


def validate_pix_key(valor: str, tipo: PixKeyType) -> bool:
    """Boolean check of *valor* against the validator for *tipo*. Never raises."""
    return _KEY_VALIDATORS[tipo](valor.strip())


@dataclass(frozen=True)
class PixKey:
    """Chave PIX tipada. So existe se passou no validador do seu tipo."""

    tipo: PixKeyType
    valor: str

    def __post_init__(self) -> None:
        valor = self.valor.strip()
        if not validate_pix_key(valor, self.tipo):
            shown = mask_cpf(valor) if self.tipo is PixKeyType.CPF else valor
            raise InvalidPixKey(self.tipo.value, f"{shown!r} reprovada no validador {self.tipo.value}")
        object.__setattr__(self, "valor", valor)
        log(f"Chave PIX validada: {self!r}")

    @property
    def payload_value(self) -> str:
        """Form written into the BR Code (tag 26/01).

        CPF/CNPJ go as bare digits, phone as +55DDDNUMERO, email lowercase,
        EVP unchanged.
        """
        if self.tipo in (PixKeyType.CPF, PixKeyType.CNPJ):
            return only_digits(self.valor)
        if self.tipo is PixKeyType.PHONE:
            digitos = only_digits(self.valor)
            if len(digitos) != 13:
                digitos = "55" + digitos
            return "+" + digitos
        if self.tipo is PixKeyType.EMAIL:
            return self.valor.lower()
        return self.valor

    def __repr__(self) -> str:
        if self.tipo is PixKeyType.CPF:
            return f"PixKey(CPF, {mask_cpf(self.valor)!r})"
        return f"PixKey({self.tipo.value}, {self.valor!r})"
