# pagamentos/domain/pagamento/boleto.py
#
# Boleto bancario data for a payment.
#
# Design decisions:
#   - The nosso-numero is derived from the payment id (13 digits, zero-padded),
#     so issuing the boleto twice for the same payment yields the same number.
#   - DV uses the shared modulo-11 primitive with weights 2..9 cycling from
#     the right (domain.checksum.boleto_check_digit).
#   - Due date is `now + 3 days`, with `now` always supplied by the caller.
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal

from pagamentos.domain.checksum import boleto_check_digit
from pagamentos.domain.pagamento.entities import Payment

BANCO_PADRAO = "341"
AGENCIA_PADRAO = "1234"
CONTA_PADRAO = "12345-6"
CARTEIRA_PADRAO = "109"
PRAZO_VENCIMENTO_DIAS = 3
NOSSO_NUMERO_LEN = 13

INSTRUCOES_PADRAO: tuple[str, ...] = (
    "Não receber após o vencimento",
    "Pagamento via PIX disponível",
)


@dataclass(frozen=True)
class BoletoData:
    bank_code: str
    agency: str
    account: str
    wallet: str
    our_number: str
    amount: Decimal
    due_date: date
    instructions: tuple[str, ...] = INSTRUCOES_PADRAO

    @property
    def check_digit(self) -> int:
        return boleto_check_digit(self.our_number)

    @property
    def our_number_formatted(self) -> str:
        """NNNNNNNNNNNNN-D"""
        return f"{self.our_number}-{self.check_digit}"


def nosso_numero(payment: Payment) -> str:
    return f"{payment.id.int % 10**NOSSO_NUMERO_LEN:0{NOSSO_NUMERO_LEN}d}"


def generate_boleto(
    payment: Payment,
    now: datetime,
    *,
    bank_code: str = BANCO_PADRAO,
    agency: str = AGENCIA_PADRAO,
    account: str = CONTA_PADRAO,
    wallet: str = CARTEIRA_PADRAO,
) -> BoletoData:
    return BoletoData(
        bank_code=bank_code,
        agency=agency,
        account=account,
        wallet=wallet,
        our_number=nosso_numero(payment),
        amount=payment.total_amount,
        due_date=(now + timedelta(days=PRAZO_VENCIMENTO_DIAS)).date(),
    )
