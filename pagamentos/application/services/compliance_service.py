# pagamentos/application/services/compliance_service.py
#
# BCB compliance check for a PIX amount.
#
# Rules (limits from PixLimits):
#   - amount > diario            -> warning
#   - amount > mensal            -> issue (non-compliant)
#   - amount > valor_alto outside [horario_inicio, horario_fim] in
#     America/Sao_Paulo           -> warning
# Naive datetimes are taken as UTC.
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from pagamentos.config import PixLimits, get_config
from pagamentos.log import log

from ..dtos.compliance_dto import ComplianceDTO

SAO_PAULO = ZoneInfo("America/Sao_Paulo")

REGULATIONS = (
    "BCB Resolution 4,488/2016",
    "BCB Circular 4,027/2020",
)

WARNING_DAILY_LIMIT = "Amount exceeds PIX daily limit"
ISSUE_MONTHLY_LIMIT = "Amount exceeds PIX monthly limit"
WARNING_OFF_HOURS = "Large amount transfer outside business hours"


def verificar_conformidade_bcb(
    amount: Decimal,
    now: datetime,
    limits: PixLimits | None = None,
) -> ComplianceDTO:
    lim = limits or get_config().pix_limits
    momento = now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)
    hora_local = momento.astimezone(SAO_PAULO).hour

    issues: list[str] = []
    warnings: list[str] = []

    if amount > lim.diario:
        warnings.append(WARNING_DAILY_LIMIT)
    if amount > lim.mensal:
        issues.append(ISSUE_MONTHLY_LIMIT)
    if amount > lim.valor_alto and (hora_local < lim.horario_inicio or hora_local > lim.horario_fim):
        warnings.append(WARNING_OFF_HOURS)

    resultado = ComplianceDTO(
        is_compliant=not issues,
        issues=issues,
        warnings=warnings,
        checked_at=momento,
        regulations=list(REGULATIONS),
    )
    log(f"Conformidade BCB: valor={amount} conforme={resultado.is_compliant} avisos={len(warnings)}")
    return resultado
