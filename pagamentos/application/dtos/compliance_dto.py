# pagamentos/application/dtos/compliance_dto.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ComplianceDTO(BaseModel):
    is_compliant: bool
    issues: list[str]
    warnings: list[str]
    checked_at: datetime
    regulations: list[str]
