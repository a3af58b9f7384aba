# pagamentos/infrastructure/tabelas.py
#
# Loads data/tributos.json and data/frete.json into domain tables.
#
# Design decisions:
#   - pydantic models describe the JSON files and reject bad data at load time
#     (rate outside [0, 1], malformed UF, UF listed in two regions). Numbers are
#     stored as strings in JSON and parsed straight to Decimal.
#   - The domain never sees pydantic: to_domain() maps each schema onto the
#     frozen dataclasses of domain.tributos / domain.frete.
#   - Loaders are cached per directory. The default directory comes from
#     KernelConfig.tabelas_dir (PAGAMENTOS_TABELAS_DIR).
from __future__ import annotations

import re
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from pagamentos.config import get_config
from pagamentos.domain.frete.calculator import Region, ShippingTable, ZoneMultipliers
from pagamentos.domain.tributos.calculator import TaxTable
from pagamentos.log import log

TRIBUTOS_FILE = "tributos.json"
FRETE_FILE = "frete.json"

_UF_RE = re.compile(r"^[A-Z]{2}$")


def _checar_aliquota(nome: str, valor: Decimal) -> Decimal:
    if not Decimal("0") <= valor <= Decimal("1"):
        raise ValueError(f"{nome} fora de [0, 1]: {valor}")
    return valor


class TabelaTributosSchema(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    icms_por_uf: dict[str, Decimal]
    icms_padrao: Decimal
    iss_por_municipio: dict[str, Decimal]
    iss_padrao: Decimal
    pis: Decimal
    cofins: Decimal

    @field_validator("icms_por_uf")
    @classmethod
    def _ufs_validas(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        for uf, aliquota in v.items():
            if not _UF_RE.match(uf):
                raise ValueError(f"UF invalida em icms_por_uf: {uf!r}")
            _checar_aliquota(f"ICMS {uf}", aliquota)
        return v

    @field_validator("iss_por_municipio")
    @classmethod
    def _municipios_validos(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        for municipio, aliquota in v.items():
            if municipio != municipio.upper():
                raise ValueError(f"municipio deve estar em maiusculas: {municipio!r}")
            _checar_aliquota(f"ISS {municipio}", aliquota)
        return v

    @field_validator("icms_padrao", "iss_padrao", "pis", "cofins")
    @classmethod
    def _aliquota(cls, v: Decimal) -> Decimal:
        return _checar_aliquota("aliquota", v)

    def to_domain(self) -> TaxTable:
        return TaxTable(
            icms_por_uf=MappingProxyType(dict(self.icms_por_uf)),
            icms_padrao=self.icms_padrao,
            iss_por_municipio=MappingProxyType(dict(self.iss_por_municipio)),
            iss_padrao=self.iss_padrao,
            pis=self.pis,
            cofins=self.cofins,
        )


class MultiplicadoresSchema(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    mesmo_estado: Decimal
    mesma_regiao: Decimal
    regiao_adjacente: Decimal
    regiao_distante: Decimal
    padrao: Decimal


class TabelaFreteSchema(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    regioes: dict[Region, list[str]]
    custo_base: Decimal
    custo_por_kg: Decimal
    custo_internacional: Decimal
    multiplicadores: MultiplicadoresSchema

    @model_validator(mode="after")
    def _particao(self) -> TabelaFreteSchema:
        faltando = set(Region) - set(self.regioes)
        if faltando:
            raise ValueError(f"regioes ausentes: {sorted(faltando)}")
        vistos: dict[str, Region] = {}
        for regiao, ufs in self.regioes.items():
            for uf in ufs:
                if not _UF_RE.match(uf):
                    raise ValueError(f"UF invalida em {regiao.value}: {uf!r}")
                if uf in vistos:
                    raise ValueError(f"UF {uf} em duas regioes: {vistos[uf].value} e {regiao.value}")
                vistos[uf] = regiao
        return self

    def to_domain(self) -> ShippingTable:
        m = self.multiplicadores
        return ShippingTable(
            regioes=MappingProxyType({r: frozenset(ufs) for r, ufs in self.regioes.items()}),
            custo_base=self.custo_base,
            custo_por_kg=self.custo_por_kg,
            custo_internacional=self.custo_internacional,
            multiplicadores=ZoneMultipliers(
                mesmo_estado=m.mesmo_estado,
                mesma_regiao=m.mesma_regiao,
                regiao_adjacente=m.regiao_adjacente,
                regiao_distante=m.regiao_distante,
                padrao=m.padrao,
            ),
        )


def _resolve(diretorio: Path | None) -> Path:
    return Path(diretorio) if diretorio is not None else get_config().tabelas_dir


@lru_cache(maxsize=8)
def _load_tax_table(diretorio: Path) -> TaxTable:
    path = diretorio / TRIBUTOS_FILE
    tabela = TabelaTributosSchema.model_validate_json(path.read_text(encoding="utf-8"))
    log(f"Tabela de tributos carregada: {path} ({len(tabela.icms_por_uf)} UFs)")
    return tabela.to_domain()


@lru_cache(maxsize=8)
def _load_shipping_table(diretorio: Path) -> ShippingTable:
    path = diretorio / FRETE_FILE
    tabela = TabelaFreteSchema.model_validate_json(path.read_text(encoding="utf-8"))
    log(f"Tabela de frete carregada: {path}")
    return tabela.to_domain()


def load_tax_table(diretorio: Path | None = None) -> TaxTable:
    """Read and validate tributos.json.

    Raises:
        FileNotFoundError: the file does not exist.
        pydantic.ValidationError: the file content is invalid.
    """
    return _load_tax_table(_resolve(diretorio))


def load_shipping_table(diretorio: Path | None = None) -> ShippingTable:
    """Read and validate frete.json. Same errors as load_tax_table."""
    return _load_shipping_table(_resolve(diretorio))
