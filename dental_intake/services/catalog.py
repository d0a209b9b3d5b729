"""Read-only intake catalog loaded from YAML once per process."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from dental_intake.schemas.catalog import (
    FeeItem,
    PriceRange,
    ProgramOption,
    ReasonOption,
    SymptomOption,
    UrgencyOption,
)

logger = logging.getLogger("dental_intake")

CATALOG_PATH = Path(
    os.getenv("CATALOG_PATH")
    or (Path(__file__).resolve().parent.parent / "config" / "catalog.yaml")
)


@dataclass(frozen=True)
class ScoringRules:
    tag_match_points: int
    reason_bonus_points: int
    urgency_bonus_points: int
    confidence_offset: float
    confidence_cap: float
    reason_program: Mapping[str, str]
    urgency_program: Mapping[str, str]


@dataclass(frozen=True)
class FinancingRules:
    monthly_rate: float
    installment_options: Tuple[int, ...]
    default_installments: int
    step: int


@dataclass(frozen=True)
class Catalog:
    version: str
    reasons: Tuple[ReasonOption, ...]
    urgencies: Tuple[UrgencyOption, ...]
    symptoms: Tuple[SymptomOption, ...]
    programs: Tuple[ProgramOption, ...]
    symptoms_by_id: Mapping[str, SymptomOption]
    programs_by_id: Mapping[str, ProgramOption]
    scoring: ScoringRules
    recommendations: Mapping[str, str]
    prices: Mapping[str, PriceRange]
    default_price: PriceRange
    fees: Tuple[FeeItem, ...]
    financing: FinancingRules
    contact: Mapping[str, str]
    second_opinion: Mapping[str, Any]

    def symptom(self, symptom_id: str) -> Optional[SymptomOption]:
        return self.symptoms_by_id.get(symptom_id)

    def program(self, program_id: str) -> Optional[ProgramOption]:
        return self.programs_by_id.get(program_id)

    def price_for(self, program_id: str) -> PriceRange:
        return self.prices.get(program_id) or self.default_price


def load_rules(path: Path = CATALOG_PATH) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def build_catalog(raw: Dict[str, Any]) -> Catalog:
    """Validate the raw YAML document and freeze it into lookup tables."""
    symptoms = tuple(SymptomOption(**s) for s in raw["symptoms"])
    programs = tuple(ProgramOption(**p) for p in raw["programs"])
    program_ids = {p.id for p in programs}

    scoring_raw = raw["scoring"]
    for table in ("reason_program", "urgency_program"):
        unknown = set(scoring_raw[table].values()) - program_ids
        if unknown:
            raise ValueError(f"scoring.{table} references unknown programs: {sorted(unknown)}")

    scoring = ScoringRules(
        tag_match_points=int(scoring_raw["tag_match_points"]),
        reason_bonus_points=int(scoring_raw["reason_bonus_points"]),
        urgency_bonus_points=int(scoring_raw["urgency_bonus_points"]),
        confidence_offset=float(scoring_raw["confidence_offset"]),
        confidence_cap=float(scoring_raw["confidence_cap"]),
        reason_program=MappingProxyType(dict(scoring_raw["reason_program"])),
        urgency_program=MappingProxyType(dict(scoring_raw["urgency_program"])),
    )

    fin = raw["financing"]
    financing = FinancingRules(
        monthly_rate=float(fin["monthly_rate"]),
        installment_options=tuple(int(n) for n in fin["installment_options"]),
        default_installments=int(fin["default_installments"]),
        step=int(fin["step"]),
    )

    return Catalog(
        version=str(raw.get("version") or "1.0"),
        reasons=tuple(ReasonOption(**r) for r in raw["reasons"]),
        urgencies=tuple(UrgencyOption(**u) for u in raw["urgencies"]),
        symptoms=symptoms,
        programs=programs,
        symptoms_by_id=MappingProxyType({s.id: s for s in symptoms}),
        programs_by_id=MappingProxyType({p.id: p for p in programs}),
        scoring=scoring,
        recommendations=MappingProxyType(dict(raw["recommendations"])),
        prices=MappingProxyType({k: PriceRange(**v) for k, v in raw["prices"].items()}),
        default_price=PriceRange(**raw["default_price"]),
        fees=tuple(FeeItem(**f) for f in raw.get("fees") or []),
        financing=financing,
        contact=MappingProxyType(dict(raw["contact"])),
        second_opinion=MappingProxyType(dict(raw.get("second_opinion") or {})),
    )


@lru_cache(maxsize=1)
def load_catalog() -> Catalog:
    catalog = build_catalog(load_rules())
    logger.info({
        "function": "load_catalog",
        "version": catalog.version,
        "symptoms": len(catalog.symptoms),
        "programs": len(catalog.programs),
    })
    return catalog


__all__ = ["Catalog", "ScoringRules", "FinancingRules", "load_rules", "build_catalog", "load_catalog"]
