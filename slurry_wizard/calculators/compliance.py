"""
Slurry Wizard — Compliance
Nitrogen loading, reception pit sizing and the recommendation ladder.

Storage months and NVZ nitrogen loading are judged independently: a farm
can exceed the nitrogen limit and still report storage compliance.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Tuple
import logging

from ..config import COMPLIANCE, ComplianceConfig

logger = logging.getLogger(__name__)


class Severity(Enum):
    """How a recommendation should be presented."""
    ERROR = auto()
    WARNING = auto()
    SUCCESS = auto()
    ADVICE = auto()


@dataclass(frozen=True)
class Recommendation:
    message: str
    severity: Severity


@dataclass(frozen=True)
class ComplianceResult:
    nitrogen_loading_kg_per_ha: float
    reception_pit_m3: float
    compliance_status: str
    is_storage_compliant: bool
    is_nitrogen_compliant: bool
    recommendations: Tuple[Recommendation, ...]
    caveats: Tuple[str, ...] = ()

    @property
    def messages(self) -> List[str]:
        return [r.message for r in self.recommendations]


def nitrogen_loading(total_nitrogen_kg: float, farmable_area_ha: float) -> float:
    """kg N per hectare; zero when no area is entered."""
    if not farmable_area_ha or farmable_area_ha <= 0:
        return 0.0
    return total_nitrogen_kg / farmable_area_ha


def reception_pit_size(daily_excreta_l: float, yard_area_m2: float, roof_area_m2: float,
                       rainfall_mm: float, config: ComplianceConfig = COMPLIANCE) -> float:
    """Two days of slurry plus one design storm off yards and roofs (m³)."""
    daily_volume = daily_excreta_l / 1000
    return (daily_volume * config.reception_pit_days
            + yard_area_m2 * (rainfall_mm / 1000)
            + roof_area_m2 * (rainfall_mm / 1000))


def generate_recommendations(storage_months: int, loading_kg_per_ha: float,
                             rainwater_collected_m3: float,
                             config: ComplianceConfig = COMPLIANCE) -> List[Recommendation]:
    """Apply the rule ladder in order; rules are not exclusive."""
    messages = config.messages
    recommendations = []

    if storage_months < config.marginal_storage_months:
        recommendations.append(Recommendation(messages["insufficient"], Severity.ERROR))
    elif storage_months < config.minimum_storage_months:
        recommendations.append(Recommendation(messages["marginal"], Severity.WARNING))
    else:
        recommendations.append(Recommendation(messages["compliant"], Severity.SUCCESS))

    if loading_kg_per_ha > config.nvz_nitrogen_limit_kg_per_ha:
        recommendations.append(Recommendation(messages["nitrogen"], Severity.ERROR))

    if storage_months < config.minimum_storage_months and rainwater_collected_m3 > 0:
        recommendations.append(Recommendation(messages["roof_water"], Severity.ADVICE))

    if storage_months < config.minimum_storage_months:
        recommendations.append(Recommendation(messages["cover"], Severity.ADVICE))

    return recommendations


def compliance_status(storage_months: int, config: ComplianceConfig = COMPLIANCE) -> str:
    if storage_months >= config.minimum_storage_months:
        return config.messages["compliant"]
    return config.messages["non_compliant"]


def evaluate_compliance(storage_months: int, total_nitrogen_kg: float, farmable_area_ha: float,
                        daily_excreta_l: float, yard_area_m2: float, roof_area_m2: float,
                        rainfall_mm: float, rainwater_collected_m3: float,
                        config: ComplianceConfig = COMPLIANCE) -> ComplianceResult:
    caveats = []
    if farmable_area_ha <= 0:
        caveats.append(config.messages["no_area"])
        logger.info("Farmable area is zero; nitrogen loading not assessed")

    loading = nitrogen_loading(total_nitrogen_kg, farmable_area_ha)

    return ComplianceResult(
        nitrogen_loading_kg_per_ha=loading,
        reception_pit_m3=reception_pit_size(daily_excreta_l, yard_area_m2, roof_area_m2, rainfall_mm, config),
        compliance_status=compliance_status(storage_months, config),
        is_storage_compliant=storage_months >= config.minimum_storage_months,
        is_nitrogen_compliant=loading <= config.nvz_nitrogen_limit_kg_per_ha,
        recommendations=tuple(generate_recommendations(
            storage_months, loading, rainwater_collected_m3, config)),
        caveats=tuple(caveats),
    )
