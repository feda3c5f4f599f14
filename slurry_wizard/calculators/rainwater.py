"""
Slurry Wizard — Rainwater & Washings
Maximum likely 2-day rainfall, rainwater collected from yards and roofs,
and parlour / pig washwater volumes.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple
import logging

from ..config import RAINFALL, STORAGE_YEAR, WASHINGS, RainfallConfig, WashingsDefaults
from ..core.models import FarmInput, FarmSnapshot, WashingsConfig
from ..reference.rainfall import (
    RainfallBreakdown,
    RainfallTable,
    adjusted_annual_rainfall,
    rainfall_breakdown,
)

logger = logging.getLogger(__name__)


class RainfallSource(Enum):
    """Where the design rainfall figure came from."""
    OVERRIDE = auto()   # Entered on the form
    GRID = auto()       # Grid reference row in the rainfall table
    DEFAULT = auto()    # Default row, no match for the grid reference


@dataclass(frozen=True)
class RainfallResolution:
    max_rainfall_mm: float
    source: RainfallSource
    annual_rainfall_mm: float = 0.0


@dataclass(frozen=True)
class RainwaterResult:
    total_yard_area_m2: float = 0.0
    total_roof_area_m2: float = 0.0
    max_rainfall_mm: float = 0.0
    rainwater_collected_m3: float = 0.0
    rainfall_source: RainfallSource = RainfallSource.DEFAULT
    annual_rainfall_mm: float = 0.0
    adjusted_annual_rainfall_mm: float = 0.0
    breakdown: RainfallBreakdown = field(default_factory=RainfallBreakdown)


@dataclass(frozen=True)
class WashingsResult:
    parlour_m3: float = 0.0     # m³/year
    pig_m3: float = 0.0         # m³/year

    @property
    def total_m3(self) -> float:
        return self.parlour_m3 + self.pig_m3


def resolve_max_rainfall(farm: FarmInput, table: Optional[RainfallTable],
                         config: RainfallConfig = RAINFALL) -> RainfallResolution:
    """
    Design 2-day rainfall (mm).

    An explicit positive override is used as entered. Otherwise the annual
    total for the grid square is converted with
        annual_sum * 0.046 + 25
    and clamped to the regulatory lower/upper limits.
    """
    if farm.has_rainfall_override:
        return RainfallResolution(max_rainfall_mm=farm.max_rainfall_mm, source=RainfallSource.OVERRIDE)

    if table is None:
        profile, matched = list(config.default_profile), False
    else:
        profile, matched = table.lookup(farm.grid_reference_4)

    if not matched:
        logger.debug(f"No rainfall row for {farm.grid_reference_4!r}, using default profile")

    annual = sum(profile)
    calculated = annual * config.annual_multiplier + config.intercept_mm
    return RainfallResolution(
        max_rainfall_mm=config.clamp(calculated),
        source=RainfallSource.GRID if matched else RainfallSource.DEFAULT,
        annual_rainfall_mm=annual,
    )


def catchment_totals(snapshot: FarmSnapshot) -> Tuple[float, float]:
    """(yard m², roof m²)"""
    return (sum(c.area for c in snapshot.yards), sum(c.area for c in snapshot.roofs))


def calculate_rainwater(snapshot: FarmSnapshot, table: Optional[RainfallTable],
                        config: RainfallConfig = RAINFALL,
                        store_surface_area_m2: float = 0.0) -> RainwaterResult:
    """Rainwater (m³) from one design storm over all yards and roofs."""
    yard_area, roof_area = catchment_totals(snapshot)

    resolution = resolve_max_rainfall(snapshot.farm, table, config)
    rainfall = resolution.max_rainfall_mm
    collected = (yard_area + roof_area) * (rainfall / 1000)

    return RainwaterResult(
        total_yard_area_m2=yard_area,
        total_roof_area_m2=roof_area,
        max_rainfall_mm=rainfall,
        rainwater_collected_m3=collected,
        rainfall_source=resolution.source,
        annual_rainfall_mm=resolution.annual_rainfall_mm,
        adjusted_annual_rainfall_mm=adjusted_annual_rainfall(resolution.annual_rainfall_mm, config=config),
        breakdown=rainfall_breakdown(rainfall, yard_area, store_surface_area_m2, roof_area),
    )


def parlour_washings(cows_in_milk: float, washings: WashingsConfig,
                     days_per_year: int = STORAGE_YEAR.days_per_year) -> float:
    """Parlour washwater (m³/year)."""
    if not washings.include_parlour:
        return 0.0
    return cows_in_milk * washings.parlour_litres_per_cow_per_day * days_per_year / 1000


def pig_washings(herd_count: float, washings: WashingsConfig,
                 defaults: WashingsDefaults = WASHINGS,
                 days_per_year: int = STORAGE_YEAR.days_per_year) -> float:
    """
    Pig washwater (m³/year).

    The preset path applies one flat rate per head to the herd count.
    WashingsConfig.pig_rates is parsed from the form but not read by any
    calculation; it is carried only so a per-place calculation can use it
    later.
    """
    if not washings.include_pig:
        return 0.0

    if washings.use_preset_rates:
        # TODO: apply pig_rate_table per pig place once the form collects place counts
        rate = defaults.pig_preset_litres_per_head_per_day
        logger.debug(f"Pig washwater preset: {rate} L/head/day x {herd_count:g} head")
        return herd_count * rate * days_per_year / 1000

    return washings.pig_total_litres_per_day * days_per_year / 1000


def calculate_washings(snapshot: FarmSnapshot, defaults: WashingsDefaults = WASHINGS,
                       days_per_year: int = STORAGE_YEAR.days_per_year) -> WashingsResult:
    farm = snapshot.farm
    return WashingsResult(
        parlour_m3=parlour_washings(farm.cows_in_milk, snapshot.washings, days_per_year),
        pig_m3=pig_washings(farm.cattle_in_herd, snapshot.washings, defaults, days_per_year),
    )
