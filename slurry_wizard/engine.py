"""
Slurry Wizard — Calculation Engine
Runs the full pipeline for one farm snapshot and hands back an immutable
result. Nothing is carried between calls.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple
import logging

from .config import DEFAULT_CONFIG, CalculatorConfig
from .core.models import FarmSnapshot, FinancialSettings
from .calculators.compliance import Recommendation, evaluate_compliance
from .calculators.excreta import calculate_livestock_values
from .calculators.monthly import MonthlyForecast, simulate_storage_year
from .calculators.rainwater import RainfallSource, calculate_rainwater, calculate_washings
from .calculators.volume import calculate_storage_capacity
from .reference.rainfall import RainfallBreakdown, RainfallTable, bundled_rainfall_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationResult:
    """Everything the results page shows for one snapshot."""

    # Storage capacity (m³)
    total_earth_bank_volume: float
    total_tower_volume: float
    total_bag_volume: float
    total_storage_capacity: float

    # Livestock
    total_daily_excreta: float      # L/day
    total_annual_slurry: float      # m³/year
    total_nitrogen: float           # kg N/year

    # Rainfall and washings
    max_rainfall: float             # mm, design 2-day rainfall
    rainfall_source: RainfallSource
    total_yard_area: float
    total_roof_area: float
    rainwater_collected: float      # m³
    parlour_washings: float         # m³/year
    pig_washings: float             # m³/year

    # Storage year
    forecast: MonthlyForecast

    # Compliance
    nitrogen_loading: float         # kg N/ha
    reception_pit_size: float       # m³
    compliance_status: str
    is_storage_compliant: bool
    is_nitrogen_compliant: bool
    recommendations: Tuple[Recommendation, ...]

    # Supporting detail
    annual_rainfall: float = 0.0
    adjusted_annual_rainfall: float = 0.0
    rainfall_breakdown: RainfallBreakdown = field(default_factory=RainfallBreakdown)
    financial: FinancialSettings = field(default_factory=FinancialSettings)
    caveats: Tuple[str, ...] = ()

    @property
    def months(self) -> Tuple[str, ...]:
        return self.forecast.months

    @property
    def monthly_production(self) -> Tuple[float, ...]:
        return self.forecast.production

    @property
    def monthly_capacity(self) -> Tuple[float, ...]:
        return self.forecast.remaining_capacity

    @property
    def storage_months(self) -> int:
        return self.forecast.storage_months

    @property
    def recommendation_messages(self) -> Tuple[str, ...]:
        return tuple(r.message for r in self.recommendations)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view for presentation layers."""
        data = _plain(asdict(self))
        data["months"] = list(self.months)
        data["monthly_production"] = list(self.monthly_production)
        data["monthly_capacity"] = list(self.monthly_capacity)
        data["storage_months"] = self.storage_months
        return data


def _plain(value):
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def compute(snapshot: FarmSnapshot, config: CalculatorConfig = DEFAULT_CONFIG,
            rainfall_table: Optional[RainfallTable] = None) -> CalculationResult:
    """
    Calculate storage, production and compliance for one farm snapshot.

    Args:
        snapshot: Validated form state
        config: Rainfall limits, storage calendar, washwater and compliance settings
        rainfall_table: Preloaded rainfall lookup; the bundled table if omitted

    Returns:
        A fresh CalculationResult. Never raises for a well-formed snapshot.
    """
    if rainfall_table is None:
        rainfall_table = bundled_rainfall_table()

    calendar = config.storage_year

    # Independent stages
    storage = calculate_storage_capacity(snapshot.stores)
    livestock = calculate_livestock_values(snapshot.livestock, calendar.days_per_year)
    rainwater = calculate_rainwater(snapshot, rainfall_table, config.rainfall,
                                    store_surface_area_m2=storage.open_surface_area_m2)
    washings = calculate_washings(snapshot, config.washings, calendar.days_per_year)

    forecast = simulate_storage_year(
        total_storage_m3=storage.total_m3,
        daily_excreta_l=livestock.total_daily_excreta_l,
        rainwater_collected_m3=rainwater.rainwater_collected_m3,
        annual_washings_m3=washings.total_m3,
        separator_factor=snapshot.separator.factor,
        calendar=calendar,
    )

    compliance = evaluate_compliance(
        storage_months=forecast.storage_months,
        total_nitrogen_kg=livestock.total_nitrogen_kg,
        farmable_area_ha=snapshot.farm.farmable_area_ha,
        daily_excreta_l=livestock.total_daily_excreta_l,
        yard_area_m2=rainwater.total_yard_area_m2,
        roof_area_m2=rainwater.total_roof_area_m2,
        rainfall_mm=rainwater.max_rainfall_mm,
        rainwater_collected_m3=rainwater.rainwater_collected_m3,
        config=config.compliance,
    )

    logger.info(
        f"Calculated {snapshot.farm.farm_name or 'farm'}: {storage.total_m3:.1f} m³ storage, "
        f"{forecast.storage_months} months, {compliance.nitrogen_loading_kg_per_ha:.1f} kg N/ha"
    )

    return CalculationResult(
        total_earth_bank_volume=storage.earth_bank_m3,
        total_tower_volume=storage.tower_m3,
        total_bag_volume=storage.bag_m3,
        total_storage_capacity=storage.total_m3,
        total_daily_excreta=livestock.total_daily_excreta_l,
        total_annual_slurry=livestock.total_annual_slurry_m3,
        total_nitrogen=livestock.total_nitrogen_kg,
        max_rainfall=rainwater.max_rainfall_mm,
        rainfall_source=rainwater.rainfall_source,
        total_yard_area=rainwater.total_yard_area_m2,
        total_roof_area=rainwater.total_roof_area_m2,
        rainwater_collected=rainwater.rainwater_collected_m3,
        parlour_washings=washings.parlour_m3,
        pig_washings=washings.pig_m3,
        forecast=forecast,
        nitrogen_loading=compliance.nitrogen_loading_kg_per_ha,
        reception_pit_size=compliance.reception_pit_m3,
        compliance_status=compliance.compliance_status,
        is_storage_compliant=compliance.is_storage_compliant,
        is_nitrogen_compliant=compliance.is_nitrogen_compliant,
        recommendations=compliance.recommendations,
        annual_rainfall=rainwater.annual_rainfall_mm,
        adjusted_annual_rainfall=rainwater.adjusted_annual_rainfall_mm,
        rainfall_breakdown=rainwater.breakdown,
        financial=snapshot.farm.financial,
        caveats=compliance.caveats,
    )


class SlurryCalculator:
    """
    Calculator bound to one configuration and one preloaded rainfall table.

    Loading the tables is the only I/O; do it once and call calculate()
    on every form change.
    """

    def __init__(self, config: CalculatorConfig = DEFAULT_CONFIG,
                 rainfall_table: Optional[RainfallTable] = None,
                 settings: Optional[Dict[str, float]] = None):
        if settings:
            config = config.with_settings(settings)
        self.config = config
        self.rainfall_table = rainfall_table if rainfall_table is not None else bundled_rainfall_table()
        logger.info(
            f"Calculator ready: rainfall limits {config.rainfall.lower_limit_mm:g}-"
            f"{config.rainfall.upper_limit_mm:g} mm, {len(self.rainfall_table)} grid squares"
        )

    def calculate(self, snapshot: FarmSnapshot) -> CalculationResult:
        return compute(snapshot, self.config, self.rainfall_table)

    def calculate_form(self, form_data: Dict[str, Any]) -> CalculationResult:
        """Calculate straight from the form's camelCase dictionary."""
        return self.calculate(FarmSnapshot.from_dict(form_data))


class RecalculationGate:
    """
    Last-write-wins publication of results.

    Each submitted snapshot gets a ticket. A finished result is only
    published if no newer snapshot has been submitted since; older
    results are dropped.
    """

    def __init__(self):
        self._latest_ticket = 0
        self._published_ticket = 0
        self.latest: Optional[CalculationResult] = None
        self.discarded = 0

    @property
    def pending(self) -> bool:
        return self._published_ticket < self._latest_ticket

    def submit(self) -> int:
        """Register a new snapshot and return its ticket."""
        self._latest_ticket += 1
        return self._latest_ticket

    def complete(self, ticket: int, result: CalculationResult) -> bool:
        """Publish a result if it belongs to the newest submission."""
        if ticket != self._latest_ticket:
            self.discarded += 1
            logger.debug(f"Discarding stale result for ticket {ticket} (latest {self._latest_ticket})")
            return False
        self.latest = result
        self._published_ticket = ticket
        return True

    def run(self, calculator: SlurryCalculator, snapshot: FarmSnapshot) -> Optional[CalculationResult]:
        """Submit, calculate and publish in one step."""
        ticket = self.submit()
        result = calculator.calculate(snapshot)
        self.complete(ticket, result)
        return self.latest
