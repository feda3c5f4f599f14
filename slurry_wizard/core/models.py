"""
Slurry Wizard — Input Models
Immutable farm snapshot handed over by the form layer.

Every value here is coerced on the way in: blanks, text and negative
numbers become zero (or the form default) so a half-filled form always
produces a snapshot the calculators can work with.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, Mapping, Optional, Tuple, Union
import logging
import math

from ..config import WASHINGS
from ..reference.rainfall import derive_four_figure_reference
from ..reference.tables import (
    DEFAULT_BANK_SLOPE,
    bank_slope_factor,
    resolve_livestock_rates,
)

logger = logging.getLogger(__name__)


def as_number(value: Any, default: float = 0.0) -> float:
    """Lenient numeric coercion; anything unusable becomes the default."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number) or number < 0:
        return default
    return number


def _as_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "on")
    return bool(value)


# =============================================================================
# STORAGE
# =============================================================================

class StoreKind(Enum):
    """Slurry store construction types."""
    EARTH_BANK = auto()
    TOWER = auto()
    BAG = auto()


@dataclass(frozen=True)
class EarthBankStore:
    """Earth-banked lagoon. A positive volume overrides the geometry."""
    bank_slope: str = DEFAULT_BANK_SLOPE
    length: float = 0.0
    width: float = 0.0
    depth: float = 0.0
    volume: float = 0.0

    kind = StoreKind.EARTH_BANK

    @property
    def slope_factor(self) -> int:
        return bank_slope_factor(self.bank_slope)


@dataclass(frozen=True)
class TowerStore:
    """Above-ground tower, circular when a diameter is given, else rectangular."""
    length: float = 0.0
    width: float = 0.0
    depth: float = 0.0
    diameter: float = 0.0
    volume: float = 0.0

    kind = StoreKind.TOWER

    @property
    def is_circular(self) -> bool:
        return self.diameter > 0


@dataclass(frozen=True)
class SlurryBag:
    """Flexible bag; capacity is entered directly."""
    volume: float = 0.0

    kind = StoreKind.BAG


StorageStore = Union[EarthBankStore, TowerStore, SlurryBag]


# =============================================================================
# LIVESTOCK
# =============================================================================

@dataclass(frozen=True)
class LivestockEntry:
    """
    One row of the livestock table.

    daily_excreta_l and annual_nitrogen_kg are per-head rates cached from the
    reference table when the classification is set; they may be overridden
    by hand.
    """
    species: str = "Dairy Cow"
    age: str = "After first calf"
    yield_band: str = "Medium (6000-9000)"
    head_count: float = 0.0
    slurry_percent: float = 100.0
    daily_excreta_l: float = 53.0
    annual_nitrogen_kg: float = 101.0

    @classmethod
    def classified(cls, species: str, age: str, yield_band: str = "",
                   head_count: float = 0.0, slurry_percent: float = 100.0) -> "LivestockEntry":
        """Entry with rates resolved from the reference table (zero if unknown)."""
        entry = cls(species=species, age=age, yield_band=yield_band or "",
                    head_count=head_count, slurry_percent=slurry_percent,
                    daily_excreta_l=0.0, annual_nitrogen_kg=0.0)
        return entry.reclassify(species, age, yield_band)

    def reclassify(self, species: str, age: str, yield_band: str = "") -> "LivestockEntry":
        """
        New entry for a changed classification with refreshed rates.

        An unknown classification leaves the entry untouched.
        """
        rates = resolve_livestock_rates(species, age, yield_band)
        if rates is None:
            return self
        return replace(
            self,
            species=species,
            age=age,
            yield_band=yield_band or "",
            daily_excreta_l=rates.daily_excreta_l,
            annual_nitrogen_kg=rates.annual_nitrogen_kg,
        )


# =============================================================================
# CATCHMENT, WASHINGS, SEPARATOR
# =============================================================================

class CatchmentKind(Enum):
    YARD = auto()
    ROOF = auto()


@dataclass(frozen=True)
class Catchment:
    """Dirty yard or roof draining to the slurry system (m²)."""
    kind: CatchmentKind
    area: float = 0.0
    description: str = ""


# Pig places with a per-place washwater rate (L/place/day)
PIG_WASH_CATEGORIES = (
    "sowIncLitters", "drySow", "weaner7to13kg", "weaner13to31kg",
    "growerDryFed", "growerLiquidFed", "finisherDryFed", "finisherLiquidFed",
    "maidenGilt", "boar66to150kg", "boarOver150kg",
)


def _default_pig_rates() -> Tuple[Tuple[str, float], ...]:
    rate = WASHINGS.pig_preset_litres_per_head_per_day
    return tuple((name, rate) for name in PIG_WASH_CATEGORIES)


@dataclass(frozen=True)
class WashingsConfig:
    """Parlour and pig washwater options."""
    include_parlour: bool = False
    parlour_litres_per_cow_per_day: float = WASHINGS.parlour_litres_per_cow_per_day

    include_pig: bool = False
    use_preset_rates: bool = True
    pig_rates: Tuple[Tuple[str, float], ...] = field(default_factory=_default_pig_rates)
    pig_total_litres_per_day: float = 0.0

    @property
    def pig_rate_table(self) -> Dict[str, float]:
        return dict(self.pig_rates)


@dataclass(frozen=True)
class Separator:
    """Slurry separator reducing stored volume by a percentage."""
    in_use: bool = False
    reduction_percent: float = WASHINGS.separator_reduction_percent

    @property
    def factor(self) -> float:
        if not self.in_use:
            return 1.0
        return max(0.0, 1.0 - min(self.reduction_percent, 100.0) / 100)


# =============================================================================
# FARM
# =============================================================================

@dataclass(frozen=True)
class FinancialSettings:
    """Cost assumptions carried through to the report untouched."""
    depreciation_percent: float = 2.5
    interest_rate_percent: float = 5.0
    water_cost: float = 1.5
    slurry_spreading_cost: float = 2.0
    water_storage_cost: float = 85.0
    divert_water_cost: float = 35.0
    roofing_cost: float = 60.0
    slurry_store_cost: float = 75.0


@dataclass(frozen=True)
class FarmInput:
    """Farm details section of the form."""
    farm_name: str = ""
    farmable_area_ha: float = 0.0
    grid_reference_10: str = ""
    grid_reference_4: str = ""
    max_rainfall_mm: Optional[float] = None  # Explicit 2-day rainfall override
    cattle_in_herd: float = 0.0
    cows_in_milk: float = 0.0
    milk_yield: float = 0.0
    financial: FinancialSettings = field(default_factory=FinancialSettings)

    @property
    def has_rainfall_override(self) -> bool:
        return self.max_rainfall_mm is not None and self.max_rainfall_mm > 0


@dataclass(frozen=True)
class FarmSnapshot:
    """Complete calculator input, one per form state."""
    farm: FarmInput = field(default_factory=FarmInput)
    stores: Tuple[StorageStore, ...] = ()
    livestock: Tuple[LivestockEntry, ...] = ()
    catchments: Tuple[Catchment, ...] = ()
    washings: WashingsConfig = field(default_factory=WashingsConfig)
    separator: Separator = field(default_factory=Separator)

    @property
    def yards(self) -> Tuple[Catchment, ...]:
        return tuple(c for c in self.catchments if c.kind == CatchmentKind.YARD)

    @property
    def roofs(self) -> Tuple[Catchment, ...]:
        return tuple(c for c in self.catchments if c.kind == CatchmentKind.ROOF)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FarmSnapshot":
        """Build a snapshot from the camelCase form dictionary."""
        if not isinstance(data, Mapping):
            if data is not None:
                logger.warning(f"Form data is {type(data).__name__}, not a mapping; using an empty form")
            data = {}
        return _snapshot_from_form(data)


def _items(data: Mapping[str, Any], key: str):
    value = data.get(key)
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _parse_livestock(item: Mapping[str, Any]) -> LivestockEntry:
    species = _as_text(item.get("type")) or "Dairy Cow"
    age = _as_text(item.get("age"))
    yield_band = _as_text(item.get("yield"))
    head_count = as_number(item.get("number"))
    slurry_percent = min(as_number(item.get("slurryPercent"), 100.0), 100.0)

    entry = LivestockEntry.classified(species, age, yield_band, head_count, slurry_percent)

    # Hand-entered rates win over the table
    overrides = {}
    if item.get("dailyExcreta") not in (None, ""):
        overrides["daily_excreta_l"] = as_number(item.get("dailyExcreta"))
    if item.get("annualNitrogen") not in (None, ""):
        overrides["annual_nitrogen_kg"] = as_number(item.get("annualNitrogen"))
    if overrides:
        entry = replace(entry, **overrides)
    return entry


def _snapshot_from_form(data: Mapping[str, Any]) -> FarmSnapshot:
    defaults = FinancialSettings()
    financial = FinancialSettings(
        depreciation_percent=as_number(data.get("depreciation"), defaults.depreciation_percent),
        interest_rate_percent=as_number(data.get("interestRate"), defaults.interest_rate_percent),
        water_cost=as_number(data.get("waterCost"), defaults.water_cost),
        slurry_spreading_cost=as_number(data.get("slurrySpreadingCost"), defaults.slurry_spreading_cost),
        water_storage_cost=as_number(data.get("waterStorageCost"), defaults.water_storage_cost),
        divert_water_cost=as_number(data.get("divertWaterCost"), defaults.divert_water_cost),
        roofing_cost=as_number(data.get("roofingCost"), defaults.roofing_cost),
        slurry_store_cost=as_number(data.get("slurryStoreCost"), defaults.slurry_store_cost),
    )

    grid_10 = _as_text(data.get("gridReference10Fig"))
    grid_4 = _as_text(data.get("gridReference4Fig")) or derive_four_figure_reference(grid_10)
    max_rainfall = as_number(data.get("maxRainfall"))

    farm = FarmInput(
        farm_name=_as_text(data.get("farmName")),
        farmable_area_ha=as_number(data.get("farmableArea")),
        grid_reference_10=grid_10,
        grid_reference_4=grid_4,
        max_rainfall_mm=max_rainfall if max_rainfall > 0 else None,
        cattle_in_herd=as_number(data.get("cattleInHerd")),
        cows_in_milk=as_number(data.get("cowsInMilk")),
        milk_yield=as_number(data.get("milkYield")),
        financial=financial,
    )

    stores = []
    for item in _items(data, "earthBankStores"):
        stores.append(EarthBankStore(
            bank_slope=_as_text(item.get("bankSlope")) or DEFAULT_BANK_SLOPE,
            length=as_number(item.get("length")),
            width=as_number(item.get("width")),
            depth=as_number(item.get("depth")),
            volume=as_number(item.get("volume")),
        ))
    for item in _items(data, "towerStores"):
        stores.append(TowerStore(
            length=as_number(item.get("length")),
            width=as_number(item.get("width")),
            depth=as_number(item.get("depth")),
            diameter=as_number(item.get("diameter")),
            volume=as_number(item.get("volume")),
        ))
    for item in _items(data, "slurryBags"):
        stores.append(SlurryBag(volume=as_number(item.get("volume"))))

    catchments = []
    for kind, key in ((CatchmentKind.YARD, "yards"), (CatchmentKind.ROOF, "roofs")):
        for item in _items(data, key):
            catchments.append(Catchment(
                kind=kind,
                area=as_number(item.get("area")),
                description=_as_text(item.get("description")),
            ))

    livestock = tuple(_parse_livestock(item) for item in _items(data, "livestock"))

    pig_values = data.get("pigWashWaterValues")
    pig_rates = _default_pig_rates()
    if isinstance(pig_values, Mapping):
        rate_table = dict(pig_rates)
        for name, value in pig_values.items():
            rate_table[str(name)] = as_number(value, WASHINGS.pig_preset_litres_per_head_per_day)
        pig_rates = tuple(rate_table.items())

    washings = WashingsConfig(
        include_parlour=_as_flag(data.get("includeParlourWashings")),
        parlour_litres_per_cow_per_day=as_number(
            data.get("parlourWashingsPerCow"), WASHINGS.parlour_litres_per_cow_per_day),
        include_pig=_as_flag(data.get("includePigWashWater")),
        use_preset_rates=_as_flag(data.get("usePresetNVZValues", True)),
        pig_rates=pig_rates,
        pig_total_litres_per_day=as_number(data.get("pigWashWaterTotal")),
    )

    separator = Separator(
        in_use=_as_flag(data.get("useSeparator")),
        reduction_percent=as_number(data.get("separatorReduction"), WASHINGS.separator_reduction_percent),
    )

    logger.debug(
        f"Snapshot parsed: {len(stores)} stores, {len(livestock)} livestock rows, "
        f"{len(catchments)} catchments"
    )

    return FarmSnapshot(
        farm=farm,
        stores=tuple(stores),
        livestock=livestock,
        catchments=tuple(catchments),
        washings=washings,
        separator=separator,
    )
