"""
Slurry Wizard — Configuration
Regulatory constants, storage-year calendar, and washwater defaults.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Tuple
import logging

logger = logging.getLogger(__name__)


def _month_labels() -> Tuple[str, ...]:
    return ("Sep", "Oct", "Nov", "Dec", "Jan", "Feb",
            "Mar", "Apr", "May", "Jun", "Jul", "Aug")


def _month_days() -> Tuple[int, ...]:
    # February fixed at 28, no leap years
    return (30, 31, 30, 31, 31, 28, 31, 30, 31, 30, 31, 31)


def _default_rainfall_profile() -> Tuple[float, ...]:
    # Used when the grid reference has no row in the rainfall table (mm, Jan-Dec)
    return (100.0, 75.0, 75.0, 60.0, 60.0, 60.0, 65.0, 75.0, 75.0, 100.0, 100.0, 100.0)


@dataclass(frozen=True)
class RainfallConfig:
    """Maximum likely 2-day rainfall derivation."""

    # Clamp bounds (mm), overridable from settings.csv
    upper_limit_mm: float = 100.0
    lower_limit_mm: float = 50.0

    # calculated = annual_sum * annual_multiplier + intercept_mm
    annual_multiplier: float = 0.046
    intercept_mm: float = 25.0

    default_profile: Tuple[float, ...] = field(default_factory=_default_rainfall_profile)

    # Uplifts applied to annual rainfall for the informational adjusted figure
    own_rainfall_uplift: float = 1.25
    grid_rainfall_uplift: float = 1.15

    def __post_init__(self):
        object.__setattr__(self, "default_profile", tuple(self.default_profile))
        if len(self.default_profile) != 12:
            raise ValueError(f"Default rainfall profile needs 12 months, got {len(self.default_profile)}")
        if self.lower_limit_mm > self.upper_limit_mm:
            raise ValueError(
                f"Lower rainfall limit {self.lower_limit_mm} exceeds upper limit {self.upper_limit_mm}"
            )

    def clamp(self, rainfall_mm: float) -> float:
        """Limit a calculated rainfall figure to the regulatory range."""
        return min(max(rainfall_mm, self.lower_limit_mm), self.upper_limit_mm)

    def with_settings(self, settings: Mapping[str, float]) -> "RainfallConfig":
        """Copy with limits taken from a settings table where present."""
        upper = _setting(settings, "upper_rainfall_limit", self.upper_limit_mm)
        lower = _setting(settings, "lower_rainfall_limit", self.lower_limit_mm)
        if lower > upper:
            logger.warning(
                f"Settings give lower rainfall limit {lower:g} above upper limit {upper:g}; "
                f"keeping {self.lower_limit_mm:g}-{self.upper_limit_mm:g} mm"
            )
            return self
        return replace(self, upper_limit_mm=upper, lower_limit_mm=lower)


def _setting(settings: Mapping[str, float], name: str, fallback: float) -> float:
    try:
        value = float(settings[name])
    except (KeyError, TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


@dataclass(frozen=True)
class StorageYearConfig:
    """Farming storage year (September to August)."""

    month_labels: Tuple[str, ...] = field(default_factory=_month_labels)
    days_in_month: Tuple[int, ...] = field(default_factory=_month_days)
    days_per_year: int = 365

    def __post_init__(self):
        object.__setattr__(self, "month_labels", tuple(self.month_labels))
        object.__setattr__(self, "days_in_month", tuple(self.days_in_month))
        if len(self.month_labels) != 12 or len(self.days_in_month) != 12:
            raise ValueError("Storage year must define exactly 12 months")

    @property
    def months(self) -> int:
        return len(self.days_in_month)


@dataclass(frozen=True)
class WashingsDefaults:
    """Default washwater and separator rates offered by the form."""
    parlour_litres_per_cow_per_day: float = 20.0
    pig_preset_litres_per_head_per_day: float = 7.0
    separator_reduction_percent: float = 30.0


@dataclass(frozen=True)
class ComplianceConfig:
    """Storage and NVZ thresholds plus the advisory texts they produce."""

    minimum_storage_months: int = 6
    marginal_storage_months: int = 4
    nvz_nitrogen_limit_kg_per_ha: float = 170.0
    reception_pit_days: int = 2

    messages: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({
        "insufficient": "Insufficient storage capacity. Consider expanding your slurry stores.",
        "marginal": "Storage capacity is marginal. Additional capacity would be beneficial.",
        "compliant": "You comply with the guidance for minimum storage of 6 months.",
        "nitrogen": "Nitrogen loading exceeds the recommended 170 kg/ha limit for NVZs.",
        "roof_water": "Consider collecting roof water and/or diverting to a clean drain.",
        "cover": "Consider covering slurry storage with an impermeable cover.",
        "non_compliant": (
            "You do not have at least 6 months storage. Consider whether you can comply "
            "with FRfW requirements and increase storage capacity if not."
        ),
        "no_area": "Farmable area not set; nitrogen loading reported as zero.",
    }))

    def __post_init__(self):
        if not isinstance(self.messages, MappingProxyType):
            object.__setattr__(self, "messages", MappingProxyType(dict(self.messages)))


@dataclass(frozen=True)
class CalculatorConfig:
    """Everything the calculation pipeline needs besides the farm snapshot."""
    rainfall: RainfallConfig = field(default_factory=RainfallConfig)
    storage_year: StorageYearConfig = field(default_factory=StorageYearConfig)
    washings: WashingsDefaults = field(default_factory=WashingsDefaults)
    compliance: ComplianceConfig = field(default_factory=ComplianceConfig)

    def with_settings(self, settings: Mapping[str, float]) -> "CalculatorConfig":
        return replace(self, rainfall=self.rainfall.with_settings(settings))


# Default configurations
RAINFALL = RainfallConfig()
STORAGE_YEAR = StorageYearConfig()
WASHINGS = WashingsDefaults()
COMPLIANCE = ComplianceConfig()
DEFAULT_CONFIG = CalculatorConfig(
    rainfall=RAINFALL,
    storage_year=STORAGE_YEAR,
    washings=WASHINGS,
    compliance=COMPLIANCE,
)
