"""
Slurry Wizard — Monthly Storage Forecast
Spreads a year's slurry, rainwater and washings over the September-August
storage year and tracks how much capacity is left at each month end.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from ..config import STORAGE_YEAR, StorageYearConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyForecast:
    """Twelve-month production and remaining capacity (m³)."""
    months: Tuple[str, ...]
    days: Tuple[int, ...]
    livestock_slurry: Tuple[float, ...]
    rainwater: Tuple[float, ...]
    washings: Tuple[float, ...]
    production: Tuple[float, ...]
    remaining_capacity: Tuple[float, ...]
    storage_months: int

    @property
    def first_shortfall_month(self) -> Optional[str]:
        """Label of the first month ending with no capacity left."""
        for label, remaining in zip(self.months, self.remaining_capacity):
            if remaining <= 0:
                return label
        return None

    @property
    def annual_production(self) -> float:
        return sum(self.production)

    def rows(self):
        """(month, days, production, remaining) tuples for tabular output."""
        return list(zip(self.months, self.days, self.production, self.remaining_capacity))


def count_storage_months(remaining_capacity) -> int:
    """Months ending with capacity still positive."""
    return sum(1 for remaining in remaining_capacity if remaining > 0)


def simulate_storage_year(total_storage_m3: float,
                          daily_excreta_l: float,
                          rainwater_collected_m3: float = 0.0,
                          annual_washings_m3: float = 0.0,
                          separator_factor: float = 1.0,
                          calendar: StorageYearConfig = STORAGE_YEAR) -> MonthlyForecast:
    """
    Run the storage year month by month.

    Livestock slurry follows the days in each month; rainwater and washings
    are spread evenly over the twelve months. Capacity is drawn down with
    no emptying, so the sequence never increases.

    Args:
        total_storage_m3: Combined capacity of all stores
        daily_excreta_l: Livestock excreta reaching the system (L/day)
        rainwater_collected_m3: Rainwater from yards and roofs
        annual_washings_m3: Parlour plus pig washwater per year
        separator_factor: Fraction of livestock slurry kept after separation
    """
    daily_slurry = daily_excreta_l / 1000
    months = calendar.months
    rain_share = rainwater_collected_m3 / months
    washings_share = annual_washings_m3 / months

    livestock, production, remaining_capacity = [], [], []
    remaining = total_storage_m3

    for days in calendar.days_in_month:
        slurry = daily_slurry * days * separator_factor
        produced = slurry + rain_share + washings_share

        remaining -= produced
        livestock.append(slurry)
        production.append(produced)
        remaining_capacity.append(remaining)

    forecast = MonthlyForecast(
        months=tuple(calendar.month_labels),
        days=tuple(calendar.days_in_month),
        livestock_slurry=tuple(livestock),
        rainwater=(rain_share,) * months,
        washings=(washings_share,) * months,
        production=tuple(production),
        remaining_capacity=tuple(remaining_capacity),
        storage_months=count_storage_months(remaining_capacity),
    )

    if forecast.first_shortfall_month:
        logger.debug(f"Storage exhausted by end of {forecast.first_shortfall_month}")
    return forecast
