"""
Slurry Wizard — Excreta & Nitrogen
Daily excreta and annual nitrogen across the livestock table.
"""

from dataclasses import dataclass
from typing import Iterable
import logging

from ..config import STORAGE_YEAR
from ..core.models import LivestockEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LivestockTotals:
    total_daily_excreta_l: float = 0.0     # L/day captured as slurry
    total_annual_slurry_m3: float = 0.0    # m³/year
    total_nitrogen_kg: float = 0.0         # kg N/year, all excretion


def entry_daily_excreta(entry: LivestockEntry) -> float:
    """Litres per day reaching the slurry system from one row."""
    if entry.head_count <= 0:
        return 0.0
    return entry.daily_excreta_l * entry.head_count * (entry.slurry_percent / 100)


def entry_annual_nitrogen(entry: LivestockEntry) -> float:
    """kg N per year from one row; not scaled by slurry capture."""
    if entry.head_count <= 0:
        return 0.0
    return entry.annual_nitrogen_kg * entry.head_count


def calculate_livestock_values(livestock: Iterable[LivestockEntry],
                               days_per_year: int = STORAGE_YEAR.days_per_year) -> LivestockTotals:
    total_daily = 0.0
    total_nitrogen = 0.0

    for entry in livestock:
        if entry.head_count <= 0:
            continue
        daily = entry_daily_excreta(entry)
        nitrogen = entry_annual_nitrogen(entry)
        logger.debug(
            f"{entry.species} / {entry.age}: {entry.head_count:g} head, "
            f"{daily:.1f} L/day, {nitrogen:.1f} kg N/yr"
        )
        total_daily += daily
        total_nitrogen += nitrogen

    return LivestockTotals(
        total_daily_excreta_l=total_daily,
        total_annual_slurry_m3=total_daily * days_per_year / 1000,
        total_nitrogen_kg=total_nitrogen,
    )
