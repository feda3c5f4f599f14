"""
Slurry Wizard — Reference Tables
Bank-slope geometry factors and livestock excreta/nitrogen rates.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union
import logging

logger = logging.getLogger(__name__)


# Side slope of an earth-bank store -> dimensionless factor used in the volume formula
BANK_SLOPE_FACTORS: Dict[str, int] = {
    "Bank slope of 1:0.5 (63 degrees)": 1,
    "Bank slope of 1:1 (45 degrees)": 2,
    "Bank slope of 1:1.5 (33.7 degrees)": 3,
    "Bank slope of 1:2 (26.6 degrees)": 4,
    "Bank slope of 1:2.5 (21.8 degrees)": 5,
    "Bank slope of 1:3 (18.4 degrees)": 6,
}

DEFAULT_BANK_SLOPE = "Bank slope of 1:2.5 (21.8 degrees)"
DEFAULT_SLOPE_FACTOR = BANK_SLOPE_FACTORS[DEFAULT_BANK_SLOPE]


@dataclass(frozen=True)
class LivestockRates:
    """Per-head output for one livestock classification."""
    daily_excreta_l: float    # Litres per head per day
    annual_nitrogen_kg: float # kg N per head per year


def _rates(daily: float, nitrogen: float) -> LivestockRates:
    return LivestockRates(daily_excreta_l=daily, annual_nitrogen_kg=nitrogen)


# species -> age band -> rates, or species -> age band -> yield band -> rates
LIVESTOCK_REFERENCE: Dict[str, Dict[str, Union[LivestockRates, Dict[str, LivestockRates]]]] = {
    "Dairy Cow": {
        "After first calf": {
            "Low (<6000)": _rates(41, 83),
            "Medium (6000-9000)": _rates(53, 101),
            "High (>9000)": _rates(66, 117),
        },
    },
    "Dairy Followers": {
        "< 3 months": _rates(5, 21),
        "3-13 months": _rates(9, 38),
        "13-25 months": _rates(13, 59),
    },
    "Beef Suckler": {
        "After first calf": {
            "Small (450kg)": _rates(25, 79),
            "Medium (550kg)": _rates(28, 93),
            "Large (650kg)": _rates(36, 111),
        },
    },
    "Beef Cattle": {
        "< 3 months": _rates(5, 11),
        "3-13 months": _rates(9, 32),
        "13-25 months": _rates(13, 59),
        "Intensive beef (>500kg)": _rates(28, 84),
    },
    "Sheep": {
        "Lamb < 6 months": _rates(0.4, 1),
        "Lamb 6-12 months": _rates(0.8, 2),
        "Ewe & lamb(s)": _rates(3, 8),
        "Ram": _rates(3, 8),
    },
    "Pigs": {
        "Sow & litter (to 7kg)": _rates(10, 19),
        "Dry sow (in-pig)": _rates(5, 11),
        "Weaner (7-13kg)": _rates(1, 3),
        "Weaner (13-31kg)": _rates(2, 4),
        "Grower (31-66kg)": _rates(3, 8),
        "Finisher (66-100kg)": _rates(4, 10),
        "Maiden gilts (66-100kg)": _rates(4, 10),
        "Boar (66-150kg)": _rates(4, 10),
        "Boar (>150kg)": _rates(5, 11),
    },
    "Poultry": {
        "Broiler (< 2.4kg)": _rates(0.08, 0.3),
        "Layer (< 2.4kg)": _rates(0.12, 0.5),
        "Turkey (≤ 14kg)": _rates(0.16, 0.6),
        "Duck (≤ 7kg)": _rates(0.15, 0.6),
    },
}


def bank_slope_factor(bank_slope: Optional[str]) -> int:
    """Slope factor for a named bank slope, 5 (1:2.5) when unrecognised."""
    factor = BANK_SLOPE_FACTORS.get(bank_slope or "")
    if factor is None:
        logger.debug(f"Unknown bank slope {bank_slope!r}, using factor {DEFAULT_SLOPE_FACTOR}")
        return DEFAULT_SLOPE_FACTOR
    return factor


def resolve_livestock_rates(species: str, age: str,
                            yield_band: Optional[str] = None) -> Optional[LivestockRates]:
    """
    Look up per-head rates for a livestock classification.

    Age bands that are split by yield fall back to their first listed
    yield band when the requested band is blank or unknown.

    Returns:
        The rates, or None when species or age band is not in the table.
    """
    age_bands = LIVESTOCK_REFERENCE.get(species)
    if age_bands is None:
        logger.warning(f"Unknown livestock species {species!r}")
        return None

    entry = age_bands.get(age)
    if entry is None:
        logger.warning(f"Unknown age band {age!r} for {species}")
        return None

    if isinstance(entry, LivestockRates):
        return entry

    if yield_band and yield_band in entry:
        return entry[yield_band]
    return next(iter(entry.values()))


def livestock_options() -> Dict[str, Dict[str, List[str]]]:
    """Species -> age band -> yield bands (empty when not split by yield)."""
    options = {}
    for species, age_bands in LIVESTOCK_REFERENCE.items():
        options[species] = {
            age: [] if isinstance(entry, LivestockRates) else list(entry.keys())
            for age, entry in age_bands.items()
        }
    return options
