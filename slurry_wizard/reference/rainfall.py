"""
Slurry Wizard — Rainfall Lookup
Grid-reference handling and the rainfall/settings tables behind the
maximum likely 2-day rainfall figure.

Tables are loaded once, before any calculation runs; the calculators only
ever see an in-memory RainfallTable and a settings dict.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple
import csv
import logging
import os
import re

from ..config import RAINFALL, RainfallConfig

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
RAINFALL_CSV = os.path.join(DATA_DIR, "rainfall_data.csv")
SETTINGS_CSV = os.path.join(DATA_DIR, "settings.csv")

DEFAULT_ROW = "DEFAULT"
MONTH_COLUMNS = ["jan", "feb", "mar", "apr", "may", "jun",
                 "jul", "aug", "sep", "oct", "nov", "dec"]

_LETTERS_RE = re.compile(r"[A-Za-z]+")
_DIGITS_RE = re.compile(r"\d+")


def derive_four_figure_reference(ten_figure: Optional[str]) -> str:
    """
    Reduce a 10-figure OS grid reference to the 4-figure square.

    "SX 12345 67890" and "SX1234567890" both give "SX1267".
    Blank or short references give "".
    """
    if not ten_figure or len(ten_figure) < 10:
        return ""

    letters = _LETTERS_RE.search(ten_figure)
    digits = _DIGITS_RE.findall(ten_figure)
    if not letters or not digits:
        return ""

    if len(digits) >= 2:
        return letters.group(0).upper() + digits[0][:2] + digits[1][:2]

    # Compact form, positional slice
    return (ten_figure[0:4] + ten_figure[7:9]).upper()


@dataclass
class RainfallTable:
    """Monthly rainfall (mm) per 4-figure grid reference."""

    profiles: Dict[str, Sequence[float]] = field(default_factory=dict)
    fallback_profile: Sequence[float] = RAINFALL.default_profile

    @property
    def default_profile(self) -> Tuple[float, ...]:
        return tuple(self.profiles.get(DEFAULT_ROW, self.fallback_profile))

    def __contains__(self, grid_reference: str) -> bool:
        return _normalise_reference(grid_reference) in self.profiles

    def __len__(self) -> int:
        return len(self.profiles)

    def lookup(self, grid_reference: Optional[str]) -> Tuple[Tuple[float, ...], bool]:
        """
        Profile for a grid reference.

        Returns:
            (profile, matched) where matched is False if the default row was used.
            The profile is returned as a tuple.
        """
        key = _normalise_reference(grid_reference)
        if key and key != DEFAULT_ROW and key in self.profiles:
            return tuple(self.profiles[key]), True
        return self.default_profile, False

    def profile_for(self, grid_reference: Optional[str]) -> Tuple[float, ...]:
        return self.lookup(grid_reference)[0]


def _normalise_reference(grid_reference: Optional[str]) -> str:
    return (grid_reference or "").replace(" ", "").upper()


def _parse_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def load_rainfall_table(path: str = RAINFALL_CSV,
                        config: RainfallConfig = RAINFALL) -> RainfallTable:
    """
    Read a rainfall CSV (grid_reference + twelve month columns).

    Rows with missing or non-numeric months are skipped. A missing,
    unreadable or undecodable file gives an empty table, so every lookup
    answers with the built-in default profile. Excel "CSV UTF-8" exports
    carry a byte-order mark, which is stripped.
    """
    table = RainfallTable(fallback_profile=config.default_profile)
    rows_read = 0

    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            for row in reader:
                rows_read += 1
                row = {(k or "").strip().lower(): v for k, v in row.items()}
                key = _normalise_reference(row.get("grid_reference"))
                if not key:
                    continue

                months = [_parse_float(row.get(m)) for m in MONTH_COLUMNS]
                if any(v is None for v in months):
                    logger.warning(f"Skipping rainfall row {key}: incomplete monthly values")
                    continue
                table.profiles[key] = tuple(months)
    except (OSError, csv.Error, ValueError) as e:
        logger.warning(f"Rainfall table unavailable ({path}): {e}; using default profile")
        return RainfallTable(fallback_profile=config.default_profile)

    if rows_read and not table.profiles:
        logger.warning(
            f"No usable rows in {path} ({rows_read} read); check the grid_reference "
            f"and month headers. Using default profile"
        )

    logger.info(f"Loaded rainfall data for {len(table)} grid references from {path}")
    return table


def load_settings(path: str = SETTINGS_CSV) -> Dict[str, float]:
    """Read setting_name,setting_value pairs; non-numeric values are dropped."""
    settings = {}
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            for row in csv.DictReader(f):
                name = (row.get("setting_name") or "").strip()
                value = _parse_float(row.get("setting_value"))
                if name and value is not None:
                    settings[name] = value
    except (OSError, csv.Error, ValueError) as e:
        logger.warning(f"Settings unavailable ({path}): {e}; using built-in limits")
        return {}
    return settings


def bundled_rainfall_table() -> RainfallTable:
    """Rainfall table shipped with the package."""
    return load_rainfall_table(RAINFALL_CSV)


def bundled_settings() -> Dict[str, float]:
    """Settings table shipped with the package."""
    return load_settings(SETTINGS_CSV)


def adjusted_annual_rainfall(grid_rainfall_mm: float, own_rainfall_mm: float = 0.0,
                             config: RainfallConfig = RAINFALL) -> float:
    """
    Annual rainfall with the safety uplift applied.

    A farmer's own recorded figure takes precedence (+25%); otherwise the
    grid-reference figure is used (+15%).
    """
    if own_rainfall_mm and own_rainfall_mm > 0:
        return own_rainfall_mm * config.own_rainfall_uplift
    return grid_rainfall_mm * config.grid_rainfall_uplift


@dataclass(frozen=True)
class RainfallBreakdown:
    """Rainfall volume (m³) landing on each kind of surface."""
    uncovered_yard_m3: float = 0.0
    slurry_store_m3: float = 0.0
    roof_m3: float = 0.0

    @property
    def total_m3(self) -> float:
        return self.uncovered_yard_m3 + self.slurry_store_m3 + self.roof_m3


def rainfall_breakdown(rainfall_mm: float, uncovered_yard_area: float,
                       store_surface_area: float, roof_area: float) -> RainfallBreakdown:
    """Split a rainfall depth over yard, open store surface and roof areas (m²)."""
    return RainfallBreakdown(
        uncovered_yard_m3=uncovered_yard_area * rainfall_mm / 1000,
        slurry_store_m3=store_surface_area * rainfall_mm / 1000,
        roof_m3=roof_area * rainfall_mm / 1000,
    )
