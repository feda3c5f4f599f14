"""
Slurry Wizard — Reference Data
Bank slopes, livestock rates and rainfall tables.
"""

from .tables import (
    BANK_SLOPE_FACTORS,
    DEFAULT_BANK_SLOPE,
    LIVESTOCK_REFERENCE,
    LivestockRates,
    bank_slope_factor,
    resolve_livestock_rates,
    livestock_options,
)
from .rainfall import (
    RainfallTable,
    RainfallBreakdown,
    derive_four_figure_reference,
    load_rainfall_table,
    load_settings,
    bundled_rainfall_table,
    bundled_settings,
    adjusted_annual_rainfall,
    rainfall_breakdown,
)

__all__ = [
    'BANK_SLOPE_FACTORS', 'DEFAULT_BANK_SLOPE', 'LIVESTOCK_REFERENCE',
    'LivestockRates', 'bank_slope_factor', 'resolve_livestock_rates', 'livestock_options',
    'RainfallTable', 'RainfallBreakdown', 'derive_four_figure_reference',
    'load_rainfall_table', 'load_settings', 'bundled_rainfall_table', 'bundled_settings',
    'adjusted_annual_rainfall', 'rainfall_breakdown',
]
