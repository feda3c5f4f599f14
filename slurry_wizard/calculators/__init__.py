"""
Slurry Wizard — Calculators
Storage volume, livestock output, rainwater and washings, the monthly
forecast and compliance checks.
"""

from .volume import VolumeTotals, calculate_storage_capacity, store_volume
from .excreta import LivestockTotals, calculate_livestock_values
from .rainwater import (
    RainfallSource,
    RainwaterResult,
    WashingsResult,
    resolve_max_rainfall,
    calculate_rainwater,
    calculate_washings,
)
from .monthly import MonthlyForecast, simulate_storage_year
from .compliance import (
    Severity,
    Recommendation,
    ComplianceResult,
    nitrogen_loading,
    reception_pit_size,
    generate_recommendations,
    evaluate_compliance,
)

__all__ = [
    # Storage
    'VolumeTotals', 'calculate_storage_capacity', 'store_volume',
    # Livestock
    'LivestockTotals', 'calculate_livestock_values',
    # Rainfall and washings
    'RainfallSource', 'RainwaterResult', 'WashingsResult',
    'resolve_max_rainfall', 'calculate_rainwater', 'calculate_washings',
    # Forecast
    'MonthlyForecast', 'simulate_storage_year',
    # Compliance
    'Severity', 'Recommendation', 'ComplianceResult',
    'nitrogen_loading', 'reception_pit_size', 'generate_recommendations', 'evaluate_compliance',
]
