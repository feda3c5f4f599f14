"""
Slurry Wizard — Slurry Storage Calculator
Estimates livestock slurry production, rainwater contribution and
storage-capacity adequacy for a farm, following the regulatory
slurry storage spreadsheet.
"""

__version__ = "1.0.0"

from .config import (
    RAINFALL,
    STORAGE_YEAR,
    WASHINGS,
    COMPLIANCE,
    DEFAULT_CONFIG,
    RainfallConfig,
    StorageYearConfig,
    WashingsDefaults,
    ComplianceConfig,
    CalculatorConfig,
)

from .core import (
    EarthBankStore,
    TowerStore,
    SlurryBag,
    LivestockEntry,
    Catchment,
    CatchmentKind,
    WashingsConfig,
    Separator,
    FinancialSettings,
    FarmInput,
    FarmSnapshot,
)

from .engine import (
    CalculationResult,
    SlurryCalculator,
    RecalculationGate,
    compute,
)

__all__ = [
    # Version info
    "__version__",

    # Config
    "RAINFALL",
    "STORAGE_YEAR",
    "WASHINGS",
    "COMPLIANCE",
    "DEFAULT_CONFIG",
    "RainfallConfig",
    "StorageYearConfig",
    "WashingsDefaults",
    "ComplianceConfig",
    "CalculatorConfig",

    # Inputs
    "EarthBankStore",
    "TowerStore",
    "SlurryBag",
    "LivestockEntry",
    "Catchment",
    "CatchmentKind",
    "WashingsConfig",
    "Separator",
    "FinancialSettings",
    "FarmInput",
    "FarmSnapshot",

    # Engine
    "CalculationResult",
    "SlurryCalculator",
    "RecalculationGate",
    "compute",
]
