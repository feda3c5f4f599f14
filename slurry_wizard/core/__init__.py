"""
Slurry Wizard — Core Package
Immutable farm snapshot types handed to the calculators.
"""

from .models import (
    as_number,
    StoreKind,
    EarthBankStore,
    TowerStore,
    SlurryBag,
    StorageStore,
    LivestockEntry,
    CatchmentKind,
    Catchment,
    WashingsConfig,
    Separator,
    FinancialSettings,
    FarmInput,
    FarmSnapshot,
)

__all__ = [
    "as_number",
    "StoreKind",
    "EarthBankStore",
    "TowerStore",
    "SlurryBag",
    "StorageStore",
    "LivestockEntry",
    "CatchmentKind",
    "Catchment",
    "WashingsConfig",
    "Separator",
    "FinancialSettings",
    "FarmInput",
    "FarmSnapshot",
]
