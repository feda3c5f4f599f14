"""
Slurry Wizard — Storage Volume
Capacity of earth-bank, tower and bag stores.

Incomplete geometry never raises; the store simply contributes nothing
until the form row is filled in.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple
import logging
import math

from ..core.models import EarthBankStore, SlurryBag, StorageStore, StoreKind, TowerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VolumeTotals:
    """Storage capacity by store kind (m³)."""
    earth_bank_m3: float = 0.0
    tower_m3: float = 0.0
    bag_m3: float = 0.0

    # Uncovered surface catching rain; informational only
    open_surface_area_m2: float = 0.0

    @property
    def total_m3(self) -> float:
        return self.earth_bank_m3 + self.tower_m3 + self.bag_m3

    def by_kind(self) -> dict:
        return {
            StoreKind.EARTH_BANK.name: self.earth_bank_m3,
            StoreKind.TOWER.name: self.tower_m3,
            StoreKind.BAG.name: self.bag_m3,
        }


def earth_bank_volume(store: EarthBankStore) -> float:
    """
    Earth-bank capacity from the spreadsheet formula:
        max(0, (depth - length * slope_factor) * length * width)
    """
    if store.volume > 0:
        return store.volume
    if store.length > 0 and store.width > 0 and store.depth > 0:
        return max(0.0, (store.depth - store.length * store.slope_factor) * store.length * store.width)
    return 0.0


def tower_volume(store: TowerStore) -> float:
    """Circular (π r² h) or rectangular (l w h) tower capacity."""
    if store.volume > 0:
        return store.volume
    if store.diameter > 0 and store.depth > 0:
        radius = store.diameter / 2
        return math.pi * radius * radius * store.depth
    if store.length > 0 and store.width > 0 and store.depth > 0:
        return store.length * store.width * store.depth
    return 0.0


def bag_volume(store: SlurryBag) -> float:
    return store.volume if store.volume > 0 else 0.0


def store_volume(store: StorageStore) -> float:
    """Capacity of any store kind (m³)."""
    if isinstance(store, EarthBankStore):
        return earth_bank_volume(store)
    if isinstance(store, TowerStore):
        return tower_volume(store)
    if isinstance(store, SlurryBag):
        return bag_volume(store)
    logger.warning(f"Unrecognised store type {type(store).__name__}, counted as empty")
    return 0.0


def open_surface_area(store: StorageStore) -> float:
    """Plan area exposed to rainfall (m²). Bags are sealed."""
    if isinstance(store, EarthBankStore):
        return store.length * store.width
    if isinstance(store, TowerStore):
        if store.is_circular:
            return math.pi * (store.diameter / 2) ** 2
        return store.length * store.width
    return 0.0


def calculate_storage_capacity(stores: Iterable[StorageStore]) -> VolumeTotals:
    """Sum capacities per store kind."""
    subtotals = {kind: 0.0 for kind in StoreKind}
    surface = 0.0

    for store in stores:
        volume = store_volume(store)
        kind = getattr(store, "kind", None)
        if kind in subtotals:
            subtotals[kind] += volume
        surface += open_surface_area(store)

    totals = VolumeTotals(
        earth_bank_m3=subtotals[StoreKind.EARTH_BANK],
        tower_m3=subtotals[StoreKind.TOWER],
        bag_m3=subtotals[StoreKind.BAG],
        open_surface_area_m2=surface,
    )
    logger.debug(f"Storage capacity {totals.total_m3:.1f} m³ ({totals.by_kind()})")
    return totals


def volume_breakdown(stores: Iterable[StorageStore]) -> Tuple[Tuple[StoreKind, float], ...]:
    """Per-store (kind, volume) pairs in input order, for reporting."""
    return tuple((store.kind, store_volume(store)) for store in stores)
