"""
Tests for reference data:
- Bank slope factors
- Livestock rate lookup and reclassification
- Grid reference reduction
- Rainfall and settings tables
"""

import os
import tempfile

import pytest
from slurry_wizard.config import COMPLIANCE, RAINFALL, STORAGE_YEAR, RainfallConfig
from slurry_wizard.core.models import LivestockEntry
from slurry_wizard.reference.tables import (
    BANK_SLOPE_FACTORS,
    bank_slope_factor,
    livestock_options,
    resolve_livestock_rates,
)
from slurry_wizard.reference.rainfall import (
    RainfallTable,
    adjusted_annual_rainfall,
    bundled_rainfall_table,
    bundled_settings,
    derive_four_figure_reference,
    load_rainfall_table,
    load_settings,
    rainfall_breakdown,
)


# =============================================================================
# TABLES
# =============================================================================

class TestBankSlopes:

    def test_factors_cover_one_to_six(self):
        assert sorted(BANK_SLOPE_FACTORS.values()) == [1, 2, 3, 4, 5, 6]

    def test_lookup(self):
        assert bank_slope_factor("Bank slope of 1:1 (45 degrees)") == 2
        assert bank_slope_factor("Bank slope of 1:3 (18.4 degrees)") == 6

    def test_unknown_defaults_to_five(self):
        assert bank_slope_factor("steep") == 5
        assert bank_slope_factor(None) == 5


class TestLivestockRates:

    def test_yield_band(self):
        rates = resolve_livestock_rates("Dairy Cow", "After first calf", "High (>9000)")
        assert rates.daily_excreta_l == 66
        assert rates.annual_nitrogen_kg == 117

    def test_blank_yield_uses_first_band(self):
        rates = resolve_livestock_rates("Dairy Cow", "After first calf", "")
        assert (rates.daily_excreta_l, rates.annual_nitrogen_kg) == (41, 83)

    def test_age_without_yield_bands(self):
        rates = resolve_livestock_rates("Sheep", "Ram")
        assert (rates.daily_excreta_l, rates.annual_nitrogen_kg) == (3, 8)

    def test_unknown_classification(self):
        assert resolve_livestock_rates("Alpaca", "Adult") is None
        assert resolve_livestock_rates("Pigs", "Piglet") is None

    def test_options(self):
        options = livestock_options()
        assert len(options["Dairy Cow"]["After first calf"]) == 3
        assert options["Sheep"]["Ram"] == []
        assert "Poultry" in options


class TestReclassify:
    """Rates are cached on the entry when the classification changes."""

    def test_reclassify_refreshes_rates(self):
        entry = LivestockEntry(head_count=50)
        pigs = entry.reclassify("Pigs", "Finisher (66-100kg)")

        assert pigs.species == "Pigs"
        assert pigs.daily_excreta_l == 4
        assert pigs.annual_nitrogen_kg == 10
        assert pigs.head_count == 50
        assert entry.species == "Dairy Cow"

    def test_unknown_classification_leaves_entry(self):
        entry = LivestockEntry(head_count=50)
        assert entry.reclassify("Alpaca", "Adult") is entry

    def test_classified_unknown_has_zero_rates(self):
        entry = LivestockEntry.classified("Alpaca", "Adult", head_count=5)
        assert entry.daily_excreta_l == 0
        assert entry.annual_nitrogen_kg == 0


# =============================================================================
# RAINFALL
# =============================================================================

class TestGridReference:

    def test_spaced_reference(self):
        assert derive_four_figure_reference("SX 12345 67890") == "SX1267"

    def test_compact_reference(self):
        assert derive_four_figure_reference("SX1234567890") == "SX1267"

    def test_lowercase(self):
        assert derive_four_figure_reference("sx 12345 67890") == "SX1267"

    def test_short_or_blank(self):
        assert derive_four_figure_reference("") == ""
        assert derive_four_figure_reference(None) == ""
        assert derive_four_figure_reference("SX123") == ""


class TestRainfallTable:

    def test_bundled_lookup(self):
        table = bundled_rainfall_table()
        profile, matched = table.lookup("SX1267")

        assert matched
        assert len(profile) == 12
        assert abs(sum(profile) - 1230) < 0.01

    def test_unknown_reference_uses_default_row(self):
        table = bundled_rainfall_table()
        profile, matched = table.lookup("ZZ0000")

        assert not matched
        assert profile == table.profiles["DEFAULT"]

    def test_blank_reference_uses_default_row(self):
        table = bundled_rainfall_table()
        assert table.lookup("")[1] is False

    def test_empty_table_uses_built_in_profile(self):
        table = RainfallTable()
        assert table.profile_for("SX1267") == RAINFALL.default_profile

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            table = load_rainfall_table(os.path.join(tmp, "missing.csv"))

        assert len(table) == 0
        assert table.profile_for("SX1267") == RAINFALL.default_profile

    def test_load_skips_incomplete_rows(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".csv", delete=False, encoding="utf-8") as f:
            f.write(
                "Grid_Reference,Jan,Feb,Mar,Apr,May,Jun,Jul,Aug,Sep,Oct,Nov,Dec\n"
                "AB1234,10,10,10,10,10,10,10,10,10,10,10,10\n"
                "CD5678,10,10,,10,10,10,10,10,10,10,10,10\n"
                "DEFAULT,20,20,20,20,20,20,20,20,20,20,20,20\n"
            )
        table = load_rainfall_table(f.name)
        os.unlink(f.name)

        assert "AB1234" in table
        assert "CD5678" not in table
        assert abs(sum(table.profile_for("CD5678")) - 240) < 0.01

    def test_byte_order_mark_stripped(self):
        """Excel "CSV UTF-8" exports start with a BOM."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".csv", delete=False, encoding="utf-8-sig") as f:
            f.write(
                "Grid_Reference,Jan,Feb,Mar,Apr,May,Jun,Jul,Aug,Sep,Oct,Nov,Dec\n"
                "SX1267,100,100,100,100,100,100,100,100,100,100,100,100\n"
            )
        table = load_rainfall_table(f.name)
        os.unlink(f.name)

        assert "SX1267" in table
        assert table.lookup("SX1267")[1]

    def test_undecodable_file_uses_default(self):
        with tempfile.NamedTemporaryFile(mode="wb", suffix=".csv", delete=False) as f:
            f.write(
                b"Grid_Reference,Jan,Feb,Mar,Apr,May,Jun,Jul,Aug,Sep,Oct,Nov,Dec\n"
                b"SX1267,10,10,10,10,10,10,10,10,10,10,10,10\n"
                b"Caf\xe9,10,10,10,10,10,10,10,10,10,10,10,10\n"
            )
        table = load_rainfall_table(f.name)
        os.unlink(f.name)

        assert len(table) == 0
        assert table.profile_for("SX1267") == RAINFALL.default_profile

    def test_unrecognised_headers_give_empty_table(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".csv", delete=False, encoding="utf-8") as f:
            f.write("square,total\nSX1267,1200\n")
        table = load_rainfall_table(f.name)
        os.unlink(f.name)

        assert len(table) == 0
        assert table.profile_for("SX1267") == RAINFALL.default_profile

    def test_lookup_returns_copy(self):
        table = RainfallTable(profiles={"AB1234": [10.0] * 12})
        profile, _ = table.lookup("AB1234")

        assert isinstance(profile, tuple)
        assert isinstance(table.profile_for("ZZ0000"), tuple)
        assert table.profiles["AB1234"] == [10.0] * 12


class TestSettings:

    def test_bundled(self):
        settings = bundled_settings()
        assert settings["upper_rainfall_limit"] == 100
        assert settings["lower_rainfall_limit"] == 50

    def test_non_numeric_dropped(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".csv", delete=False, encoding="utf-8") as f:
            f.write("setting_name,setting_value\nupper_rainfall_limit,90\nlabel,abc\n")
        settings = load_settings(f.name)
        os.unlink(f.name)

        assert settings == {"upper_rainfall_limit": 90.0}

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            assert load_settings(os.path.join(tmp, "none.csv")) == {}

    def test_undecodable_file(self):
        with tempfile.NamedTemporaryFile(mode="wb", suffix=".csv", delete=False) as f:
            f.write(b"setting_name,setting_value\nupper_rainfall_limit,90\nd\xe9faut,1\n")
        settings = load_settings(f.name)
        os.unlink(f.name)

        assert settings == {}

    def test_byte_order_mark_stripped(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".csv", delete=False, encoding="utf-8-sig") as f:
            f.write("setting_name,setting_value\nupper_rainfall_limit,90\n")
        settings = load_settings(f.name)
        os.unlink(f.name)

        assert settings == {"upper_rainfall_limit": 90.0}


class TestConfigImmutability:
    """Shared default configs cannot be altered through their containers."""

    def test_default_profile_is_tuple(self):
        assert isinstance(RAINFALL.default_profile, tuple)
        assert isinstance(RainfallConfig(default_profile=[50.0] * 12).default_profile, tuple)

    def test_messages_read_only(self):
        with pytest.raises(TypeError):
            COMPLIANCE.messages["compliant"] = "changed"

    def test_calendar_is_tuple(self):
        assert isinstance(STORAGE_YEAR.month_labels, tuple)
        assert isinstance(STORAGE_YEAR.days_in_month, tuple)


def test_adjusted_annual_rainfall():
    assert abs(adjusted_annual_rainfall(1000, own_rainfall_mm=1000) - 1250) < 0.01
    assert abs(adjusted_annual_rainfall(1000) - 1150) < 0.01


def test_rainfall_breakdown():
    breakdown = rainfall_breakdown(100, uncovered_yard_area=100, store_surface_area=50, roof_area=200)

    assert abs(breakdown.uncovered_yard_m3 - 10) < 0.01
    assert abs(breakdown.slurry_store_m3 - 5) < 0.01
    assert abs(breakdown.roof_m3 - 20) < 0.01
    assert abs(breakdown.total_m3 - 35) < 0.01


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
