"""
Tests for the calculation engine:
- Full pipeline from the form dictionary
- Empty and malformed input
- Repeatable results
- Last-write-wins publication
"""

import json

import pytest
from slurry_wizard import FarmSnapshot, RecalculationGate, SlurryCalculator, compute
from slurry_wizard.config import COMPLIANCE
from slurry_wizard.calculators.rainwater import RainfallSource
from slurry_wizard.reference.rainfall import RainfallTable, bundled_rainfall_table


TABLE = bundled_rainfall_table()

DAIRY_FORM = {
    "farmName": "Test Farm",
    "farmableArea": 50,
    "earthBankStores": [{"volume": 1000}],
    "livestock": [
        {"type": "Dairy Cow", "age": "After first calf", "yield": "Medium (6000-9000)",
         "number": 100, "slurryPercent": 100},
    ],
}


# =============================================================================
# PIPELINE
# =============================================================================

class TestCompute:

    def test_empty_farm(self):
        result = compute(FarmSnapshot(), rainfall_table=TABLE)

        assert result.total_storage_capacity == 0
        assert result.total_daily_excreta == 0
        assert result.nitrogen_loading == 0
        assert result.storage_months == 0
        assert all(p == 0 for p in result.monthly_production)
        assert result.compliance_status == COMPLIANCE.messages["non_compliant"]
        assert result.recommendation_messages == (
            COMPLIANCE.messages["insufficient"], COMPLIANCE.messages["cover"],
        )
        assert COMPLIANCE.messages["no_area"] in result.caveats

    def test_dairy_herd(self):
        result = compute(FarmSnapshot.from_dict(DAIRY_FORM), rainfall_table=TABLE)

        assert abs(result.total_storage_capacity - 1000) < 0.01
        assert abs(result.total_daily_excreta - 5300) < 0.01
        assert abs(result.total_annual_slurry - 1934.5) < 0.01
        assert abs(result.total_nitrogen - 10100) < 0.01
        assert abs(result.nitrogen_loading - 202) < 0.01
        assert abs(result.monthly_capacity[0] - 841) < 0.01
        assert result.storage_months == 6
        assert result.is_storage_compliant
        assert not result.is_nitrogen_compliant
        assert COMPLIANCE.messages["nitrogen"] in result.recommendation_messages

    def test_separator_extends_storage(self):
        form = dict(DAIRY_FORM, useSeparator=True, separatorReduction=30)
        plain = compute(FarmSnapshot.from_dict(DAIRY_FORM), rainfall_table=TABLE)
        separated = compute(FarmSnapshot.from_dict(form), rainfall_table=TABLE)

        assert separated.storage_months > plain.storage_months

    def test_default_table_loaded_when_omitted(self):
        result = compute(FarmSnapshot.from_dict({"gridReference10Fig": "SX 12345 67890"}))
        assert result.rainfall_source == RainfallSource.GRID

    def test_malformed_form_does_not_raise(self):
        form = {
            "farmableArea": "abc",
            "earthBankStores": "nope",
            "towerStores": [None, {"diameter": "wide", "depth": -3}],
            "livestock": [{"number": "x", "type": None}],
            "yards": [{"area": -5}],
            "maxRainfall": "NaN",
        }
        result = compute(FarmSnapshot.from_dict(form), rainfall_table=TABLE)

        assert result.total_storage_capacity == 0
        assert result.total_yard_area == 0
        assert 50 <= result.max_rainfall <= 100

    def test_non_mapping_form_gives_empty_snapshot(self):
        snapshot = FarmSnapshot.from_dict([{"farmName": "Listed"}])

        assert snapshot.farm.farm_name == ""
        assert snapshot.stores == ()
        assert snapshot.livestock == ()
        assert compute(snapshot, rainfall_table=TABLE).storage_months == 0

    def test_same_snapshot_same_result(self):
        snapshot = FarmSnapshot.from_dict(DAIRY_FORM)
        assert compute(snapshot, rainfall_table=TABLE) == compute(snapshot, rainfall_table=TABLE)

    def test_to_dict_is_json_ready(self):
        result = compute(FarmSnapshot.from_dict(DAIRY_FORM), rainfall_table=TABLE)
        data = json.loads(json.dumps(result.to_dict()))

        assert data["storage_months"] == 6
        assert len(data["monthly_capacity"]) == 12
        assert data["months"][0] == "Sep"
        assert data["recommendations"][0]["severity"] == "SUCCESS"


# =============================================================================
# CALCULATOR
# =============================================================================

class TestSlurryCalculator:

    def test_settings_override_limits(self):
        calculator = SlurryCalculator(rainfall_table=TABLE, settings={"upper_rainfall_limit": 80})
        result = calculator.calculate_form({"gridReference10Fig": "NY 30000 20000"})

        assert result.rainfall_source == RainfallSource.GRID
        assert result.max_rainfall == 80

    def test_inverted_settings_do_not_raise(self):
        calculator = SlurryCalculator(rainfall_table=RainfallTable(), settings={"upper_rainfall_limit": 40})

        assert calculator.config.rainfall.upper_limit_mm == 100
        assert calculator.config.rainfall.lower_limit_mm == 50
        assert 50 <= calculator.calculate(FarmSnapshot()).max_rainfall <= 100

    def test_grid_reference_derived_from_ten_figure(self):
        snapshot = FarmSnapshot.from_dict({"gridReference10Fig": "SX 12345 67890"})
        assert snapshot.farm.grid_reference_4 == "SX1267"

    def test_rainfall_override(self):
        calculator = SlurryCalculator(rainfall_table=TABLE)
        result = calculator.calculate_form({"maxRainfall": 72, "gridReference10Fig": "NY 30000 20000"})

        assert result.rainfall_source == RainfallSource.OVERRIDE
        assert result.max_rainfall == 72


class TestRecalculationGate:

    def test_stale_result_discarded(self):
        gate = RecalculationGate()
        calculator = SlurryCalculator(rainfall_table=TABLE)
        older = calculator.calculate(FarmSnapshot())
        newer = calculator.calculate_form(DAIRY_FORM)

        first = gate.submit()
        second = gate.submit()

        assert gate.complete(second, newer)
        assert not gate.complete(first, older)
        assert gate.latest is newer
        assert gate.discarded == 1
        assert not gate.pending

    def test_pending_until_latest_completes(self):
        gate = RecalculationGate()
        ticket = gate.submit()

        assert gate.pending
        assert gate.latest is None
        gate.complete(ticket, compute(FarmSnapshot(), rainfall_table=TABLE))
        assert not gate.pending

    def test_run(self):
        gate = RecalculationGate()
        calculator = SlurryCalculator(rainfall_table=TABLE)
        result = gate.run(calculator, FarmSnapshot.from_dict(DAIRY_FORM))

        assert result is gate.latest
        assert result.storage_months == 6


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
