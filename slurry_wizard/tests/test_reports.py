"""
Tests for the workbook and Word report exports.
"""

import os
import tempfile

import pytest
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from openpyxl import load_workbook

from slurry_wizard import FarmSnapshot, compute
from slurry_wizard.reference.rainfall import bundled_rainfall_table
from slurry_wizard.reports import build_report, build_workbook, export_report, export_workbook
from slurry_wizard.reports.document import SHORTFALL_FILL


FORM = {
    "farmName": "Report Farm",
    "farmableArea": 40,
    "gridReference10Fig": "SX 12345 67890",
    "earthBankStores": [{"volume": 800}],
    "towerStores": [{"diameter": 10, "depth": 4}],
    "yards": [{"area": 300, "description": "Collecting yard"}],
    "livestock": [
        {"type": "Dairy Cow", "age": "After first calf", "yield": "High (>9000)", "number": 60},
        {"type": "Beef Cattle", "age": "Finishing (12-24 months)", "number": 20, "slurryPercent": 50},
    ],
}


def _calculated():
    snapshot = FarmSnapshot.from_dict(FORM)
    return snapshot, compute(snapshot, rainfall_table=bundled_rainfall_table())


class TestWorkbook:

    def test_sheets(self):
        snapshot, result = _calculated()
        wb = build_workbook(snapshot, result)
        assert wb.sheetnames == ["Summary", "Monthly Forecast", "Livestock", "Storage"]

    def test_monthly_rows(self):
        snapshot, result = _calculated()
        ws = build_workbook(snapshot, result)["Monthly Forecast"]

        assert ws["A4"].value == "Sep"
        assert ws["A15"].value == "Aug"
        assert abs(ws["G4"].value - round(result.monthly_capacity[0], 2)) < 0.01

    def test_export_and_reopen(self):
        snapshot, result = _calculated()
        with tempfile.TemporaryDirectory() as tmp:
            path = export_workbook(snapshot, result, os.path.join(tmp, "farm.xlsx"))
            wb = load_workbook(path)

            assert wb["Summary"]["A2"].value == "Report Farm"
            assert wb["Storage"].max_row == 5
            assert wb["Livestock"]["A4"].value == "Dairy Cow"


class TestDocument:

    def test_sections(self):
        snapshot, result = _calculated()
        doc = build_report(snapshot, result)
        headings = [p.text for p in doc.paragraphs if p.style.name.startswith("Heading")]

        assert "Key Figures" in headings
        assert "Recommendations" in headings
        assert "Monthly Forecast" in headings
        assert len(doc.tables[-1].rows) == 13

    def test_shortfall_months_shaded(self):
        """Sep-Feb hold, Mar onwards is over capacity."""
        snapshot = FarmSnapshot.from_dict({
            "earthBankStores": [{"volume": 1000}],
            "livestock": [{"type": "Dairy Cow", "age": "After first calf",
                           "yield": "Medium (6000-9000)", "number": 100}],
        })
        result = compute(snapshot, rainfall_table=bundled_rainfall_table())
        monthly = build_report(snapshot, result).tables[-1]

        feb, mar = monthly.rows[6], monthly.rows[7]
        assert feb.cells[0].text == "Feb"
        assert SHORTFALL_FILL not in feb.cells[3]._tc.xml
        assert SHORTFALL_FILL in mar.cells[3]._tc.xml
        assert SHORTFALL_FILL not in mar.cells[0]._tc.xml
        assert mar.cells[3].paragraphs[0].alignment == WD_ALIGN_PARAGRAPH.RIGHT

    def test_export_and_reopen(self):
        snapshot, result = _calculated()
        with tempfile.TemporaryDirectory() as tmp:
            path = export_report(snapshot, result, os.path.join(tmp, "farm.docx"))
            doc = Document(path)

            texts = [p.text for p in doc.paragraphs]
            assert "Report Farm" in texts
            assert result.compliance_status in texts


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
