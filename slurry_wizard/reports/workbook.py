"""
Slurry Wizard — Workbook Export
Writes a calculation to an Excel workbook laid out like the farm
slurry storage spreadsheet.
"""

from typing import List, Sequence
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..calculators.compliance import Severity
from ..calculators.volume import store_volume
from ..core.models import FarmSnapshot
from ..engine import CalculationResult

logger = logging.getLogger(__name__)

HEADER_FILL = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF")
OK_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
WARN_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
FAIL_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style='thin'), right=Side(style='thin'),
    top=Side(style='thin'), bottom=Side(style='thin')
)

SEVERITY_FILLS = {
    Severity.ERROR: FAIL_FILL,
    Severity.WARNING: WARN_FILL,
    Severity.SUCCESS: OK_FILL,
}


def _write_table(ws, start_row: int, headers: Sequence[str], rows: List[Sequence]) -> int:
    """Header row plus bordered body; returns the next free row."""
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=start_row, column=col, value=header)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.border = THIN_BORDER
        cell.alignment = Alignment(horizontal="center")

    row = start_row + 1
    for row_data in rows:
        for col, value in enumerate(row_data, 1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.border = THIN_BORDER
        row += 1
    return row


def _set_widths(ws, widths: Sequence[int]):
    for i, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(i)].width = width


def _summary_sheet(ws, snapshot: FarmSnapshot, result: CalculationResult):
    farm = snapshot.farm
    ws.title = "Summary"
    ws['A1'] = "SLURRY STORAGE ASSESSMENT"
    ws['A1'].font = Font(bold=True, size=14)
    ws['A2'] = farm.farm_name or "Unnamed farm"
    ws['A3'] = f"Grid reference: {farm.grid_reference_10 or '-'} ({farm.grid_reference_4 or 'no 4-figure square'})"
    ws['A3'].font = Font(italic=True, color="1F4E79")

    figures = [
        ("Total storage capacity", round(result.total_storage_capacity, 1), "m³"),
        ("Earth bank stores", round(result.total_earth_bank_volume, 1), "m³"),
        ("Tower stores", round(result.total_tower_volume, 1), "m³"),
        ("Slurry bags", round(result.total_bag_volume, 1), "m³"),
        ("Daily excreta", round(result.total_daily_excreta, 1), "L/day"),
        ("Annual slurry", round(result.total_annual_slurry, 1), "m³/year"),
        ("Total nitrogen", round(result.total_nitrogen, 1), "kg N/year"),
        ("Max likely 2-day rainfall", round(result.max_rainfall, 1), "mm"),
        ("Rainwater collected", round(result.rainwater_collected, 1), "m³"),
        ("Parlour washings", round(result.parlour_washings, 1), "m³/year"),
        ("Pig washings", round(result.pig_washings, 1), "m³/year"),
        ("Months of storage", result.storage_months, "months"),
        ("Nitrogen loading", round(result.nitrogen_loading, 1), "kg N/ha"),
        ("Reception pit size", round(result.reception_pit_size, 1), "m³"),
    ]
    row = _write_table(ws, 5, ["Figure", "Value", "Unit"], figures)

    row += 1
    ws.cell(row=row, column=1, value=result.compliance_status).font = Font(bold=True)
    ws.cell(row=row, column=1).fill = OK_FILL if result.is_storage_compliant else FAIL_FILL
    row += 2

    ws.cell(row=row, column=1, value="Recommendations").font = Font(bold=True, size=12)
    row += 1
    for recommendation in result.recommendations:
        cell = ws.cell(row=row, column=1, value=recommendation.message)
        fill = SEVERITY_FILLS.get(recommendation.severity)
        if fill:
            cell.fill = fill
        row += 1

    for caveat in result.caveats:
        ws.cell(row=row, column=1, value=caveat).font = Font(italic=True)
        row += 1

    _set_widths(ws, [60, 14, 12])


def _monthly_sheet(ws, result: CalculationResult):
    forecast = result.forecast
    ws['A1'] = "MONTHLY STORAGE FORECAST"
    ws['A1'].font = Font(bold=True, size=14)

    rows = []
    for i, month in enumerate(forecast.months):
        rows.append([
            month,
            forecast.days[i],
            round(forecast.livestock_slurry[i], 2),
            round(forecast.rainwater[i], 2),
            round(forecast.washings[i], 2),
            round(forecast.production[i], 2),
            round(forecast.remaining_capacity[i], 2),
        ])
    headers = ["Month", "Days", "Slurry (m³)", "Rainwater (m³)", "Washings (m³)",
               "Total (m³)", "Remaining (m³)"]
    _write_table(ws, 3, headers, rows)

    # Shade remaining capacity by sign
    for i, remaining in enumerate(forecast.remaining_capacity):
        ws.cell(row=4 + i, column=7).fill = OK_FILL if remaining > 0 else FAIL_FILL

    _set_widths(ws, [8, 6, 14, 16, 15, 12, 16])


def _livestock_sheet(ws, snapshot: FarmSnapshot):
    ws['A1'] = "LIVESTOCK"
    ws['A1'].font = Font(bold=True, size=14)

    rows = []
    for entry in snapshot.livestock:
        rows.append([
            entry.species, entry.age, entry.yield_band or "-", entry.head_count,
            entry.slurry_percent, entry.daily_excreta_l, entry.annual_nitrogen_kg,
        ])
    headers = ["Type", "Age", "Yield", "Number", "% as slurry",
               "Excreta (L/head/day)", "Nitrogen (kg/head/yr)"]
    _write_table(ws, 3, headers, rows)
    _set_widths(ws, [18, 24, 20, 10, 12, 20, 22])


def _storage_sheet(ws, snapshot: FarmSnapshot):
    ws['A1'] = "SLURRY STORES"
    ws['A1'].font = Font(bold=True, size=14)

    rows = []
    for number, store in enumerate(snapshot.stores, 1):
        rows.append([number, store.kind.name.replace("_", " ").title(), round(store_volume(store), 1)])
    _write_table(ws, 3, ["Store", "Type", "Volume (m³)"], rows)
    _set_widths(ws, [8, 14, 14])


def build_workbook(snapshot: FarmSnapshot, result: CalculationResult) -> Workbook:
    """Workbook with Summary, Monthly Forecast, Livestock and Storage sheets."""
    wb = Workbook()
    _summary_sheet(wb.active, snapshot, result)
    _monthly_sheet(wb.create_sheet("Monthly Forecast"), result)
    _livestock_sheet(wb.create_sheet("Livestock"), snapshot)
    _storage_sheet(wb.create_sheet("Storage"), snapshot)
    return wb


def export_workbook(snapshot: FarmSnapshot, result: CalculationResult, path: str) -> str:
    wb = build_workbook(snapshot, result)
    wb.save(path)
    logger.info(f"Workbook exported to {path}")
    return path
