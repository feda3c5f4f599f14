"""
Slurry Wizard — Summary Report
Word document summarising storage, nitrogen and recommendations for a farm.
"""

from typing import Callable, List, Optional, Sequence
import logging

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from ..calculators.compliance import Severity
from ..core.models import FarmSnapshot
from ..engine import CalculationResult

logger = logging.getLogger(__name__)

HEADER_COLOR = "1F4E79"
SHORTFALL_FILL = "FFC7CE"
SEVERITY_COLORS = {
    Severity.ERROR: RGBColor(0xD3, 0x2F, 0x2F),
    Severity.WARNING: RGBColor(0xF5, 0x7C, 0x00),
    Severity.SUCCESS: RGBColor(0x38, 0x8E, 0x3C),
    Severity.ADVICE: RGBColor(0x1F, 0x43, 0x50),
}


def shade_cell(cell, fill_hex: str):
    """Fill a table cell with a solid background colour."""
    shading = OxmlElement('w:shd')
    shading.set(qn('w:val'), 'clear')
    shading.set(qn('w:fill'), fill_hex)
    cell._tc.get_or_add_tcPr().append(shading)


def add_formatted_table(doc, headers: Sequence[str], rows: List[Sequence],
                        numeric_columns: Sequence[int] = (),
                        cell_fill: Optional[Callable[[int, int], Optional[str]]] = None):
    """
    Table with a shaded header row.

    numeric_columns are right-aligned. cell_fill(row_index, column_index)
    may return a hex colour to shade an individual body cell.
    """
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = 'Table Grid'

    for i, header in enumerate(headers):
        cell = table.rows[0].cells[i]
        run = cell.paragraphs[0].add_run(header)
        run.bold = True
        run.font.color.rgb = RGBColor(255, 255, 255)
        shade_cell(cell, HEADER_COLOR)

    for r, row_data in enumerate(rows):
        cells = table.add_row().cells
        for c, value in enumerate(row_data):
            paragraph = cells[c].paragraphs[0]
            paragraph.add_run(str(value))
            if c in numeric_columns:
                paragraph.alignment = WD_ALIGN_PARAGRAPH.RIGHT
            fill = cell_fill(r, c) if cell_fill else None
            if fill:
                shade_cell(cells[c], fill)

    return table


def build_report(snapshot: FarmSnapshot, result: CalculationResult):
    """Build the summary document; returns a python-docx Document."""
    farm = snapshot.farm
    doc = Document()

    style = doc.styles['Normal']
    style.font.name = 'Arial'
    style.font.size = Pt(11)

    title = doc.add_heading('SLURRY STORAGE ASSESSMENT', 0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    subtitle = doc.add_paragraph(farm.farm_name or 'Unnamed farm')
    subtitle.alignment = WD_ALIGN_PARAGRAPH.CENTER
    subtitle.runs[0].font.size = Pt(16)
    subtitle.runs[0].bold = True

    # ========== FARM DETAILS ==========
    doc.add_heading('Farm Details', level=1)
    add_formatted_table(doc, ['Item', 'Value'], [
        ['Farmable area', f"{farm.farmable_area_ha:g} ha"],
        ['Grid reference', farm.grid_reference_10 or '-'],
        ['4-figure square', farm.grid_reference_4 or '-'],
        ['Cattle in herd', f"{farm.cattle_in_herd:g}"],
        ['Cows in milk', f"{farm.cows_in_milk:g}"],
        ['Rainfall source', result.rainfall_source.name.title()],
    ])

    # ========== KEY FIGURES ==========
    doc.add_heading('Key Figures', level=1)
    add_formatted_table(doc, ['Figure', 'Value'], [
        ['Total storage capacity', f"{result.total_storage_capacity:,.1f} m³"],
        ['Annual slurry production', f"{result.total_annual_slurry:,.1f} m³"],
        ['Rainwater collected', f"{result.rainwater_collected:,.1f} m³"],
        ['Washings', f"{result.parlour_washings + result.pig_washings:,.1f} m³/year"],
        ['Max likely 2-day rainfall', f"{result.max_rainfall:.1f} mm"],
        ['Months of storage', str(result.storage_months)],
        ['Nitrogen loading', f"{result.nitrogen_loading:,.1f} kg N/ha"],
        ['Reception pit size', f"{result.reception_pit_size:,.1f} m³"],
    ], numeric_columns=(1,))

    # ========== COMPLIANCE ==========
    doc.add_heading('Compliance', level=1)
    status = doc.add_paragraph()
    run = status.add_run(result.compliance_status)
    run.bold = True
    run.font.color.rgb = SEVERITY_COLORS[Severity.SUCCESS if result.is_storage_compliant else Severity.ERROR]

    doc.add_heading('Recommendations', level=2)
    for recommendation in result.recommendations:
        p = doc.add_paragraph(style='List Bullet')
        r = p.add_run(recommendation.message)
        r.font.color.rgb = SEVERITY_COLORS[recommendation.severity]

    for caveat in result.caveats:
        doc.add_paragraph(caveat).runs[0].italic = True

    # ========== MONTHLY FORECAST ==========
    doc.add_heading('Monthly Forecast', level=1)
    rows = [
        [month, days, f"{produced:,.1f}", f"{remaining:,.1f}"]
        for month, days, produced, remaining in result.forecast.rows()
    ]
    capacity = result.forecast.remaining_capacity

    def shortfall(row, column):
        return SHORTFALL_FILL if column == 3 and capacity[row] <= 0 else None

    add_formatted_table(doc, ['Month', 'Days', 'Production (m³)', 'Remaining (m³)'], rows,
                        numeric_columns=(1, 2, 3), cell_fill=shortfall)

    return doc


def export_report(snapshot: FarmSnapshot, result: CalculationResult, path: str) -> str:
    doc = build_report(snapshot, result)
    doc.save(path)
    logger.info(f"Report exported to {path}")
    return path
