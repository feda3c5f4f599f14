"""
Slurry Wizard — Reports
Excel workbook and Word summary of a calculation.
"""

from .workbook import build_workbook, export_workbook
from .document import build_report, export_report

__all__ = [
    'build_workbook', 'export_workbook',
    'build_report', 'export_report',
]
