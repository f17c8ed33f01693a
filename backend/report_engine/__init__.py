"""
Report Engine Package

Handles all printable document generation: maintenance report PDFs and
QR label sheets. Separated from routers for maintainability.

Components:
- branding_config: Default branding settings and helpers
- layout_config: Page geometry, paper presets, label card box
- templates: Label sheet CSS and base HTML
- formatters: Spanish date/month formatting
- maintenance_pdf: Maintenance report composer (reportlab)
- label_sheet: QR label sheet composer (HTML / WeasyPrint)
"""

from .branding_config import DEFAULT_BRANDING, get_branding
from .layout_config import PAPER_SIZES, LABELS_PER_ROW, get_paper_size
from .maintenance_pdf import (
    generate_maintenance_pdf,
    maintenance_frequency,
    maintenance_pdf_filename,
)
from .label_sheet import (
    EmptySelectionError,
    generate_label_sheet_html,
    generate_label_sheet_pdf,
    paginate,
)

__all__ = [
    'DEFAULT_BRANDING',
    'PAPER_SIZES',
    'LABELS_PER_ROW',
    'get_branding',
    'get_paper_size',
    'generate_maintenance_pdf',
    'maintenance_frequency',
    'maintenance_pdf_filename',
    'EmptySelectionError',
    'generate_label_sheet_html',
    'generate_label_sheet_pdf',
    'paginate',
]
