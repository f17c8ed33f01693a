"""
Maintenance Report PDF

Composes the monthly maintenance report handed to the client:

    title block -> general info -> checklist table -> observations
    -> signature -> footer

Drawn with reportlab on A4 using a running vertical cursor measured in
millimetres from the top of the page. Before each section the remaining
space is checked against a section threshold and a new page is started
when it's too small. The checklist table is a platypus Table that is
split across pages with its header row repeated.
"""

import base64
import io
import logging
import re
from datetime import datetime
from typing import List, NamedTuple, Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, Table, TableStyle

from schemas_maintenance import ChecklistItem, MaintenanceReportInput
from .branding_config import DEFAULT_BRANDING, format_footer_template
from .formatters import (
    PLACEHOLDER, format_date_es, format_datetime_es, format_time_es, month_name,
    strip_diacritics, to_local,
)
from .layout_config import REPORT_LAYOUT

logger = logging.getLogger(__name__)

QUARTER_MONTHS = (3, 6, 9, 12)
SEMESTER_MONTHS = (3, 9)


# =============================================================================
# PURE HELPERS
# =============================================================================

def maintenance_frequency(month: int) -> str:
    """
    Inspection frequency label for a checklist month.

    Semester months are checked first, so 3 and 9 are "Semestral"
    even though they are also quarter months.
    """
    if month in SEMESTER_MONTHS:
        return 'Semestral'
    elif month in QUARTER_MONTHS:
        return 'Trimestral'
    return 'Mensual'


def maintenance_pdf_filename(client_name: str, month: int, year: int, elevator_serial: str) -> str:
    """
    Download filename for a maintenance report.

    >>> maintenance_pdf_filename("Édificio Ñandú", 1, 2024, "SN-00#1")
    'edificio_nandu_sn001_enero_2024.pdf'
    """
    clean_client = re.sub(r'[^a-zA-Z0-9]+', '_', strip_diacritics(client_name or '')).lower()
    clean_serial = re.sub(r'[^a-zA-Z0-9]', '', elevator_serial or '').lower()
    return f"{clean_client}_{clean_serial}_{month_name(month).lower()}_{year}.pdf"


class StatusMark(NamedTuple):
    glyph: str              # What the reader sees
    dingbat: str            # Same glyph in the ZapfDingbats encoding
    color: Tuple[int, int, int]


def status_mark(status: str, branding: Optional[dict] = None) -> StatusMark:
    """Glyph and color for an answer status (approved ✓ green / rejected ✗ red)."""
    branding = branding or DEFAULT_BRANDING
    if status == 'approved':
        return StatusMark('✓', '4', tuple(branding["approved_color"]))
    if status == 'rejected':
        return StatusMark('✗', '8', tuple(branding["rejected_color"]))
    raise ValueError(f"Unanswered checklist status: {status!r}")


def rejected_with_observations(questions: List[ChecklistItem]) -> List[ChecklistItem]:
    """Rejected items that carry a non-blank observation, in checklist order."""
    return [
        q for q in questions
        if q.answer_status == 'rejected' and q.observations and q.observations.strip()
    ]


def _rgb(color: Tuple[int, int, int]) -> colors.Color:
    r, g, b = color
    return colors.Color(r / 255, g / 255, b / 255)


def _hex(color: Tuple[int, int, int]) -> str:
    return '#%02x%02x%02x' % tuple(color)


def _decode_image_data(data: str) -> bytes:
    """Decode a data URL ("data:image/png;base64,...") or bare base64 string."""
    if data.startswith('data:'):
        data = data.split(',', 1)[1]
    return base64.b64decode(data, validate=True)


# =============================================================================
# COMPOSER
# =============================================================================

class MaintenanceReportComposer:
    """
    Single-use composer for one maintenance report.

    After render(), `sections` lists the sections actually drawn and
    `page_count` the number of pages produced.
    """

    def __init__(
        self,
        data: MaintenanceReportInput,
        branding: Optional[dict] = None,
        generated_at: Optional[datetime] = None,
    ):
        self.data = data
        self.branding = branding or DEFAULT_BRANDING
        self.generated_at = generated_at or datetime.now().astimezone()
        self.layout = REPORT_LAYOUT

        self.page_width = A4[0] / mm
        self.page_height = A4[1] / mm
        self.content_width = self.page_width - 2 * self.layout["margin_x"]

        self.sections: List[str] = []
        self.page_count = 0
        self.y = 0.0
        self._buffer = io.BytesIO()
        self._canvas: Optional[canvas.Canvas] = None

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def render(self) -> bytes:
        folio = self.data.folio
        self._canvas = canvas.Canvas(self._buffer, pagesize=A4)
        self._canvas.setTitle(f"Informe de Mantenimiento - Folio {folio:06d}")
        self._canvas.setAuthor(self.branding["organization_display_name"])
        self.page_count = 1
        self.y = self.layout["margin_top"]

        self._draw_title_block()
        self._draw_general_info()
        self._draw_checklist()
        self._draw_observations()
        self._draw_signature()
        self._draw_footer()

        self._canvas.save()
        logger.info(
            f"Maintenance PDF folio {folio:06d}: {self.page_count} page(s), "
            f"{len(self.data.questions)} checklist item(s)"
        )
        return self._buffer.getvalue()

    # -------------------------------------------------------------------------
    # Cursor & primitives
    # -------------------------------------------------------------------------

    def _new_page(self):
        self._canvas.showPage()
        self.page_count += 1
        self.y = self.layout["margin_top"]

    def _ensure_space(self, min_space: float):
        if self.y > self.page_height - min_space:
            self._new_page()

    def _text(self, x: float, value: str, size: float, font: str = 'Helvetica',
              align: str = 'left', color: Tuple[int, int, int] = (0, 0, 0)):
        c = self._canvas
        c.setFont(font, size)
        c.setFillColor(_rgb(color))
        baseline = (self.page_height - self.y) * mm
        if align == 'center':
            c.drawCentredString(x * mm, baseline, value)
        elif align == 'right':
            c.drawRightString(x * mm, baseline, value)
        else:
            c.drawString(x * mm, baseline, value)

    def _rule(self):
        c = self._canvas
        c.setStrokeColor(_rgb(self.branding["rule_color"]))
        c.setLineWidth(0.5)
        baseline = (self.page_height - self.y) * mm
        c.line(self.layout["margin_x"] * mm, baseline,
               (self.page_width - self.layout["margin_x"]) * mm, baseline)

    def _section_title(self, title: str):
        self._text(self.layout["margin_x"], title, 11, 'Helvetica-Bold')

    def _draw_wrapped(self, value: str, font: str, size: float, after: float):
        """Draw text wrapped to the content width, breaking pages line by line."""
        line_height = self.layout["wrap_line_height"]
        lines = simpleSplit(value or '', font, size, self.content_width * mm) or ['']
        for line in lines:
            if self.y > self.page_height - self.layout["margin_bottom"]:
                self._new_page()
            self._text(self.layout["margin_x"], line, size, font)
            self.y += line_height
        self.y += after

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def _draw_title_block(self):
        center = self.page_width / 2
        self._text(center, self.branding["organization_name"], 20, 'Helvetica-Bold', 'center')

        self.y += 8
        self._text(center, 'INFORME DE MANTENIMIENTO', 16, 'Helvetica-Bold', 'center')

        self.y += 6
        frequency = maintenance_frequency(self.data.checklist.month)
        self._text(center, f'INSPECCIÓN {frequency.upper()}', 10, 'Helvetica', 'center')

        self.y += 10
        self._text(self.page_width - self.layout["margin_x"],
                   f'FOLIO N° {self.data.folio:06d}', 12, 'Helvetica-Bold', 'right')

        self.y += 10
        self._rule()
        self.sections.append('title')

    def general_info_rows(self) -> List[Tuple[str, str]]:
        d = self.data
        cl = d.checklist
        rows = [
            ('Cliente:', d.client.business_name),
            ('Dirección:', d.client.address or PLACEHOLDER),
            ('Contacto:', d.client.contact_name or PLACEHOLDER),
            ('Ascensor:', f"{d.elevator.brand} {d.elevator.model}".strip() or PLACEHOLDER),
            ('Número de Serie:', d.elevator.serial_number or PLACEHOLDER),
            ('Tipo:', 'Hidráulico' if d.elevator.is_hydraulic else 'Eléctrico'),
            ('Técnico:', d.technician.full_name),
            ('Periodo:', f"{month_name(cl.month)} {cl.year}"),
            ('Fecha de Inspección:', format_date_es(cl.completion_date)),
        ]
        if cl.certification_not_legible:
            rows.append(('Certificación:', 'Información no legible'))
        elif cl.last_certification_date:
            # Without a last certification date neither row is printed
            rows.append(('Última Certificación:', format_date_es(cl.last_certification_date)))
            rows.append(('Próxima Certificación:', format_date_es(cl.next_certification_date)))
        return rows

    def _draw_general_info(self):
        x_label = self.layout["margin_x"]
        x_value = self.layout["value_column_x"]
        value_width = (self.page_width - self.layout["margin_x"] - x_value) * mm
        line_height = self.layout["info_line_height"]

        self.y += 10
        self._section_title('INFORMACIÓN GENERAL')
        self.y += 7

        for label, value in self.general_info_rows():
            self._text(x_label, label, 10, 'Helvetica-Bold')
            lines = simpleSplit(value, 'Helvetica', 10, value_width) or ['']
            for i, line in enumerate(lines):
                if i:
                    self.y += line_height - 1
                self._text(x_value, line, 10)
            self.y += line_height

        self.y += 5
        self._rule()
        self.sections.append('general_info')

    def _build_checklist_table(self) -> Table:
        body_style = ParagraphStyle('ChecklistBody', fontName='Helvetica', fontSize=9, leading=11)
        mark_style = ParagraphStyle('ChecklistMark', fontName='ZapfDingbats', fontSize=12,
                                    leading=14, alignment=TA_CENTER)

        data = [['N°', 'Pregunta', 'Estado']]
        for q in self.data.questions:
            mark = status_mark(q.answer_status, self.branding)
            data.append([
                str(q.question_number),
                Paragraph(_escape_markup(q.question_text), body_style),
                Paragraph(f'<font color="{_hex(mark.color)}">{mark.dingbat}</font>', mark_style),
            ])

        col_widths = [w * mm for w in self.layout["checklist_col_widths"]]
        table = Table(data, colWidths=col_widths, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), _rgb(self.branding["table_header_color"])),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 10),
            ('FONTSIZE', (0, 1), (0, -1), 9),
            ('ALIGN', (0, 0), (0, -1), 'CENTER'),
            ('ALIGN', (2, 0), (2, -1), 'CENTER'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('TOPPADDING', (0, 0), (-1, -1), 3),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
        ]))
        return table

    def _draw_table(self, table: Table):
        """Draw a table at the cursor, splitting it across pages as needed."""
        c = self._canvas
        x = self.layout["margin_x"] * mm
        width = self.content_width * mm
        pending = [table]

        while pending:
            part = pending.pop(0)
            avail = (self.page_height - self.layout["margin_bottom"] - self.y) * mm
            _, height = part.wrapOn(c, width, avail)

            if height <= avail:
                part.drawOn(c, x, (self.page_height - self.y) * mm - height)
                self.y += height / mm
                continue

            pieces = part.split(width, avail)
            fresh_page = self.y <= self.layout["margin_top"]
            if len(pieces) < 2:
                if fresh_page:
                    # A single row taller than a page: draw it and let it overflow
                    part.drawOn(c, x, (self.page_height - self.y) * mm - height)
                    self.y += height / mm
                else:
                    self._new_page()
                    pending.insert(0, part)
                continue

            head, rest = pieces[0], pieces[1:]
            _, head_height = head.wrapOn(c, width, avail)
            head.drawOn(c, x, (self.page_height - self.y) * mm - head_height)
            self._new_page()
            pending = rest + pending

    def _draw_checklist(self):
        self.y += 10
        self._section_title('CHECKLIST DE MANTENIMIENTO')
        self.y += 7
        self._draw_table(self._build_checklist_table())
        self.y += 10
        self.sections.append('checklist')

    def _draw_observations(self):
        findings = rejected_with_observations(self.data.questions)
        if not findings:
            return

        self._ensure_space(self.layout["observations_min_space"])
        self._section_title('OBSERVACIONES Y HALLAZGOS')
        self.y += 7

        for index, q in enumerate(findings, start=1):
            self._ensure_space(self.layout["observation_entry_min_space"])

            self._text(self.layout["margin_x"], f'{index}. Pregunta N° {q.question_number}:',
                       10, 'Helvetica-Bold')
            self.y += 5
            self._draw_wrapped(q.question_text, 'Helvetica', 9, after=3)

            self._text(self.layout["margin_x"], 'Observación:', 9, 'Helvetica-Oblique')
            self.y += 4
            self._draw_wrapped(q.observations, 'Helvetica', 9, after=8)

        self.sections.append('observations')

    def _draw_signature(self):
        sig = self.data.signature
        x = self.layout["margin_x"]

        self._ensure_space(self.layout["signature_min_space"])

        self.y += 10
        self._rule()

        self.y += 10
        self._section_title('FIRMA Y RECEPCIÓN')

        self.y += 7
        self._text(x, 'RECEPCIONADO POR:', 10)

        self.y += 5
        self._text(x, sig.signer_name, 10, 'Helvetica-Bold')

        self.y += 10

        if sig.signature_data:
            width = self.layout["signature_width"]
            height = self.layout["signature_height"]
            try:
                image = ImageReader(io.BytesIO(_decode_image_data(sig.signature_data)))
                self._canvas.drawImage(
                    image, x * mm, (self.page_height - self.y - height) * mm,
                    width=width * mm, height=height * mm, mask='auto',
                )
                self.y += height + 5
            except Exception as e:
                logger.error(f"Error adding signature image to folio {self.data.folio}: {e}")
                self.y += 5

        self._text(x, '_________________________', 9)
        self.y += 4
        self._text(x, 'Firma', 9)

        self.y += 10
        self._text(x, f'Fecha: {format_date_es(sig.signed_at)}', 9)
        self.y += 4
        self._text(x, f'Hora: {format_time_es(sig.signed_at)}', 9)

        self.sections.append('signature')

    def _draw_footer(self):
        footer_top = self.page_height - self.layout["footer_offset"]
        if self.y > footer_top:
            self._new_page()

        center = self.page_width / 2
        muted = self.branding["muted_color"]
        disclaimer = format_footer_template(self.branding["footer_disclaimer"], self.branding)

        self.y = footer_top
        self._text(center, disclaimer, 8, align='center', color=muted)
        self.y += 4
        self._text(center, f'Generado el {format_datetime_es(to_local(self.generated_at))}', 8,
                   align='center', color=muted)
        self.sections.append('footer')


def _escape_markup(value: str) -> str:
    """Escape text for a platypus Paragraph (which parses a mini-markup)."""
    return (value or '').replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


def generate_maintenance_pdf(
    data: MaintenanceReportInput,
    branding: Optional[dict] = None,
    generated_at: Optional[datetime] = None,
) -> bytes:
    """
    Generate the maintenance report PDF.

    Args:
        data: Checklist record for one elevator and month
        branding: Branding config dict (defaults to DEFAULT_BRANDING)
        generated_at: Timestamp printed in the footer (defaults to now)

    Returns:
        PDF file bytes
    """
    return MaintenanceReportComposer(data, branding, generated_at).render()
