"""
QR Label Sheet

Lays out selected building QR codes as printable label cards:
a fixed 5-column grid, paginated by the paper preset
(letter = 20 labels/page, A4 = 24 labels/page).

Output is a complete HTML document for the browser print dialog,
or the same markup rendered to PDF via WeasyPrint.
"""

import io
import logging
import math
from html import escape as html_escape
from typing import List, Optional, Sequence, TypeVar

from schemas_maintenance import LabelItem
from .branding_config import DEFAULT_BRANDING
from .layout_config import get_paper_size
from .templates import generate_label_css, generate_base_html

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EmptySelectionError(ValueError):
    """Raised when a label sheet is requested with no items selected."""


def esc(text) -> str:
    if text is None:
        return ''
    return html_escape(str(text))


def paginate(items: Sequence[T], per_page: int) -> List[List[T]]:
    """
    Split items into consecutive pages of at most per_page items.

    Order is preserved and every item lands on exactly one page:
    ceil(len(items) / per_page) pages, the last one possibly partial.
    """
    if per_page < 1:
        raise ValueError("per_page must be at least 1")
    page_count = math.ceil(len(items) / per_page)
    return [list(items[i * per_page:(i + 1) * per_page]) for i in range(page_count)]


def render_label_card(item: LabelItem) -> str:
    name = esc(item.display_name)
    return f'''<div class="qr-card" data-id="{esc(item.identifier)}">
            <div class="qr-image-container">
                <img src="{esc(item.image)}" alt="QR {name}" class="qr-image" />
            </div>
            <div class="qr-label">
                <div class="label-text">Edificio:</div>
                <div class="building-name">{name}</div>
            </div>
        </div>'''


def render_label_page(page_items: List[LabelItem]) -> str:
    cards = '\n'.join(render_label_card(item) for item in page_items)
    return f'''<div class="page">
    <div class="qr-grid">
        {cards}
    </div>
</div>'''


def generate_label_sheet_html(
    items: Sequence[LabelItem],
    paper_size: str,
    branding: Optional[dict] = None,
) -> str:
    """
    Build the printable HTML label sheet.

    Args:
        items: Selected labels, in print order (duplicates are kept)
        paper_size: "letter" or "a4"
        branding: Branding config dict (defaults to DEFAULT_BRANDING)

    Returns:
        Complete HTML document string

    Raises:
        EmptySelectionError: no items selected
        ValueError: unknown paper size
    """
    if not items:
        raise EmptySelectionError("Por favor selecciona al menos un código QR para imprimir")

    paper = get_paper_size(paper_size)
    branding = branding or DEFAULT_BRANDING

    pages = paginate(list(items), paper["labels_per_page"])
    body = '\n'.join(render_label_page(page) for page in pages)
    css = generate_label_css(paper, branding)

    logger.info(f"Label sheet: {len(items)} labels on {len(pages)} {paper_size} page(s)")
    return generate_base_html(esc(branding.get("label_sheet_title", "Códigos QR")), css, body)


def generate_label_sheet_pdf(
    items: Sequence[LabelItem],
    paper_size: str,
    branding: Optional[dict] = None,
) -> bytes:
    """Render the label sheet to PDF bytes with WeasyPrint."""
    from weasyprint import HTML

    html_content = generate_label_sheet_html(items, paper_size, branding)

    pdf_buffer = io.BytesIO()
    HTML(string=html_content).write_pdf(pdf_buffer)
    pdf_buffer.seek(0)

    return pdf_buffer.getvalue()
