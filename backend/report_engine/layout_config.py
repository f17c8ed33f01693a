"""
Print Layout Configuration

Geometry for the two printable documents:
- Maintenance report PDF (A4, millimetres, cursor measured from page top)
- QR label sheet (paper presets, grid, label card box)
"""

# =============================================================================
# MAINTENANCE REPORT PDF
# =============================================================================

REPORT_LAYOUT = {
    "margin_x": 15,             # mm, left/right
    "margin_top": 20,           # mm, cursor reset after a page break
    "margin_bottom": 15,        # mm, lowest line for tables and wrapped text
    "value_column_x": 60,       # mm, key/value block value column
    "info_line_height": 6,      # mm
    "wrap_line_height": 4,      # mm, observation text lines
    "footer_offset": 20,        # mm above page bottom

    # Page-break thresholds: remaining space (mm) needed before entering
    "observations_min_space": 60,
    "observation_entry_min_space": 40,
    "signature_min_space": 70,

    # Checklist table column widths (mm)
    "checklist_col_widths": (15, 140, 20),

    # Signature image box (mm)
    "signature_width": 80,
    "signature_height": 30,
}


# =============================================================================
# QR LABEL SHEET
# =============================================================================

LABELS_PER_ROW = 5

PAPER_SIZES = {
    "letter": {
        "name": "Carta (8.5\" x 11\")",
        "page_size": "letter",
        "width": "8.5in",
        "height": "11in",
        "labels_per_page": 20,
    },
    "a4": {
        "name": "A4 (210mm x 297mm)",
        "page_size": "A4",
        "width": "210mm",
        "height": "297mm",
        "labels_per_page": 24,
    },
}

# Label card box (CSS px / pt)
LABEL_CARD = {
    "width": 112,
    "height": 150,
    "border_width": 2,
    "border_radius": 16,
    "image_size": 100,
    "image_top_offset": 6,
    "caption_font_size": 12,   # pt
    "name_font_size": 21,      # pt
    "grid_gap": 16,
    "page_margin": "0.5in",
    "page_padding": 20,
}


def get_paper_size(paper_size: str) -> dict:
    """Look up a paper preset, raising ValueError for unknown keys."""
    try:
        return PAPER_SIZES[paper_size]
    except KeyError:
        raise ValueError(f"Unknown paper size: {paper_size!r}")
