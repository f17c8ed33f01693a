"""
Report Templates

CSS generation and the base HTML document for the QR label sheet.
All styles are generated from branding and the paper preset.
"""

from .layout_config import LABEL_CARD, LABELS_PER_ROW


def generate_label_css(paper: dict, branding: dict) -> str:
    """Generate complete CSS for a QR label sheet on the given paper preset."""
    accent = branding.get("label_accent_color", "#DC2626")
    border_color = branding.get("label_border_color", "#000")
    text_color = branding.get("label_text_color", "#000")
    font_family = branding.get("font_family", "Arial, sans-serif")
    card = LABEL_CARD

    return f'''
        @page {{
            size: {paper["page_size"]};
            margin: {card["page_margin"]};
        }}

        * {{ margin: 0; padding: 0; box-sizing: border-box; }}

        body {{
            font-family: {font_family};
            width: {paper["width"]};
            height: {paper["height"]};
        }}

        .page {{
            page-break-after: always;
            width: 100%;
            height: 100%;
            display: flex;
            flex-direction: column;
            padding: {card["page_padding"]}px;
        }}

        .page:last-child {{ page-break-after: auto; }}

        .qr-grid {{
            display: grid;
            grid-template-columns: repeat({LABELS_PER_ROW}, 1fr);
            gap: {card["grid_gap"]}px;
            width: 100%;
            height: 100%;
            align-content: start;
        }}

        .qr-card {{
            width: {card["width"]}px;
            height: {card["height"]}px;
            border: {card["border_width"]}px solid {border_color};
            border-radius: {card["border_radius"]}px;
            overflow: hidden;
            background: white;
            display: flex;
            flex-direction: column;
            margin: 0 auto;
        }}

        .qr-image-container {{
            width: {card["image_size"]}px;
            height: {card["image_size"]}px;
            margin: {card["image_top_offset"]}px auto 0;
            display: flex;
            align-items: center;
            justify-content: center;
        }}

        .qr-image {{
            width: 100%;
            height: 100%;
            display: block;
        }}

        .qr-label {{
            padding: 4px 6px;
            flex: 1;
            display: flex;
            flex-direction: column;
            justify-content: center;
            align-items: center;
            text-align: center;
        }}

        .label-text {{
            font-size: {card["caption_font_size"]}pt;
            color: {text_color};
            line-height: 1.2;
        }}

        .building-name {{
            font-size: {card["name_font_size"]}pt;
            color: {accent};
            font-weight: bold;
            line-height: 1.1;
            margin-top: 2px;
        }}

        @media print {{
            body {{
                print-color-adjust: exact;
                -webkit-print-color-adjust: exact;
            }}
        }}
    '''


def generate_base_html(title: str, css: str, body: str) -> str:
    """Generate complete HTML document with CSS and body content."""
    return f'''<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{title}</title>
    <style>
{css}
    </style>
</head>
<body>
    {body}
</body>
</html>'''
