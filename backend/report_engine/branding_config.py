"""
Branding Configuration for Maintenance Documents

Defines default branding settings and the loader that applies
per-installation overrides from the settings table.

Colors used by the PDF composer are RGB tuples (0-255);
colors used by the HTML label sheet are CSS hex strings.
"""

from sqlalchemy.orm import Session

from settings_helper import get_setting

# =============================================================================
# DEFAULT BRANDING
# Fallback values when a setting hasn't been configured
# =============================================================================

DEFAULT_BRANDING = {
    "version": 1,

    # Identity
    "organization_name": "MIREGA ASCENSORES",
    "organization_display_name": "MIREGA Ascensores",
    "label_sheet_title": "Códigos QR - Liftix",

    # PDF colors (RGB)
    "table_header_color": (41, 128, 185),   # Checklist header fill
    "approved_color": (22, 163, 74),        # ✓
    "rejected_color": (220, 38, 38),        # ✗
    "rule_color": (200, 200, 200),          # Section divider lines
    "muted_color": (128, 128, 128),         # Footer text

    # Label sheet colors (CSS)
    "label_accent_color": "#DC2626",        # Building name
    "label_border_color": "#000",
    "label_text_color": "#000",
    "font_family": "Arial, sans-serif",

    # Footer Template (supports variables)
    "footer_disclaimer": "Este documento fue generado automáticamente por {organization_display_name}",
}

# Keys that may be overridden from the settings table (category "branding")
_STRING_KEYS = (
    "organization_name",
    "organization_display_name",
    "label_sheet_title",
    "label_accent_color",
    "font_family",
    "footer_disclaimer",
)


# =============================================================================
# BRANDING LOADER
# =============================================================================

def get_branding(db: Session) -> dict:
    """
    Load branding configuration from the settings table.
    Merges stored values with defaults for any missing keys.

    Args:
        db: Database session

    Returns:
        Complete branding config dict
    """
    branding = dict(DEFAULT_BRANDING)

    for key in _STRING_KEYS:
        value = get_setting(db, "branding", key, None)
        if value:
            branding[key] = value

    return branding


def format_footer_template(template: str, context: dict) -> str:
    """
    Format footer template with context variables.

    Supported variables:
        {organization_name}, {organization_display_name}

    Returns:
        Formatted string, or the template as-is if a variable is missing
    """
    if not template:
        return ""

    try:
        return template.format(**context)
    except KeyError:
        return template
