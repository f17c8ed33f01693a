"""
Email Service for maintenance reports
Delivers report PDFs through the hosted "send-maintenance-report" function.
The function owns SMTP/transport; this module only builds and posts the request.
"""

import base64
import logging
from typing import Optional

import httpx

from settings_helper import FUNCTIONS_BASE_URL, FUNCTIONS_API_KEY, SEND_REPORT_TIMEOUT

logger = logging.getLogger(__name__)

SEND_REPORT_PATH = "/functions/v1/send-maintenance-report"


def _function_url(path: str) -> str:
    """Build a URL on the functions host"""
    return f"{FUNCTIONS_BASE_URL.rstrip('/')}{path}"


def build_report_payload(
    to_email: str,
    client_name: str,
    elevator_info: str,
    month: int,
    year: int,
    folio: int,
    pdf_bytes: bytes,
    file_name: str,
) -> dict:
    """JSON body expected by send-maintenance-report"""
    return {
        "to": to_email,
        "clientName": client_name,
        "elevatorInfo": elevator_info,
        "period": f"{month}/{year}",
        "folio": folio,
        "pdfBase64": base64.b64encode(pdf_bytes).decode(),
        "fileName": file_name,
    }


def send_maintenance_report(
    to_email: Optional[str],
    client_name: str,
    elevator_info: str,
    month: int,
    year: int,
    folio: int,
    pdf_bytes: bytes,
    file_name: str,
) -> bool:
    """
    Send a maintenance report PDF to the client

    Args:
        to_email: Client email address
        client_name: Client business name (used in the email body)
        elevator_info: "<brand> <model>"
        month, year: Checklist period
        folio: Report folio number
        pdf_bytes: Rendered PDF
        file_name: Attachment filename

    Returns:
        True if the function accepted the request, False otherwise
    """
    if not to_email:
        logger.error(f"Folio {folio}: client has no email address - cannot send report")
        return False

    if not FUNCTIONS_API_KEY:
        logger.error("FUNCTIONS_API_KEY not configured - cannot send report")
        return False

    payload = build_report_payload(
        to_email, client_name, elevator_info, month, year, folio, pdf_bytes, file_name
    )
    headers = {
        "Authorization": f"Bearer {FUNCTIONS_API_KEY}",
        "Content-Type": "application/json",
    }

    try:
        with httpx.Client(timeout=SEND_REPORT_TIMEOUT) as client:
            response = client.post(_function_url(SEND_REPORT_PATH), json=payload, headers=headers)
            response.raise_for_status()
    except httpx.TimeoutException:
        logger.error(f"Timeout sending report folio {folio} to {to_email}")
        return False
    except httpx.HTTPStatusError as e:
        logger.error(f"send-maintenance-report returned {e.response.status_code} for folio {folio}")
        return False
    except httpx.HTTPError as e:
        logger.error(f"Error sending report folio {folio}: {e}")
        return False

    logger.info(f"Report folio {folio} sent successfully to {to_email}")
    return True
