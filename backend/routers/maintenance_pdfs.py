"""
Maintenance PDFs router - report history, download, resend, export

PDFs are not stored: every download and resend re-composes the report
from the current checklist data.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy import String, cast, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from typing import Optional, Literal, Tuple
from datetime import datetime, timezone
import csv
import io
import logging

from database import LIKE_ESCAPE, contains_pattern, get_db
from models import Checklist, Client, Elevator, MaintenancePdf
from report_engine.branding_config import get_branding
from report_engine.formatters import attachment_disposition, format_date_es, month_name
from report_engine.maintenance_pdf import generate_maintenance_pdf, maintenance_pdf_filename
from schemas_maintenance import PdfHistoryPage
from services.report_data import ReportDataError, build_report_input
from settings_helper import format_utc_iso
import email_service

logger = logging.getLogger(__name__)

router = APIRouter()

SentFilter = Literal["all", "sent", "not_sent"]

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200

EXPORT_COLUMNS = ["Folio", "Cliente", "Ascensor", "N° Serie", "Periodo", "Técnico", "Creado", "Enviado"]


# =============================================================================
# HELPERS
# =============================================================================

def _history_query(db: Session, search: Optional[str], sent: SentFilter):
    """History rows joined with checklist/client/elevator, filters applied."""
    query = db.query(MaintenancePdf).join(
        Checklist, MaintenancePdf.checklist_id == Checklist.id
    ).join(
        Client, Checklist.client_id == Client.id
    ).join(
        Elevator, Checklist.elevator_id == Elevator.id
    ).options(
        joinedload(MaintenancePdf.checklist).joinedload(Checklist.client),
        joinedload(MaintenancePdf.checklist).joinedload(Checklist.elevator),
        joinedload(MaintenancePdf.checklist).joinedload(Checklist.technician),
    )

    if search:
        term = contains_pattern(search.strip())
        query = query.filter(or_(
            Client.business_name.ilike(term, escape=LIKE_ESCAPE),
            Elevator.brand.ilike(term, escape=LIKE_ESCAPE),
            Elevator.model.ilike(term, escape=LIKE_ESCAPE),
            cast(MaintenancePdf.folio_number, String).like(term, escape=LIKE_ESCAPE),
        ))

    if sent == "sent":
        query = query.filter(MaintenancePdf.sent_at.isnot(None))
    elif sent == "not_sent":
        query = query.filter(MaintenancePdf.sent_at.is_(None))

    return query


def pdf_to_dict(p: MaintenancePdf) -> dict:
    """Convert MaintenancePdf model to dict for API response"""
    checklist = p.checklist
    client = checklist.client if checklist else None
    elevator = checklist.elevator if checklist else None
    technician = checklist.technician if checklist else None
    return {
        "id": p.id,
        "folio_number": p.folio_number,
        "file_name": p.file_name,
        "sent_at": format_utc_iso(p.sent_at),
        "created_at": format_utc_iso(p.created_at),
        "month": checklist.month if checklist else 0,
        "year": checklist.year if checklist else 0,
        "client_name": client.business_name if client else None,
        "client_email": client.email if client else None,
        "elevator": f"{elevator.brand} {elevator.model}" if elevator else None,
        "serial_number": elevator.serial_number if elevator else None,
        "technician": technician.full_name if technician else None,
    }


def _get_pdf_or_404(db: Session, pdf_id: str) -> MaintenancePdf:
    pdf_record = db.query(MaintenancePdf).filter(MaintenancePdf.id == pdf_id).first()
    if not pdf_record:
        raise HTTPException(status_code=404, detail="PDF no encontrado")
    return pdf_record


def _render_pdf(db: Session, pdf_record: MaintenancePdf, error_detail: str) -> Tuple[bytes, str]:
    """Re-compose the report for a history record. Returns (pdf_bytes, file_name)."""
    try:
        data = build_report_input(db, pdf_record)
        branding = get_branding(db)
    except ReportDataError as e:
        logger.error(f"Report data missing for PDF {pdf_record.id}: {e}")
        raise HTTPException(status_code=404, detail=error_detail)
    except SQLAlchemyError as e:
        logger.error(f"Error loading report data for PDF {pdf_record.id}: {e}")
        raise HTTPException(status_code=500, detail=error_detail)

    pdf_bytes = generate_maintenance_pdf(data, branding)
    file_name = pdf_record.file_name or maintenance_pdf_filename(
        data.client.business_name, data.checklist.month, data.checklist.year,
        data.elevator.serial_number,
    )
    return pdf_bytes, file_name


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=PdfHistoryPage)
async def list_maintenance_pdfs(
    search: Optional[str] = None,
    sent: SentFilter = "all",
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    before_folio: Optional[int] = Query(default=None, description="Cursor: folio of the last row seen"),
    db: Session = Depends(get_db)
):
    """PDF history, newest folio first, with sent/pending counters"""
    query = _history_query(db, search, sent)
    if before_folio is not None:
        query = query.filter(MaintenancePdf.folio_number < before_folio)

    rows = query.order_by(MaintenancePdf.folio_number.desc()).limit(limit + 1).all()
    has_more = len(rows) > limit
    rows = rows[:limit]

    total = db.query(MaintenancePdf).count()
    sent_count = db.query(MaintenancePdf).filter(MaintenancePdf.sent_at.isnot(None)).count()

    return {
        "items": [pdf_to_dict(p) for p in rows],
        "stats": {"total": total, "sent": sent_count, "pending": total - sent_count},
        "next_cursor": rows[-1].folio_number if has_more and rows else None,
    }


@router.get("/export.csv")
async def export_maintenance_pdfs_csv(
    search: Optional[str] = None,
    sent: SentFilter = "all",
    db: Session = Depends(get_db)
):
    """CSV export of the (filtered) history"""
    rows = _history_query(db, search, sent).order_by(MaintenancePdf.folio_number.desc()).all()

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for p in rows:
        d = pdf_to_dict(p)
        writer.writerow([
            f"{p.folio_number:06d}",
            d["client_name"] or "",
            d["elevator"] or "",
            d["serial_number"] or "",
            f"{month_name(d['month'])} {d['year']}",
            d["technician"] or "",
            format_date_es(p.created_at) if p.created_at else "",
            "Sí" if p.sent_at else "No",
        ])

    filename = f"historico_pdfs_{datetime.now().strftime('%Y%m%d')}.csv"
    return StreamingResponse(
        io.BytesIO(output.getvalue().encode("utf-8-sig")),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.get("/{pdf_id}/download")
async def download_maintenance_pdf(pdf_id: str, db: Session = Depends(get_db)):
    """Re-compose and download a maintenance report PDF"""
    pdf_record = _get_pdf_or_404(db, pdf_id)
    pdf_bytes, file_name = _render_pdf(db, pdf_record, "Error al descargar el PDF")

    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": attachment_disposition(file_name)}
    )


@router.post("/{pdf_id}/resend")
async def resend_maintenance_pdf(pdf_id: str, db: Session = Depends(get_db)):
    """Re-compose a report and email it to the client again"""
    pdf_record = _get_pdf_or_404(db, pdf_id)
    pdf_bytes, file_name = _render_pdf(db, pdf_record, "Error al reenviar el correo")

    checklist = pdf_record.checklist
    client = checklist.client
    elevator = checklist.elevator

    sent = email_service.send_maintenance_report(
        to_email=client.email,
        client_name=client.business_name,
        elevator_info=f"{elevator.brand} {elevator.model}",
        month=checklist.month,
        year=checklist.year,
        folio=pdf_record.folio_number,
        pdf_bytes=pdf_bytes,
        file_name=file_name,
    )
    if not sent:
        raise HTTPException(status_code=502, detail="Error al reenviar el correo")

    pdf_record.sent_at = datetime.now(timezone.utc)
    db.commit()

    return {
        "success": True,
        "message": "Correo reenviado exitosamente",
        "to": client.email,
        "sent_at": format_utc_iso(pdf_record.sent_at),
    }
