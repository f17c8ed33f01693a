"""
QR Codes router - building QR gallery, printable label sheets, QR records
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, Response, StreamingResponse
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
import io
import logging
import zipfile

from database import LIKE_ESCAPE, contains_pattern, get_db
from models import Client, ClientQrCode
from report_engine.branding_config import get_branding
from report_engine.formatters import attachment_disposition
from report_engine.label_sheet import (
    EmptySelectionError, generate_label_sheet_html, generate_label_sheet_pdf,
)
from schemas_maintenance import LabelItem, PrintSheetRequest
from services.qr_codes import (
    QR_DOWNLOAD_DARK, QR_DOWNLOAD_MARGIN, QR_DOWNLOAD_WIDTH,
    client_code, generate_qr_data_url, generate_qr_png, registration_code,
)
from settings_helper import format_utc_iso

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# HELPERS
# =============================================================================

def _building_name(client: Client) -> str:
    return client.building_name or client.business_name


def _safe_filename(name: str) -> str:
    return name.replace('/', '-').replace('\\', '-')


def gallery_to_dict(client: Client) -> dict:
    code = client_code(client.id)
    return {
        "id": client.id,
        "building_name": _building_name(client),
        "company_name": client.company_name,
        "code": code,
        "qr_data_url": generate_qr_data_url(code),
    }


def qr_record_to_dict(record: ClientQrCode) -> dict:
    client = record.client
    return {
        "id": record.id,
        "client_id": record.client_id,
        "qr_code": record.qr_code,
        "created_at": format_utc_iso(record.created_at),
        "client": {
            "id": client.id,
            "business_name": client.business_name,
            "contact_name": client.contact_name,
            "address": client.address,
        } if client else None,
    }


def _selected_clients(db: Session, client_ids: List[str]) -> List[Client]:
    """Active clients for the requested ids, in request order (repeats kept)."""
    if not client_ids:
        return []
    rows = db.query(Client).filter(
        Client.id.in_(set(client_ids)),
        Client.is_active.is_(True),
    ).all()
    by_id = {c.id: c for c in rows}
    return [by_id[cid] for cid in client_ids if cid in by_id]


def _label_items(db: Session, request: PrintSheetRequest) -> List[LabelItem]:
    try:
        clients = _selected_clients(db, request.client_ids)
    except SQLAlchemyError as e:
        logger.error(f"Error loading clients for label sheet: {e}")
        raise HTTPException(status_code=500, detail="Error al cargar los clientes")

    return [
        LabelItem(
            identifier=client_code(c.id),
            display_name=_building_name(c),
            image=generate_qr_data_url(client_code(c.id)),
        )
        for c in clients
    ]


def _get_client_or_404(db: Session, client_id: str) -> Client:
    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        raise HTTPException(status_code=404, detail="Cliente no encontrado")
    return client


# =============================================================================
# GALLERY & PRINT
# =============================================================================

@router.get("/gallery")
async def get_qr_gallery(search: Optional[str] = None, db: Session = Depends(get_db)):
    """Active clients with their building QR, ordered by building name"""
    query = db.query(Client).filter(Client.is_active.is_(True))
    if search:
        term = contains_pattern(search.strip())
        query = query.filter(or_(
            Client.building_name.ilike(term, escape=LIKE_ESCAPE),
            Client.company_name.ilike(term, escape=LIKE_ESCAPE),
        ))
    clients = query.order_by(Client.building_name).all()
    return [gallery_to_dict(c) for c in clients]


@router.post("/print", response_class=HTMLResponse)
async def print_label_sheet(request: PrintSheetRequest, db: Session = Depends(get_db)):
    """Printable HTML label sheet for the selected clients"""
    items = _label_items(db, request)
    try:
        html = generate_label_sheet_html(items, request.paper_size, get_branding(db))
    except EmptySelectionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return HTMLResponse(content=html)


@router.post("/print.pdf")
async def print_label_sheet_pdf(request: PrintSheetRequest, db: Session = Depends(get_db)):
    """Label sheet rendered to PDF"""
    items = _label_items(db, request)
    try:
        pdf_bytes = generate_label_sheet_pdf(items, request.paper_size, get_branding(db))
    except EmptySelectionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=codigos_qr_{request.paper_size}.pdf"}
    )


@router.post("/download")
async def download_qr_zip(request: PrintSheetRequest, db: Session = Depends(get_db)):
    """ZIP with one QR-<building>.png per selected client"""
    clients = _selected_clients(db, list(dict.fromkeys(request.client_ids)))
    if not clients:
        raise HTTPException(status_code=400, detail="Por favor selecciona al menos un código QR")

    buffer = io.BytesIO()
    used_names = set()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for client in clients:
            name = f"QR-{_safe_filename(_building_name(client))}"
            if name in used_names:
                name = f"{name}-{client_code(client.id)}"
            used_names.add(name)
            archive.writestr(f"{name}.png", generate_qr_png(client_code(client.id)))

    logger.info(f"QR ZIP: {len(clients)} image(s)")
    buffer.seek(0)
    return StreamingResponse(
        buffer,
        media_type="application/zip",
        headers={"Content-Disposition": "attachment; filename=codigos_qr.zip"}
    )


# =============================================================================
# QR RECORDS
# =============================================================================

@router.get("")
async def list_qr_codes(db: Session = Depends(get_db)):
    """Clients with a QR record, plus active clients still without one"""
    records = db.query(ClientQrCode).order_by(ClientQrCode.created_at.desc()).all()
    with_qr = {r.client_id for r in records}

    clients = db.query(Client).filter(Client.is_active.is_(True)).order_by(Client.business_name).all()
    without_qr = [
        {
            "id": c.id,
            "business_name": c.business_name,
            "contact_name": c.contact_name,
            "address": c.address,
        }
        for c in clients if c.id not in with_qr
    ]

    return {
        "qr_codes": [qr_record_to_dict(r) for r in records],
        "clients_without_qr": without_qr,
    }


@router.post("/clients/{client_id}")
async def create_qr_code(client_id: str, db: Session = Depends(get_db)):
    """Register the QR code for a client"""
    client = _get_client_or_404(db, client_id)

    existing = db.query(ClientQrCode).filter(ClientQrCode.client_id == client_id).first()
    if existing:
        raise HTTPException(status_code=409, detail="El cliente ya tiene un código QR")

    record = ClientQrCode(client_id=client.id, qr_code=registration_code(client.id))
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="El cliente ya tiene un código QR")
    db.refresh(record)

    logger.info(f"QR code {record.qr_code} created for client {client.business_name}")
    return qr_record_to_dict(record)


@router.get("/clients/{client_id}/image")
async def download_qr_image(client_id: str, db: Session = Depends(get_db)):
    """PNG of a client's registered QR code"""
    client = _get_client_or_404(db, client_id)
    record = db.query(ClientQrCode).filter(ClientQrCode.client_id == client_id).first()
    if not record:
        raise HTTPException(status_code=404, detail="Código QR no encontrado")

    png = generate_qr_png(
        record.qr_code,
        width=QR_DOWNLOAD_WIDTH,
        margin=QR_DOWNLOAD_MARGIN,
        dark=QR_DOWNLOAD_DARK,
    )
    filename = "QR_" + "_".join(client.business_name.split()) + ".png"
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": attachment_disposition(filename)}
    )
