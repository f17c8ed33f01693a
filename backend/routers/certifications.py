"""
Certifications router - elevator certification expiry alerts
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from database import get_db
from services.certification_alerts import run_certification_alerts

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/check-alerts")
async def check_certification_alerts(db: Session = Depends(get_db)):
    """Create today's certification expiry notifications (scheduled daily)"""
    try:
        created = run_certification_alerts(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Certification alert check failed: {e}")
        raise HTTPException(status_code=500, detail="Error al verificar certificaciones")

    return {
        "success": True,
        "alertsCreated": created,
        "message": f"Se crearon {created} alertas de certificación",
    }
