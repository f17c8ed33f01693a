"""
Maintenance Report Data Loader

Builds the composer input for a stored maintenance PDF record:
checklist, client, elevator, technician, signature and the answered
checklist items. Pending (unanswered) items are dropped here so the
composer only ever sees approved/rejected answers.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from models import (
    Checklist, ChecklistAnswer, ChecklistQuestion, ChecklistSignature, MaintenancePdf,
)
from schemas_maintenance import (
    ChecklistItem, ChecklistPeriod, ClientInfo, ElevatorInfo, MaintenanceReportInput,
    SignatureInfo, TechnicianInfo,
)

logger = logging.getLogger(__name__)

ANSWERED_STATUSES = ('approved', 'rejected')


class ReportDataError(LookupError):
    """Stored data needed for a report is missing."""


def load_checklist_items(db: Session, checklist_id: str) -> List[ChecklistItem]:
    """Answered checklist items for a checklist, ordered by question number."""
    rows = db.query(ChecklistAnswer, ChecklistQuestion).join(
        ChecklistQuestion, ChecklistAnswer.question_id == ChecklistQuestion.id
    ).filter(
        ChecklistAnswer.checklist_id == checklist_id,
        ChecklistAnswer.status.in_(ANSWERED_STATUSES),
    ).order_by(ChecklistQuestion.question_number).all()

    return [
        ChecklistItem(
            question_number=question.question_number,
            section=question.section or '',
            question_text=question.question_text,
            answer_status=answer.status,
            observations=answer.observations,
        )
        for answer, question in rows
    ]


def _latest_signature(db: Session, checklist_id: str) -> Optional[ChecklistSignature]:
    return db.query(ChecklistSignature).filter(
        ChecklistSignature.checklist_id == checklist_id
    ).order_by(ChecklistSignature.signed_at.desc()).first()


def build_report_input(db: Session, pdf_record: MaintenancePdf) -> MaintenanceReportInput:
    """
    Assemble the composer input for a maintenance PDF record.

    Raises:
        ReportDataError: checklist, client or elevator row is missing
    """
    checklist: Checklist = pdf_record.checklist
    if checklist is None:
        raise ReportDataError(f"Checklist not found for folio {pdf_record.folio_number}")
    if checklist.client is None or checklist.elevator is None:
        raise ReportDataError(f"Client/elevator missing for checklist {checklist.id}")

    client = checklist.client
    elevator = checklist.elevator
    technician = checklist.technician
    signature = _latest_signature(db, checklist.id)

    items = load_checklist_items(db, checklist.id)
    logger.debug(f"Folio {pdf_record.folio_number}: {len(items)} answered item(s)")

    completion = checklist.completion_date or pdf_record.created_at or datetime.now(timezone.utc)
    signed_at = (signature.signed_at if signature and signature.signed_at else completion)

    return MaintenanceReportInput(
        folio=pdf_record.folio_number,
        client=ClientInfo(
            business_name=client.business_name,
            address=client.address or '',
            contact_name=client.contact_name or '',
        ),
        elevator=ElevatorInfo(
            brand=elevator.brand or '',
            model=elevator.model or '',
            serial_number=elevator.serial_number or '',
            is_hydraulic=bool(elevator.is_hydraulic),
        ),
        checklist=ChecklistPeriod(
            month=checklist.month,
            year=checklist.year,
            completion_date=completion,
            last_certification_date=checklist.last_certification_date,
            next_certification_date=checklist.next_certification_date,
            certification_not_legible=bool(checklist.certification_not_legible),
        ),
        technician=TechnicianInfo(
            full_name=technician.full_name if technician else '',
            email=technician.email if technician else None,
        ),
        questions=items,
        signature=SignatureInfo(
            signer_name=(signature.signer_name if signature else '') or '',
            signature_data=(signature.signature_data if signature else '') or '',
            signed_at=signed_at,
        ),
    )
