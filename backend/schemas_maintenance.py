"""
Maintenance Pydantic Schemas

Composer inputs (frozen - built per export request and discarded)
and the request/response bodies of the maintenance and QR routers.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Literal
from datetime import date, datetime


AnswerStatus = Literal["approved", "rejected"]
PaperSize = Literal["letter", "a4"]


# =============================================================================
# REPORT COMPOSER INPUT
# =============================================================================

class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ClientInfo(_Frozen):
    business_name: str
    address: str = ""
    contact_name: str = ""


class ElevatorInfo(_Frozen):
    brand: str = ""
    model: str = ""
    serial_number: str = ""
    is_hydraulic: bool = False


class ChecklistPeriod(_Frozen):
    month: int = Field(ge=1, le=12)
    year: int
    completion_date: datetime
    last_certification_date: Optional[date] = None
    next_certification_date: Optional[date] = None
    certification_not_legible: bool = False


class TechnicianInfo(_Frozen):
    full_name: str
    email: Optional[str] = None


class ChecklistItem(_Frozen):
    """One answered inspection question (pending answers never get here)"""
    question_number: int
    section: str = ""
    question_text: str
    answer_status: AnswerStatus
    observations: Optional[str] = None


class SignatureInfo(_Frozen):
    signer_name: str
    signature_data: str = ""     # PNG data URL or bare base64
    signed_at: datetime


class MaintenanceReportInput(_Frozen):
    folio: int
    client: ClientInfo
    elevator: ElevatorInfo
    checklist: ChecklistPeriod
    technician: TechnicianInfo
    questions: List[ChecklistItem] = []
    signature: SignatureInfo


# =============================================================================
# LABEL SHEET INPUT
# =============================================================================

class LabelItem(_Frozen):
    identifier: str
    display_name: str
    image: str          # Pre-rendered PNG data URL


class PrintSheetRequest(BaseModel):
    client_ids: List[str]
    paper_size: PaperSize = "letter"


# =============================================================================
# API RESPONSES
# =============================================================================

class HistoryStats(BaseModel):
    total: int
    sent: int
    pending: int


class PdfHistoryItem(BaseModel):
    id: str
    folio_number: int
    file_name: Optional[str] = None
    sent_at: Optional[str] = None
    created_at: Optional[str] = None
    month: int
    year: int
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    elevator: Optional[str] = None
    serial_number: Optional[str] = None
    technician: Optional[str] = None


class PdfHistoryPage(BaseModel):
    items: List[PdfHistoryItem]
    stats: HistoryStats
    next_cursor: Optional[int] = None
