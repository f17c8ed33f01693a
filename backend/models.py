"""
SQLAlchemy models for the maintenance admin backend

These describe the hosted database tables the service reads (and, for
sent_at, QR records and notifications, writes). Schema changes are
managed by the hosted database, not from here.

Identifiers are UUID strings generated by the database.
"""

import uuid

from sqlalchemy import Column, Integer, String, Boolean, Text, ForeignKey, Date, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


# =============================================================================
# CLIENTS & EQUIPMENT
# =============================================================================

class Client(Base):
    """Building / company receiving maintenance"""
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=_uuid)
    business_name = Column(String(255), nullable=False)   # Razón social
    company_name = Column(String(255))
    building_name = Column(String(255))                   # Printed on QR labels
    address = Column(Text)
    contact_name = Column(String(255))
    email = Column(String(255))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=func.current_timestamp())

    elevators = relationship("Elevator", back_populates="client")
    profiles = relationship("Profile", back_populates="client")
    qr_codes = relationship("ClientQrCode", back_populates="client")


class Elevator(Base):
    __tablename__ = "elevators"

    id = Column(String(36), primary_key=True, default=_uuid)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False)
    brand = Column(String(100))
    model = Column(String(100))
    serial_number = Column(String(100))
    is_hydraulic = Column(Boolean, default=False)

    client = relationship("Client", back_populates="elevators")


class Profile(Base):
    """User profile (technicians, admins, client users)"""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    full_name = Column(String(255))
    email = Column(String(255))
    role = Column(String(20))  # developer, admin, technician, client
    client_id = Column(String(36), ForeignKey("clients.id"))  # Set for client users

    client = relationship("Client", back_populates="profiles")


# =============================================================================
# CHECKLISTS
# =============================================================================

class Checklist(Base):
    """One monthly maintenance visit of one elevator"""
    __tablename__ = "mnt_checklists"

    id = Column(String(36), primary_key=True, default=_uuid)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False)
    elevator_id = Column(String(36), ForeignKey("elevators.id"), nullable=False)
    technician_id = Column(String(36), ForeignKey("profiles.id"))
    month = Column(Integer, nullable=False)   # 1-12
    year = Column(Integer, nullable=False)
    completion_date = Column(DateTime(timezone=True))
    last_certification_date = Column(Date)
    next_certification_date = Column(Date)
    certification_not_legible = Column(Boolean, default=False)

    client = relationship("Client")
    elevator = relationship("Elevator")
    technician = relationship("Profile")
    answers = relationship("ChecklistAnswer", back_populates="checklist")


class ChecklistQuestion(Base):
    __tablename__ = "mnt_checklist_questions"

    id = Column(String(36), primary_key=True, default=_uuid)
    question_number = Column(Integer, nullable=False)
    section = Column(String(100))
    question_text = Column(Text, nullable=False)


class ChecklistAnswer(Base):
    __tablename__ = "mnt_checklist_answers"

    id = Column(String(36), primary_key=True, default=_uuid)
    checklist_id = Column(String(36), ForeignKey("mnt_checklists.id"), nullable=False)
    question_id = Column(String(36), ForeignKey("mnt_checklist_questions.id"), nullable=False)
    status = Column(String(20), default="pending")  # pending, approved, rejected
    observations = Column(Text)

    checklist = relationship("Checklist", back_populates="answers")
    question = relationship("ChecklistQuestion")


class ChecklistSignature(Base):
    __tablename__ = "mnt_checklist_signatures"

    id = Column(String(36), primary_key=True, default=_uuid)
    checklist_id = Column(String(36), ForeignKey("mnt_checklists.id"), nullable=False)
    signer_name = Column(String(255))
    signature_data = Column(Text)  # PNG data URL
    signed_at = Column(DateTime(timezone=True))


class MaintenancePdf(Base):
    """Generated maintenance report record (folio + delivery status)"""
    __tablename__ = "mnt_maintenance_pdfs"

    id = Column(String(36), primary_key=True, default=_uuid)
    checklist_id = Column(String(36), ForeignKey("mnt_checklists.id"), nullable=False)
    folio_number = Column(Integer, nullable=False, unique=True)
    file_name = Column(String(255))
    sent_at = Column(DateTime(timezone=True))  # NULL = not yet emailed
    created_at = Column(DateTime(timezone=True), default=func.current_timestamp())

    checklist = relationship("Checklist")


# =============================================================================
# QR CODES & NOTIFICATIONS
# =============================================================================

class ClientQrCode(Base):
    __tablename__ = "mnt_client_qr_codes"

    id = Column(String(36), primary_key=True, default=_uuid)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, unique=True)
    qr_code = Column(String(50), nullable=False)  # MIREGA-XXXXXXXX
    created_at = Column(DateTime(timezone=True), default=func.current_timestamp())

    client = relationship("Client", back_populates="qr_codes")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    type = Column(String(20))   # info, warning, error
    title = Column(String(255))
    message = Column(Text)
    link = Column(String(100))
    read = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=func.current_timestamp())


class Setting(Base):
    """Per-installation key/value settings (branding overrides)"""
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    category = Column(String(50), nullable=False)
    key = Column(String(100), nullable=False)
    value = Column(Text)
    value_type = Column(String(20), default="string")  # string, number, boolean, json
