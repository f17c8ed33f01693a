"""Builders for composer inputs and seeded database rows."""

import base64
import io
from datetime import date, datetime

from PIL import Image

from models import (
    Checklist, ChecklistAnswer, ChecklistQuestion, ChecklistSignature, Client, Elevator,
    MaintenancePdf, Profile,
)
from schemas_maintenance import (
    ChecklistItem, ChecklistPeriod, ClientInfo, ElevatorInfo, MaintenanceReportInput,
    SignatureInfo, TechnicianInfo,
)


def png_data_url(width=40, height=20) -> str:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()


def make_items(count, rejected=(), observations=None):
    observations = observations or {}
    return [
        ChecklistItem(
            question_number=n,
            section="Sala de máquinas",
            question_text=f"Pregunta de inspección número {n}",
            answer_status="rejected" if n in rejected else "approved",
            observations=observations.get(n),
        )
        for n in range(1, count + 1)
    ]


def make_report_input(
    month=1,
    questions=None,
    signature_data="",
    last_cert=date(2023, 6, 1),
    next_cert=date(2024, 6, 1),
    not_legible=False,
    address="Av. Providencia 1234",
) -> MaintenanceReportInput:
    return MaintenanceReportInput(
        folio=42,
        client=ClientInfo(business_name="Edificio Ñandú", address=address, contact_name="Ana Pérez"),
        elevator=ElevatorInfo(brand="Otis", model="Gen2", serial_number="SN-001", is_hydraulic=False),
        checklist=ChecklistPeriod(
            month=month,
            year=2024,
            completion_date=datetime(2024, 1, 15, 10, 30),
            last_certification_date=last_cert,
            next_certification_date=next_cert,
            certification_not_legible=not_legible,
        ),
        technician=TechnicianInfo(full_name="Juan Soto", email="juan@example.com"),
        questions=questions if questions is not None else make_items(5),
        signature=SignatureInfo(
            signer_name="Pedro Rojas",
            signature_data=signature_data,
            signed_at=datetime(2024, 1, 15, 11, 0),
        ),
    )


def seed_client(db, business_name="Edificio Central", building_name=None, is_active=True,
                email="admin@central.cl", company_name="Inmobiliaria Central"):
    client = Client(
        business_name=business_name,
        building_name=building_name or business_name,
        company_name=company_name,
        address="Calle 1",
        contact_name="Contacto",
        email=email,
        is_active=is_active,
    )
    db.add(client)
    db.commit()
    return client


def seed_report(db, folio, client=None, sent_at=None, month=1, year=2024, brand="Otis",
                model="Gen2", serial="SN-001", answers=(("approved", None),)):
    """A MaintenancePdf with its checklist, elevator, technician and answers."""
    client = client or seed_client(db)
    elevator = Elevator(client_id=client.id, brand=brand, model=model, serial_number=serial)
    technician = Profile(full_name="Juan Soto", email="juan@example.com", role="technician")
    db.add_all([elevator, technician])
    db.flush()

    checklist = Checklist(
        client_id=client.id,
        elevator_id=elevator.id,
        technician_id=technician.id,
        month=month,
        year=year,
        completion_date=datetime(year, month, 15, 10, 0),
        last_certification_date=date(year - 1, 6, 1),
        next_certification_date=date(year, 6, 1),
    )
    db.add(checklist)
    db.flush()

    for number, (status, observation) in enumerate(answers, start=1):
        question = ChecklistQuestion(question_number=number, section="General",
                                     question_text=f"Pregunta {number}")
        db.add(question)
        db.flush()
        db.add(ChecklistAnswer(checklist_id=checklist.id, question_id=question.id,
                               status=status, observations=observation))

    db.add(ChecklistSignature(checklist_id=checklist.id, signer_name="Pedro Rojas",
                              signature_data="", signed_at=datetime(year, month, 15, 11, 0)))

    pdf = MaintenancePdf(checklist_id=checklist.id, folio_number=folio, sent_at=sent_at)
    db.add(pdf)
    db.commit()
    return pdf
