import pytest

from models import MaintenancePdf
from services.report_data import ReportDataError, build_report_input, load_checklist_items
from helpers import seed_report


def test_loader_drops_pending_answers_and_orders_by_number(db):
    pdf = seed_report(db, 1, answers=(
        ("rejected", "Sin iluminación"),
        ("pending", None),
        ("approved", None),
    ))

    items = load_checklist_items(db, pdf.checklist_id)

    assert [(i.question_number, i.answer_status) for i in items] == [(1, "rejected"), (3, "approved")]
    assert items[0].observations == "Sin iluminación"


def test_build_report_input(db):
    pdf = seed_report(db, 5, month=6, serial="SN-42")

    data = build_report_input(db, pdf)

    assert data.folio == 5
    assert data.client.business_name == "Edificio Central"
    assert data.elevator.serial_number == "SN-42"
    assert data.checklist.month == 6
    assert data.technician.full_name == "Juan Soto"
    assert data.signature.signer_name == "Pedro Rojas"


def test_missing_checklist_raises(db):
    orphan = MaintenancePdf(checklist_id="missing", folio_number=99)

    with pytest.raises(ReportDataError):
        build_report_input(db, orphan)
