import csv
import io
from datetime import datetime, timezone

import email_service
from models import MaintenancePdf
from helpers import seed_client, seed_report


def _seed_history(db):
    central = seed_client(db, business_name="Edificio Central")
    norte = seed_client(db, business_name="Torre Norte", email="torre@norte.cl")
    seed_report(db, 101, client=central, sent_at=datetime(2024, 2, 1, tzinfo=timezone.utc))
    seed_report(db, 102, client=norte, brand="Schindler", model="3300")
    seed_report(db, 103, client=central, month=3)
    return central, norte


def test_list_orders_by_folio_desc_with_stats(client, db):
    _seed_history(db)

    response = client.get("/api/maintenance-pdfs")
    assert response.status_code == 200
    body = response.json()

    assert [item["folio_number"] for item in body["items"]] == [103, 102, 101]
    assert body["stats"] == {"total": 3, "sent": 1, "pending": 2}
    assert body["next_cursor"] is None
    assert body["items"][1]["elevator"] == "Schindler 3300"


def test_list_search_matches_client_elevator_and_folio(client, db):
    _seed_history(db)

    by_client = client.get("/api/maintenance-pdfs", params={"search": "torre"}).json()
    by_brand = client.get("/api/maintenance-pdfs", params={"search": "SCHINDLER"}).json()
    by_folio = client.get("/api/maintenance-pdfs", params={"search": "103"}).json()

    assert [i["folio_number"] for i in by_client["items"]] == [102]
    assert [i["folio_number"] for i in by_brand["items"]] == [102]
    assert [i["folio_number"] for i in by_folio["items"]] == [103]
    # Stats always cover the whole history
    assert by_client["stats"]["total"] == 3


def test_list_sent_filter(client, db):
    _seed_history(db)

    sent = client.get("/api/maintenance-pdfs", params={"sent": "sent"}).json()
    pending = client.get("/api/maintenance-pdfs", params={"sent": "not_sent"}).json()

    assert [i["folio_number"] for i in sent["items"]] == [101]
    assert sent["items"][0]["sent_at"] is not None
    assert [i["folio_number"] for i in pending["items"]] == [103, 102]


def test_list_keyset_pagination(client, db):
    _seed_history(db)

    first = client.get("/api/maintenance-pdfs", params={"limit": 2}).json()
    assert [i["folio_number"] for i in first["items"]] == [103, 102]
    assert first["next_cursor"] == 102

    second = client.get("/api/maintenance-pdfs",
                        params={"limit": 2, "before_folio": first["next_cursor"]}).json()
    assert [i["folio_number"] for i in second["items"]] == [101]
    assert second["next_cursor"] is None


def test_list_rejects_bad_limit(client):
    assert client.get("/api/maintenance-pdfs", params={"limit": 500}).status_code == 422


def test_download_streams_pdf(client, db):
    pdf = seed_report(db, 7, answers=(("approved", None), ("rejected", "Freno con desgaste"),
                                      ("pending", None)))

    response = client.get(f"/api/maintenance-pdfs/{pdf.id}/download")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
    assert "edificio_central_sn001_enero_2024.pdf" in response.headers["content-disposition"]


def test_download_uses_stored_file_name(client, db):
    pdf = seed_report(db, 8)
    pdf.file_name = "informe_folio_8.pdf"
    db.commit()

    response = client.get(f"/api/maintenance-pdfs/{pdf.id}/download")
    assert "informe_folio_8.pdf" in response.headers["content-disposition"]


def test_download_unknown_pdf(client):
    response = client.get("/api/maintenance-pdfs/does-not-exist/download")
    assert response.status_code == 404
    assert response.json()["detail"] == "PDF no encontrado"


def test_resend_marks_sent(client, db, monkeypatch):
    pdf = seed_report(db, 9)
    calls = []

    def fake_send(**kwargs):
        calls.append(kwargs)
        return True

    monkeypatch.setattr(email_service, "send_maintenance_report", fake_send)

    response = client.post(f"/api/maintenance-pdfs/{pdf.id}/resend")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert calls[0]["to_email"] == "admin@central.cl"
    assert calls[0]["elevator_info"] == "Otis Gen2"
    assert calls[0]["pdf_bytes"].startswith(b"%PDF")
    db.refresh(pdf)
    assert pdf.sent_at is not None


def test_resend_failure_leaves_sent_at_untouched(client, db, monkeypatch):
    pdf = seed_report(db, 10)
    monkeypatch.setattr(email_service, "send_maintenance_report", lambda **kwargs: False)

    response = client.post(f"/api/maintenance-pdfs/{pdf.id}/resend")

    assert response.status_code == 502
    assert db.query(MaintenancePdf).filter(MaintenancePdf.id == pdf.id).one().sent_at is None


def test_export_csv(client, db):
    _seed_history(db)

    response = client.get("/api/maintenance-pdfs/export.csv", params={"sent": "sent"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    rows = list(csv.reader(io.StringIO(response.content.decode("utf-8-sig"))))
    assert rows[0][0] == "Folio"
    assert len(rows) == 2
    assert rows[1][0] == "000101"
    assert rows[1][4] == "Enero 2024"
    assert rows[1][-1] == "Sí"


def test_list_search_treats_wildcards_literally(client, db):
    _seed_history(db)

    assert client.get("/api/maintenance-pdfs", params={"search": "%"}).json()["items"] == []
    assert client.get("/api/maintenance-pdfs", params={"search": "1_1"}).json()["items"] == []
    assert [i["folio_number"] for i in
            client.get("/api/maintenance-pdfs", params={"search": "101"}).json()["items"]] == [101]


def test_download_with_non_latin1_stored_name(client, db):
    pdf = seed_report(db, 11)
    pdf.file_name = "informe_o’higgins.pdf"
    db.commit()

    response = client.get(f"/api/maintenance-pdfs/{pdf.id}/download")

    assert response.status_code == 200
    assert "filename=informe_o_higgins.pdf" in response.headers["content-disposition"]
