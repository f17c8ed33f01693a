import base64
import json

import httpx

import email_service


def _patch_transport(monkeypatch, handler):
    real_client = httpx.Client

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(email_service.httpx, "Client", client_factory)


def _send(**overrides):
    kwargs = dict(
        to_email="admin@central.cl",
        client_name="Edificio Central",
        elevator_info="Otis Gen2",
        month=3,
        year=2024,
        folio=42,
        pdf_bytes=b"%PDF-1.4 test",
        file_name="edificio_central_sn001_marzo_2024.pdf",
    )
    kwargs.update(overrides)
    return email_service.send_maintenance_report(**kwargs)


def test_payload_shape():
    payload = email_service.build_report_payload(
        "a@b.cl", "Cliente", "Otis Gen2", 3, 2024, 7, b"pdf", "f.pdf"
    )
    assert payload == {
        "to": "a@b.cl",
        "clientName": "Cliente",
        "elevatorInfo": "Otis Gen2",
        "period": "3/2024",
        "folio": 7,
        "pdfBase64": base64.b64encode(b"pdf").decode(),
        "fileName": "f.pdf",
    }


def test_posts_to_function_with_bearer_key(monkeypatch):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True})

    monkeypatch.setattr(email_service, "FUNCTIONS_API_KEY", "test-key")
    monkeypatch.setattr(email_service, "FUNCTIONS_BASE_URL", "http://functions.local/")
    _patch_transport(monkeypatch, handler)

    assert _send() is True
    assert seen["url"] == "http://functions.local/functions/v1/send-maintenance-report"
    assert seen["auth"] == "Bearer test-key"
    assert seen["body"]["period"] == "3/2024"
    assert base64.b64decode(seen["body"]["pdfBase64"]) == b"%PDF-1.4 test"


def test_error_status_returns_false(monkeypatch):
    monkeypatch.setattr(email_service, "FUNCTIONS_API_KEY", "test-key")
    _patch_transport(monkeypatch, lambda request: httpx.Response(500, json={"error": "smtp"}))

    assert _send() is False


def test_missing_api_key_returns_false(monkeypatch):
    monkeypatch.setattr(email_service, "FUNCTIONS_API_KEY", "")
    assert _send() is False


def test_missing_recipient_returns_false(monkeypatch):
    monkeypatch.setattr(email_service, "FUNCTIONS_API_KEY", "test-key")
    assert _send(to_email=None) is False
