import logging

from fastapi.testclient import TestClient

from ppr_relay.main import create_app
from ppr_relay.schemas.mail import MailResult

from tests.conftest import FakeMailer, make_settings


URL = "/send-ppr-form"


def test_send_form_success(client, mailer):
    # WHEN
    response = client.post(URL, json={"Pilot First Name": "Jane", "Pilot Last Name": "Doe"})

    # THEN (HTTP)
    assert response.status_code == 200
    assert response.json() == {"message": "Email sent successfully."}

    # THEN (MAIL)
    assert len(mailer.sent) == 1
    message = mailer.sent[0]
    assert message.subject == "New PPR Submission: Jane Doe"
    assert message.to_address == "ppr@example.com"
    assert message.from_address == "DPA Website Form <sender@example.com>"


def test_send_form_renders_fields_in_order(client, mailer):
    payload = {
        "Pilot First Name": "Jane",
        "Pilot Last Name": "Doe",
        "Aircraft Registration": "N123AB",
        "Services": ["Fuel", "Hangar"],
    }

    response = client.post(URL, json=payload)

    assert response.status_code == 200
    html = mailer.sent[0].html
    assert html.count("<tr>") == 4
    positions = [html.index(f"<strong>{key}</strong>") for key in payload]
    assert positions == sorted(positions)
    assert "<td>Fuel, Hangar</td>" in html


def test_send_form_accepts_urlencoded_body(client, mailer):
    response = client.post(
        URL,
        data={"Pilot First Name": "Jane", "Pilot Last Name": "Doe", "Services": ["Fuel", "Parking"]},
    )

    assert response.status_code == 200
    assert mailer.sent[0].subject == "New PPR Submission: Jane Doe"
    assert "<td>Fuel, Parking</td>" in mailer.sent[0].html


def test_empty_object_is_rejected(client, mailer):
    response = client.post(URL, json={})

    assert response.status_code == 400
    assert response.json()["message"] == "No data received"
    assert mailer.sent == []


def test_empty_object_is_rejected_without_configuration():
    mailer = FakeMailer()
    app = create_app(make_settings(EMAIL_PASS=None, RESEND_API_KEY=None), mailer)

    with TestClient(app) as client:
        response = client.post(URL, json={})

    assert response.status_code == 400
    assert response.json()["message"] == "No data received"


def test_body_without_content_type_counts_as_empty(client, mailer):
    response = client.post(URL, content=b"Pilot First Name=Jane", headers={"Content-Type": "text/plain"})

    assert response.status_code == 400
    assert response.json()["message"] == "No data received"


def test_malformed_json_is_rejected(client, mailer):
    response = client.post(URL, content=b'{"Pilot First Name": "Jane"', headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.text == "Invalid JSON format"
    assert len(mailer.sent) == 0


def test_json_array_is_rejected(client, mailer):
    response = client.post(URL, json=["Jane", "Doe"])

    assert response.status_code == 400
    assert response.text == "Invalid JSON format"
    assert len(mailer.sent) == 0


def test_missing_configuration_refuses_submission():
    mailer = FakeMailer()
    app = create_app(make_settings(DESTINATION_EMAIL=None), mailer)

    with TestClient(app) as client:
        response = client.post(URL, json={"Pilot First Name": "Jane", "Pilot Last Name": "Doe"})

    assert response.status_code == 500
    assert response.json()["message"] == "Server configuration error."
    assert "DESTINATION_EMAIL" not in response.text
    assert mailer.sent == []


def test_delivery_failure_is_reported_and_logged_once(settings, caplog):
    mailer = FakeMailer(result=MailResult(success=False, error="HTTP 403: invalid api key"))

    with TestClient(create_app(settings, mailer)) as client:
        with caplog.at_level(logging.ERROR):
            response = client.post(URL, json={"Pilot First Name": "Jane", "Pilot Last Name": "Doe"})

    assert response.status_code == 500
    assert response.json()["message"] == "Error sending email."
    assert "invalid api key" not in response.text
    assert len(mailer.sent) == 1

    errors = [record for record in caplog.records if record.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert "invalid api key" in errors[0].getMessage()


def test_slow_provider_times_out():
    mailer = FakeMailer(delay=5)
    app = create_app(make_settings(MAIL_TIMEOUT_SECONDS=1), mailer)

    with TestClient(app) as client:
        response = client.post(URL, json={"Pilot First Name": "Jane"})

    assert response.status_code == 500
    assert response.json()["message"] == "Error sending email."


def test_oversized_body_is_rejected():
    mailer = FakeMailer()
    app = create_app(make_settings(MAX_BODY_SIZE_MB=1), mailer)

    with TestClient(app) as client:
        response = client.post(URL, json={"Notes": "x" * (1024 * 1024 + 1)})

    assert response.status_code == 413
    assert mailer.sent == []


def test_unknown_path_returns_json_error(client):
    response = client.get("/send-ppr-form-typo")

    assert response.status_code == 404
    assert response.json()["error"] == "http_error"


def test_raising_mailer_is_reported_as_delivery_error(settings, caplog):
    mailer = FakeMailer(error=ConnectionError("provider unreachable"))

    with TestClient(create_app(settings, mailer)) as client:
        with caplog.at_level(logging.ERROR):
            response = client.post(URL, json={"Pilot First Name": "Jane", "Pilot Last Name": "Doe"})

    assert response.status_code == 500
    assert response.json() == {"error": "delivery_error", "message": "Error sending email."}

    errors = [record for record in caplog.records if record.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert "ConnectionError: provider unreachable" in errors[0].getMessage()


def test_send_form_accepts_multipart_body(client, mailer):
    response = client.post(
        URL,
        data={"Pilot First Name": "Jane", "Pilot Last Name": "Doe", "Services": ["Fuel", "Hangar"]},
        files={"Flight Plan": ("plan.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert response.status_code == 200
    message = mailer.sent[0]
    assert message.subject == "New PPR Submission: Jane Doe"
    assert "<td>Fuel, Hangar</td>" in message.html
    assert "<td>plan.pdf</td>" in message.html


def test_chunked_body_over_limit_is_rejected():
    mailer = FakeMailer()
    app = create_app(make_settings(MAX_BODY_SIZE_MB=1), mailer)

    def chunks():
        yield b'{"Notes": "'
        for _ in range(3):
            yield b"x" * (1024 * 1024)
        yield b'"}'

    with TestClient(app) as client:
        response = client.post(URL, content=chunks(), headers={"Content-Type": "application/json"})

    assert response.status_code == 413
    assert mailer.sent == []


def test_metrics_label_unknown_paths_as_unmatched(client):
    client.get("/random-path-4f1c9e")
    client.get("/health")

    body = client.get("/metrics/").text

    assert "random-path-4f1c9e" not in body
    assert 'endpoint="unmatched"' in body
    assert 'endpoint="/health"' in body
