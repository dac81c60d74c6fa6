import pytest

from service.email_service import EmailDeliveryError

VALID = {
    "name": "Esi",
    "email": "esi@example.com",
    "phone": "0200000000",
    "subject": "Late delivery",
    "message": "My order took two hours.",
}


@pytest.fixture
def sent_emails(monkeypatch):
    sent = []

    def fake_send(**kwargs):
        sent.append(kwargs)
        return "msg_123"

    monkeypatch.setattr("routes.support.send_support_email", fake_send)
    return sent


def test_support_message_is_emailed(client, sent_emails):
    resp = client.post("/api/support/message", json=VALID)
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True
    assert sent_emails == [
        {
            "name": "Esi",
            "email": "esi@example.com",
            "phone": "0200000000",
            "subject": "Late delivery",
            "message": "My order took two hours.",
        }
    ]


@pytest.mark.parametrize("field", ["name", "email", "subject", "message"])
def test_missing_required_field(client, sent_emails, field):
    payload = dict(VALID)
    payload.pop(field)
    resp = client.post("/api/support/message", json=payload)
    assert resp.status_code == 400
    assert resp.get_json() == {
        "success": False,
        "message": "Please provide name, email, subject, and message",
    }
    assert sent_emails == []


def test_phone_is_optional(client, sent_emails):
    payload = dict(VALID)
    payload.pop("phone")
    assert client.post("/api/support/message", json=payload).status_code == 200
    assert sent_emails[0]["phone"] is None


def test_invalid_email(client, sent_emails):
    resp = client.post("/api/support/message", json=dict(VALID, email="not an email"))
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please provide a valid email address"


def test_email_provider_failure(client, monkeypatch):
    def broken(**kwargs):
        raise EmailDeliveryError("Failed to send email: 500")

    monkeypatch.setattr("routes.support.send_support_email", broken)
    resp = client.post("/api/support/message", json=VALID)
    assert resp.status_code == 500
    assert resp.get_json() == {
        "success": False,
        "message": "Failed to send message. Please try again later.",
    }


# ---------- Resend client ----------


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.text = str(body)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._body


def test_support_email_goes_to_admin_with_reply_to(monkeypatch):
    from service import email_service

    calls = []

    def fake_post(url, headers, json, timeout):
        calls.append((url, headers, json))
        return FakeResponse(200, {"id": "msg-123"})

    monkeypatch.setenv("RESEND_API_KEY", "re_test")
    monkeypatch.setenv("ADMIN_EMAIL", "owner@hoodeatery.com")
    monkeypatch.setattr(email_service.requests, "post", fake_post)

    message_id = email_service.send_support_email("Ama", "ama@example.com", "Late order", "Where is it?")

    assert message_id == "msg-123"
    url, headers, payload = calls[0]
    assert url == email_service.RESEND_API
    assert headers["Authorization"] == "Bearer re_test"
    assert payload["to"] == "owner@hoodeatery.com"
    assert payload["reply_to"] == "ama@example.com"
    assert payload["subject"] == "Support Message: Late order"
    assert "Not provided" in payload["html"]


def test_resend_error_raises_delivery_error(monkeypatch):
    from service import email_service

    monkeypatch.setenv("RESEND_API_KEY", "re_test")
    monkeypatch.setattr(
        email_service.requests, "post", lambda *a, **kw: FakeResponse(422, {"message": "bad"})
    )

    with pytest.raises(EmailDeliveryError):
        email_service.send_support_email("Ama", "ama@example.com", "Hi", "Hello")


def test_missing_api_key_raises_delivery_error(monkeypatch):
    from service import email_service

    monkeypatch.delenv("RESEND_API_KEY", raising=False)

    with pytest.raises(EmailDeliveryError):
        email_service.send_support_email("Ama", "ama@example.com", "Hi", "Hello")


def test_support_email_escapes_customer_input(monkeypatch):
    from service import email_service

    payloads = []

    def fake_post(url, headers, json, timeout):
        payloads.append(json)
        return FakeResponse(200, {"id": "msg-456"})

    monkeypatch.setenv("RESEND_API_KEY", "re_test")
    monkeypatch.setattr(email_service.requests, "post", fake_post)

    email_service.send_support_email(
        "<b>Ama</b>",
        "ama@example.com",
        "<img src=x onerror=alert(1)>",
        "<script>alert('hi')</script>",
    )

    html = payloads[0]["html"]
    assert "<script>" not in html
    assert "<img" not in html
    assert "<b>Ama</b>" not in html
    assert "&lt;script&gt;" in html
    assert "&lt;b&gt;Ama&lt;/b&gt;" in html
