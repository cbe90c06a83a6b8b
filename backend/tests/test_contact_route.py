from contact_relay.core.errors import DeliveryError

from conftest import FakeSender, make_client, make_settings

VALID = {"name": "Ana", "email": "ana@test.com", "message": "Hola"}


def test_contact_success_returns_message_id(client, fake_sender):
    resp = client.post("/api/contact", json=VALID)
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "messageId": "<fake-1@test>"}

    msg = fake_sender.sent[0]
    assert msg.subject == "New message from Ana"
    assert "Phone: -" in msg.text
    assert msg.to == "owner@example.com"
    assert msg.reply_to == "ana@test.com"


def test_contact_with_subject_and_phone(client, fake_sender):
    body = dict(VALID, subject="Quote", phone="+34 600 000 000")
    resp = client.post("/api/contact", json=body)
    assert resp.status_code == 200
    msg = fake_sender.sent[0]
    assert msg.subject == "(Quote) New message from Ana"
    assert "Phone: +34 600 000 000" in msg.text


def test_empty_name_is_rejected_without_sending(client, fake_sender):
    resp = client.post("/api/contact", json=dict(VALID, name=""))
    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": "missing required fields"}
    assert fake_sender.sent == []


def test_invalid_email_is_rejected(client, fake_sender):
    resp = client.post("/api/contact", json=dict(VALID, email="not-an-email"))
    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": "invalid email"}
    assert fake_sender.sent == []


def test_missing_body_counts_as_missing_fields(client, fake_sender):
    resp = client.post("/api/contact")
    assert resp.status_code == 400
    assert resp.json()["error"] == "missing required fields"
    assert fake_sender.sent == []


def test_malformed_body_is_a_client_error(client, fake_sender):
    resp = client.post("/api/contact", json={"name": 42, "email": "ana@test.com", "message": "Hola"})
    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": "invalid request body"}

    resp = client.post("/api/contact", json=["not", "an", "object"])
    assert resp.status_code == 400
    assert fake_sender.sent == []


def test_html_body_is_escaped_end_to_end(client, fake_sender):
    resp = client.post("/api/contact", json=dict(VALID, message="<b>hi</b> & 'bye'"))
    assert resp.status_code == 200
    html = fake_sender.sent[0].html
    assert "<b>hi</b>" not in html
    assert "&lt;b&gt;hi&lt;/b&gt; &amp; &#x27;bye&#x27;" in html


def test_authentication_failure_returns_500_once():
    sender = FakeSender(send_error=DeliveryError("(535, b'Username and Password not accepted')"))
    client = make_client(make_settings(), sender)

    resp = client.post("/api/contact", json=VALID)
    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "(535, b'Username and Password not accepted')"}
    assert len(sender.sent) == 1


def test_unexpected_error_returns_generic_500():
    sender = FakeSender(send_error=RuntimeError("boom"))
    client = make_client(make_settings(), sender)

    resp = client.post("/api/contact", json=VALID)
    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "internal server error"}


def test_unexpected_error_keeps_cors_headers_for_browsers():
    sender = FakeSender(send_error=RuntimeError("boom"))
    client = make_client(make_settings(), sender)

    resp = client.post("/api/contact", json=VALID, headers={"Origin": "https://site.example.com"})
    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "internal server error"}
    assert resp.headers["access-control-allow-origin"] == "https://site.example.com"
