"""Tests for expiration email composition and the SMTP sender."""

import smtplib

from assetvault.services.mail import MailService, compose_expiration_email


class TestComposeExpirationEmail:
    def test_reminder(self):
        subject, body = compose_expiration_email("Alice", "VPN", 3, "Acme Corp")
        assert subject == '"VPN" expires in 3 days'
        assert body.startswith("Hi Alice,")
        assert 'The asset "VPN" for Acme Corp will expire in 3 days.' in body

    def test_today_in_showroom(self):
        subject, body = compose_expiration_email("Bob", "Screen", 0, "Acme Corp", "Downtown")
        assert subject == '"Screen" expires today'
        assert 'The asset "Screen" in showroom "Downtown" for Acme Corp is expiring today.' in body


class TestMailService:
    def test_send_reports_failure(self, monkeypatch):
        service = MailService(host="smtp.invalid", port=2525, sender="vault@acme.test")

        def refuse(msg):
            raise smtplib.SMTPServerDisconnected("connection closed")

        monkeypatch.setattr(service, "_deliver", refuse)
        assert service.send("alice@acme.test", "subject", "body") is False

    def test_send_builds_message(self, monkeypatch):
        service = MailService(host="smtp.invalid", sender="vault@acme.test")
        delivered = []
        monkeypatch.setattr(service, "_deliver", delivered.append)

        assert service.send("alice@acme.test", "Hello", "Body text") is True

        [msg] = delivered
        assert msg["To"] == "alice@acme.test"
        assert msg["From"] == "vault@acme.test"
        assert msg["Subject"] == "Hello"
