import threading

from tests.fakes import FakeSender


def test_share_sends_one_email_per_recipient(client, sender):
    r = client.post(
        "/api/share",
        json={"summary": "Budget approved.", "recipients": ["a@x.com", "b@x.com"]},
    )

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert "2 recipient(s)" in body["message"]
    assert body["recipients"] == ["a@x.com", "b@x.com"]
    assert sorted(e.to for e in sender.sent) == ["a@x.com", "b@x.com"]


def test_share_message_body_and_default_subject(client, sender):
    client.post("/api/share", json={"summary": "Line one\n  <b>two</b>", "recipients": ["a@x.com"]})

    email = sender.sent[0]
    assert email.sender == "notes@example.com"
    assert email.subject == "Meeting Summary"
    assert email.text == "Line one\n  <b>two</b>"
    assert "<h2>Meeting Summary</h2>" in email.html
    assert "<strong>Subject:</strong> Meeting Summary" in email.html
    assert 'style="white-space: pre-wrap;"' in email.html
    assert "Line one\n  &lt;b&gt;two&lt;/b&gt;" in email.html


def test_share_custom_subject_and_ignored_note(client, sender):
    r = client.post(
        "/api/share",
        json={
            "summary": "s",
            "recipients": ["a@x.com"],
            "subject": "Q1 sync",
            "message": "FYI",
        },
    )

    assert r.status_code == 200
    assert sender.sent[0].subject == "Q1 sync"
    assert "FYI" not in sender.sent[0].html


def test_share_requires_summary_and_recipients(client, sender):
    for body in (
        {"summary": "s", "recipients": []},
        {"summary": "s"},
        {"summary": "", "recipients": ["a@x.com"]},
        {"recipients": ["a@x.com"]},
    ):
        r = client.post("/api/share", json=body)
        assert r.status_code == 400
        assert r.json() == {"error": "Summary and recipients are required"}

    assert sender.sent == []


def test_share_without_mail_credentials(client):
    r = client.post("/api/share", json={"summary": "s", "recipients": ["a@x.com"]})

    assert r.status_code == 500
    assert r.json() == {"error": "Email configuration not set up properly"}


def test_any_failed_send_fails_the_whole_request(client, monkeypatch, mail_env):
    fake = FakeSender(fail_for={"bad@x.com"})
    monkeypatch.setattr("app.services.share.get_sender", lambda: fake)

    r = client.post(
        "/api/share",
        json={"summary": "s", "recipients": ["a@x.com", "bad@x.com", "c@x.com"]},
    )

    assert r.status_code == 500
    assert r.json() == {
        "error": "Failed to share summary via email",
        "details": "mailbox unavailable: bad@x.com",
    }
    # the other sends still ran to completion
    assert sorted(e.to for e in fake.sent) == ["a@x.com", "c@x.com"]


def test_sends_are_dispatched_concurrently(client, monkeypatch, mail_env):
    recipients = ["a@x.com", "b@x.com", "c@x.com"]
    barrier = threading.Barrier(len(recipients), timeout=5)

    class BarrierSender(FakeSender):
        def send(self, email):
            # only passes if every send is in flight at the same time
            barrier.wait()
            super().send(email)

    fake = BarrierSender()
    monkeypatch.setattr("app.services.share.get_sender", lambda: fake)

    r = client.post("/api/share", json={"summary": "s", "recipients": recipients})

    assert r.status_code == 200
    assert len(fake.sent) == 3


def test_recipients_must_be_a_list(client, sender):
    r = client.post("/api/share", json={"summary": "s", "recipients": "a@x.com"})

    assert r.status_code == 400
    assert r.json() == {"error": "Invalid request body"}


def test_whitespace_summary_is_still_sent(client, sender):
    r = client.post("/api/share", json={"summary": "   ", "recipients": ["a@x.com"]})

    assert r.status_code == 200
    assert sender.sent[0].text == "   "
