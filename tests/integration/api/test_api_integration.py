"""
Integration tests for FastAPI application.

These tests use TestClient to exercise the full API (routing, dependency
injection, error handlers, middleware) without external services: provider
traffic goes through httpx.MockTransport, the mailbox and browser are fakes.
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

from email_automation.config import settings
from email_automation.models.mail_models import utcnow
from email_automation.verification.exceptions import BrowserAutomationError, MailboxError


VERIFY_HTML = '<p>Welcome!</p><a href="https://app.example.com/verify?token=abc123&amp;u=9">Verify</a>'


# ============================================================================
# Service endpoints
# ============================================================================


def test_root_endpoint(client):
    """Test root endpoint returns service info."""
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["service"] == settings.APP_NAME
    assert data["version"] == settings.APP_VERSION
    assert data["endpoints"]["ai"] == "/api/ai"


def test_live_endpoint(client):
    response = client.get("/live")
    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


def test_health_healthy(client, override_dependencies):
    override_dependencies()

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["services"] == {"groq": "ok", "local": "ok", "mailbox": "configured"}


def test_health_degraded_without_remote_providers(client, override_dependencies, make_orchestrator):
    override_dependencies(orchestrator=make_orchestrator(remote=False))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


def test_request_id_propagated(client, override_dependencies):
    override_dependencies()

    generated = client.get("/live")
    echoed = client.get("/live", headers={"X-Request-ID": "req-123"})

    assert generated.headers["X-Request-ID"]
    assert echoed.headers["X-Request-ID"] == "req-123"


# ============================================================================
# AI endpoints
# ============================================================================


def test_analyze_email_with_provider(client, override_dependencies):
    override_dependencies()

    response = client.post(
        "/api/ai/analyze-email",
        json={"emailContent": "I cannot log in to my account", "subject": "Login"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    analysis = data["analysis"]
    assert analysis["provider_used"] == "groq"
    assert analysis["category"] == "support"
    # provider said no review; high priority forces it
    assert analysis["requires_human_review"] is True
    assert data["response"] is None


def test_analyze_email_with_reply(client, override_dependencies):
    override_dependencies()

    response = client.post(
        "/api/ai/analyze-email",
        json={"emailContent": "I cannot log in", "includeResponse": True, "tone": "friendly"},
    )

    draft = response.json()["response"]
    assert draft["response"].startswith("Hi, thanks for reaching out")
    assert draft["tone"] == "friendly"
    assert draft["provider_used"] == "groq"


def test_analyze_email_falls_back_to_local_engine(client, override_dependencies, make_orchestrator):
    override_dependencies(orchestrator=make_orchestrator(status_code=503))

    response = client.post(
        "/api/ai/analyze-email",
        json={"emailContent": "URGENT: the server is down, fix ASAP!!!", "analysisType": "security"},
    )

    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert analysis["provider_used"] == "local"
    assert analysis["confidence"] == 0.85
    assert analysis["priority"] == "high"
    assert analysis["security"] is not None


def test_analyze_email_invalid_request(client, override_dependencies):
    override_dependencies()

    response = client.post("/api/ai/analyze-email", json={"analysisType": "quick"})

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "invalid_request"


def test_generate_response_local(client, override_dependencies, make_orchestrator):
    override_dependencies(orchestrator=make_orchestrator(remote=False))

    response = client.post(
        "/api/ai/generate-response",
        json={"originalEmail": "Could we schedule a meeting next week?", "tone": "formal"},
    )

    assert response.status_code == 200
    draft = response.json()["draft"]
    assert draft["provider_used"] == "local"
    assert draft["tone"] == "formal"
    assert draft["response"]


def test_categorize_inline_emails(client, override_dependencies, make_orchestrator):
    override_dependencies(orchestrator=make_orchestrator(remote=False))

    response = client.post(
        "/api/ai/categorize-emails",
        json={
            "emails": [
                {"subject": "Bug", "from": "a@example.com", "text": "There is a bug and an error"},
                {"subject": "Crash", "from": "b@example.com", "text": "Another bug, the app crashed"},
                {"subject": "Agenda", "from": "c@example.com", "text": "Meeting agenda for the calendar"},
            ]
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert [item["subject"] for item in data["results"]] == ["Bug", "Crash", "Agenda"]
    assert data["summary"] == {"total": 3, "support": 2, "meeting": 1}


def test_categorize_by_sender(client, override_dependencies, make_orchestrator, make_mailbox, create_mail_message):
    messages = [
        create_mail_message(subject="Invoice", text="Please find the invoice and pricing"),
        create_mail_message(subject="Report", text="Quarterly report and metrics"),
    ]
    deps = override_dependencies(
        orchestrator=make_orchestrator(remote=False),
        mailbox=make_mailbox([messages]),
    )

    response = client.post("/api/ai/categorize-emails", json={"senderEmail": "noreply@service.example"})

    assert response.status_code == 200
    assert response.json()["summary"]["total"] == 2
    assert deps["mailbox"].session.disconnect_calls == 1


def test_categorize_requires_source(client, override_dependencies):
    override_dependencies()

    response = client.post("/api/ai/categorize-emails", json={})

    assert response.status_code == 400


def test_extract_actions(client, override_dependencies):
    override_dependencies()

    response = client.post("/api/ai/extract-actions", json={"emailContent": "Please sign by Friday"})

    data = response.json()["data"]
    assert data["action_items"] == ["Send the signed contract"]
    assert data["has_deadlines"] is True
    assert data["urgent_items"] == ["Send the signed contract"]


def test_summarize_thread(client, override_dependencies, sample_thread):
    override_dependencies()

    response = client.post(
        "/api/ai/summarize-thread",
        json={"emails": [message.model_dump(mode="json") for message in sample_thread]},
    )

    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary["summary"] == "The launch moves to Friday."
    assert summary["thread_length"] == 3
    assert summary["provider_used"] == "groq"


def test_summarize_thread_all_providers_failed(client, override_dependencies, make_orchestrator, sample_thread):
    override_dependencies(orchestrator=make_orchestrator(status_code=503))

    response = client.post(
        "/api/ai/summarize-thread",
        json={"emails": [message.model_dump(mode="json") for message in sample_thread]},
    )

    assert response.status_code == 503
    data = response.json()
    assert data["error"] == "all_providers_failed"
    assert data["details"]["failures"][0]["provider"] == "groq"


def test_summarize_thread_mailbox_unavailable(client, override_dependencies, make_mailbox):
    override_dependencies(mailbox=make_mailbox(connect_error=MailboxError("login rejected")))

    response = client.post("/api/ai/summarize-thread", json={"senderEmail": "alice@example.com"})

    assert response.status_code == 503
    assert response.json()["error"] == "mailbox_unavailable"


def test_smart_process(client, override_dependencies):
    override_dependencies()

    response = client.post(
        "/api/ai/smart-process",
        json={"emailContent": "I cannot log in", "generateResponse": True},
    )

    data = response.json()
    assert data["analysis"]["provider_used"] == "groq"
    assert data["response"]["provider_used"] == "groq"


def test_ai_status(client, override_dependencies):
    override_dependencies()

    response = client.get("/api/ai/status")

    assert response.status_code == 200
    data = response.json()
    assert data["providers"] == ["groq", "local"]
    assert data["remote_providers"] == 1


def test_unexpected_error_returns_500(client, override_dependencies):
    orchestrator = MagicMock()
    orchestrator.analyze = AsyncMock(side_effect=RuntimeError("boom"))
    override_dependencies(orchestrator=orchestrator)

    response = client.post("/api/ai/analyze-email", json={"emailContent": "Hello"})

    assert response.status_code == 500
    assert response.json()["error"] == "internal_error"


# ============================================================================
# Email endpoints
# ============================================================================


def test_latest_emails(client, override_dependencies, make_mailbox, create_mail_message):
    messages = [create_mail_message(subject="Newest"), create_mail_message(subject="Older")]
    override_dependencies(mailbox=make_mailbox([messages]))

    response = client.get("/api/emails/latest/noreply@service.example", params={"limit": 1})

    assert response.status_code == 200
    assert [email["subject"] for email in response.json()["emails"]] == ["Newest"]


def test_latest_emails_invalid_limit(client, override_dependencies):
    override_dependencies()

    response = client.get("/api/emails/latest/noreply@service.example", params={"limit": 0})

    assert response.status_code == 400


def test_latest_emails_mailbox_unavailable(client, override_dependencies, make_mailbox):
    override_dependencies(mailbox=make_mailbox(connect_error=MailboxError("connection refused")))

    response = client.get("/api/emails/latest/noreply@service.example")

    assert response.status_code == 503
    assert response.json()["message"] == "connection refused"


def test_search_emails(client, override_dependencies, make_mailbox, create_mail_message):
    messages = [create_mail_message(subject="Invoice 42"), create_mail_message(subject="Invoice 41")]
    mailbox = make_mailbox([messages])
    override_dependencies(mailbox=mailbox)

    response = client.post(
        "/api/emails/search",
        json={"criteria": {"subject": "Invoice", "since": "2026-03-01"}, "options": {"limit": 1}},
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert [email["subject"] for email in response.json()["emails"]] == ["Invoice 42"]
    assert mailbox.session.criteria[0].to_imap() == ["SUBJECT", "Invoice", "SINCE", date(2026, 3, 1)]
    assert mailbox.session.disconnect_calls == 1


def test_search_emails_requires_criteria(client, override_dependencies, make_mailbox):
    mailbox = make_mailbox()
    override_dependencies(mailbox=mailbox)

    response = client.post("/api/emails/search", json={"criteria": {}})

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_request"
    assert mailbox.connect_calls == 0


def test_search_emails_mailbox_unavailable(client, override_dependencies, make_mailbox):
    override_dependencies(mailbox=make_mailbox(connect_error=MailboxError("connection refused")))

    response = client.post("/api/emails/search", json={"criteria": {"text": "receipt"}})

    assert response.status_code == 503
    assert response.json()["error"] == "mailbox_unavailable"


def test_extract_links(client, override_dependencies):
    override_dependencies()

    response = client.post("/api/emails/extract-links", json={"html": VERIFY_HTML})

    assert response.status_code == 200
    assert response.json()["links"] == ["https://app.example.com/verify?token=abc123&u=9"]


def test_extract_code(client, override_dependencies):
    override_dependencies()

    response = client.post("/api/emails/extract-code", json={"emailContent": "Your code is 552211"})

    assert response.json()["code"] == "552211"


def test_extract_requires_content(client, override_dependencies):
    override_dependencies()

    response = client.post("/api/emails/extract-links", json={})

    assert response.status_code == 400


# ============================================================================
# Automation endpoints
# ============================================================================


def test_verify_email_success(client, override_dependencies, make_mailbox, create_mail_message):
    message = create_mail_message(html=VERIFY_HTML, text="Your code is 771199", date=utcnow())
    deps = override_dependencies(mailbox=make_mailbox([[message]]))

    response = client.post("/api/automation/verify-email", json={"senderEmail": "noreply@service.example"})

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["link"] == "https://app.example.com/verify?token=abc123&u=9"
    assert result["code"] == "771199"
    assert result["completion_text"] == "Email verified successfully"
    assert deps["browser_launcher"].session.close_calls == 1
    assert deps["mailbox"].session.disconnect_calls == 1


def test_verify_email_no_link(client, override_dependencies, make_mailbox, create_mail_message):
    message = create_mail_message(text="Your code is 771199", date=utcnow())
    deps = override_dependencies(mailbox=make_mailbox([[message]]))

    response = client.post("/api/automation/verify-email", json={"senderEmail": "noreply@service.example"})

    assert response.status_code == 422
    assert response.json()["error"] == "no_verification_link"
    assert deps["browser_launcher"].launch_calls == 0


def test_verify_email_automation_failed(
    client, override_dependencies, make_mailbox, make_browser_launcher, create_mail_message
):
    message = create_mail_message(html=VERIFY_HTML, date=utcnow())
    launcher = make_browser_launcher(wait_error=BrowserAutomationError("selector not found"))
    override_dependencies(mailbox=make_mailbox([[message]]), browser_launcher=launcher)

    response = client.post("/api/automation/verify-email", json={"senderEmail": "noreply@service.example"})

    assert response.status_code == 502
    assert response.json()["error"] == "automation_failed"
    assert launcher.session.close_calls == 1


def test_verify_email_mailbox_unavailable(client, override_dependencies, make_mailbox):
    override_dependencies(mailbox=make_mailbox(connect_error=MailboxError("login rejected")))

    response = client.post("/api/automation/verify-email", json={"senderEmail": "noreply@service.example"})

    assert response.status_code == 503
    assert response.json()["error"] == "mailbox_unavailable"


def test_verify_email_timed_out(client, override_dependencies, make_mailbox):
    override_dependencies(mailbox=make_mailbox([[]]))

    response = client.post(
        "/api/automation/verify-email",
        json={"senderEmail": "noreply@service.example", "maxWaitTime": 1},
    )

    assert response.status_code == 504
    assert response.json()["error"] == "verification_timed_out"


def test_verify_email_invalid_request(client, override_dependencies):
    override_dependencies()

    response = client.post("/api/automation/verify-email", json={"maxWaitTime": 1000})

    assert response.status_code == 400


# ============================================================================
# API key
# ============================================================================


def test_api_key_required(client, override_dependencies, api_headers):
    override_dependencies()

    missing = client.post("/api/emails/extract-code", json={"emailContent": "code: 1234"})
    valid = client.post("/api/emails/extract-code", json={"emailContent": "code: 1234"}, headers=api_headers)
    query = client.post(
        "/api/emails/extract-code",
        json={"emailContent": "code: 1234"},
        params={"api_key": "integration-key"},
    )

    assert missing.status_code == 401
    assert valid.status_code == 200
    assert query.status_code == 200


def test_health_needs_no_api_key(client, override_dependencies, api_headers):
    override_dependencies()

    assert client.get("/health").status_code == 200
