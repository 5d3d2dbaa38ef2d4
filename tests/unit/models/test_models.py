"""Unit tests for domain models and provider configuration."""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from email_automation.models.analysis_models import AnalysisRequest, AnalysisResult
from email_automation.models.enums import Category, ParseStatus, Priority, Sentiment
from email_automation.models.mail_models import (
    ExtractedArtifact,
    MailMessage,
    SearchCriteria,
    VerificationTask,
)
from email_automation.models.provider_models import ProviderConfig
from email_automation.parsing import ParseOutcome


class TestAnalysisResult:
    """Field constraints and the review invariant."""

    def test_urgency_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            AnalysisResult(urgency_score=11, confidence=0.5, provider_used="groq")

    def test_too_many_topics_rejected(self):
        with pytest.raises(ValidationError):
            AnalysisResult(key_topics=["a", "b", "c", "d", "e", "f"], confidence=0.5, provider_used="groq")

    def test_language_must_be_two_letters(self):
        with pytest.raises(ValidationError):
            AnalysisResult(detected_language="eng", confidence=0.5, provider_used="groq")

    @pytest.mark.parametrize(
        "priority,category,sentiment,expected",
        [
            (Priority.HIGH, Category.GENERAL, Sentiment.NEUTRAL, True),
            (Priority.LOW, Category.URGENT, Sentiment.POSITIVE, True),
            (Priority.MEDIUM, Category.SALES, Sentiment.NEGATIVE, True),
            (Priority.MEDIUM, Category.SALES, Sentiment.NEUTRAL, False),
        ],
    )
    def test_with_review_invariant(self, priority, category, sentiment, expected):
        """The flag is re-derived regardless of what the producer reported."""
        result = AnalysisResult(
            priority=priority,
            category=category,
            sentiment=sentiment,
            requires_human_review=not expected,
            confidence=0.9,
            provider_used="openai",
        )
        fixed = result.with_review_invariant()

        assert fixed.requires_human_review is expected
        assert result.requires_human_review is (not expected)  # original untouched

    def test_consistent_result_returned_as_is(self):
        result = AnalysisResult(requires_human_review=False, confidence=0.9, provider_used="openai")
        assert result.with_review_invariant() is result


class TestAnalysisRequest:
    def test_content_joins_subject_and_body(self):
        request = AnalysisRequest(text="Body text", subject="Subject line")
        assert request.content == "Subject line\nBody text"

    def test_content_without_subject(self):
        assert AnalysisRequest(text="Body").content == "Body"

    def test_is_immutable(self):
        request = AnalysisRequest(text="Body")
        with pytest.raises(ValidationError):
            request.text = "changed"


class TestMailModels:
    def test_naive_message_date_treated_as_utc(self):
        message = MailMessage(date=datetime(2026, 1, 1, 12, 0))
        assert message.date.tzinfo == timezone.utc

    def test_task_within(self, now):
        task = VerificationTask.within("noreply@service.example", 60, now=now)
        assert task.deadline == now + timedelta(seconds=60)
        assert task.freshness_window == timedelta(minutes=5)

    def test_task_requires_sender(self, now):
        with pytest.raises(ValidationError):
            VerificationTask(sender="", deadline=now)

    def test_artifact_link_is_first(self):
        artifact = ExtractedArtifact(links=["https://a.test/verify", "https://b.test/confirm"])
        assert artifact.link == "https://a.test/verify"
        assert ExtractedArtifact().link is None

    def test_search_criteria_to_imap(self):
        criteria = SearchCriteria(sender="billing@shop.example", text="invoice", before=date(2026, 3, 1))
        assert criteria.to_imap() == ["FROM", "billing@shop.example", "TEXT", "invoice", "BEFORE", date(2026, 3, 1)]

    @pytest.mark.parametrize(
        "filters",
        [{}, {"subject": ""}, {"since": date(2026, 3, 2), "before": date(2026, 3, 2)}],
    )
    def test_search_criteria_invalid(self, filters):
        with pytest.raises(ValidationError):
            SearchCriteria(**filters)


class TestProviderConfig:
    """ProviderConfig.from_settings ordering and enablement."""

    def test_no_keys_means_nothing_enabled(self, test_settings):
        config = ProviderConfig.from_settings(test_settings)

        assert config.names == ["groq", "openai", "anthropic", "gemini", "huggingface", "ollama"]
        assert config.enabled_entries() == ()

    def test_enabled_by_key_in_configured_order(self, test_settings):
        test_settings.GEMINI_API_KEY = "gem-key"
        test_settings.GROQ_API_KEY = "gsk-key"

        config = ProviderConfig.from_settings(test_settings)
        enabled = config.enabled_entries()

        assert [entry.name for entry in enabled] == ["groq", "gemini"]
        assert enabled[0].kind == "openai_compatible"
        assert enabled[0].api_key == "gsk-key"

    def test_custom_order_and_unknown_names(self, test_settings):
        test_settings.PROVIDER_ORDER = ["anthropic", "mystery", "openai", "anthropic"]
        test_settings.OPENAI_API_KEY = "sk-key"
        test_settings.ANTHROPIC_API_KEY = "ant-key"

        config = ProviderConfig.from_settings(test_settings)

        assert config.names == ["anthropic", "openai"]

    def test_ollama_enabled_by_flag(self, test_settings):
        test_settings.OLLAMA_ENABLED = True
        config = ProviderConfig.from_settings(test_settings)
        assert [entry.name for entry in config.enabled_entries()] == ["ollama"]

    def test_per_provider_timeout_override(self, test_settings):
        test_settings.OLLAMA_ENABLED = True
        test_settings.PROVIDER_TIMEOUTS = {"ollama": 60.0}
        config = ProviderConfig.from_settings(test_settings)

        timeouts = {entry.name: entry.timeout_seconds for entry in config.entries}
        assert timeouts["ollama"] == 60.0
        assert timeouts["groq"] == test_settings.PROVIDER_TIMEOUT_SECONDS

    def test_api_key_hidden_from_repr(self, test_settings):
        test_settings.OPENAI_API_KEY = "sk-very-secret"
        config = ProviderConfig.from_settings(test_settings)
        assert "sk-very-secret" not in repr(config)


class TestSettings:
    def test_api_keys_from_comma_separated_string(self, test_settings):
        settings = type(test_settings)(API_KEYS="one, two,,three")
        assert settings.API_KEYS == ["one", "two", "three"]

    def test_mailbox_configured(self, test_settings):
        assert test_settings.mailbox_configured is True
        test_settings.EMAIL_PASSWORD = None
        assert test_settings.mailbox_configured is False


def test_parse_status_shared_with_parser():
    outcome = ParseOutcome(status=ParseStatus.PARTIALLY_RECOVERED, payload={"priority": "high"})
    assert outcome.usable is True
    assert ParseStatus("unparseable") is ParseStatus.UNPARSEABLE
