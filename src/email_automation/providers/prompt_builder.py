"""
Prompt builder for provider requests.

Responsible for:
- Loading and rendering Jinja2 templates (one per operation / analysis depth)
- Truncating message bodies at a sentence boundary
- Choosing generation parameters per operation
- Constructing vendor-neutral CompletionRequest objects
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import structlog
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from email_automation.models.analysis_models import AnalysisRequest, ThreadMessage
from email_automation.models.enums import AnalysisDepth, Category, Tone
from email_automation.models.provider_models import CompletionRequest
from email_automation.providers.text_utils import (
    format_thread,
    truncate_at_sentence_boundary,
)


logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "prompts"


@dataclass(frozen=True)
class GenerationProfile:
    """Generation parameters for one kind of call."""
    max_tokens: int
    temperature: float
    json_mode: bool


PROFILES = {
    "analysis_quick": GenerationProfile(max_tokens=500, temperature=0.1, json_mode=True),
    "analysis": GenerationProfile(max_tokens=1500, temperature=0.1, json_mode=True),
    "response": GenerationProfile(max_tokens=1000, temperature=0.3, json_mode=False),
    "action_items": GenerationProfile(max_tokens=800, temperature=0.1, json_mode=True),
    "thread_summary": GenerationProfile(max_tokens=1200, temperature=0.2, json_mode=True),
}

ANALYSIS_TEMPLATES = {
    AnalysisDepth.QUICK: "analysis_quick.j2",
    AnalysisDepth.COMPREHENSIVE: "analysis_comprehensive.j2",
    AnalysisDepth.SECURITY: "analysis_security.j2",
}


class PromptBuilder:
    """
    Build CompletionRequests for every provider operation.

    Templates are loaded once; rendering is pure and safe to share between
    concurrent requests.
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        body_truncation_limit: int = 8000,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing *.j2 templates (default: bundled prompts/)
            body_truncation_limit: Max body characters sent to a provider
        """
        self.templates_dir = Path(templates_dir) if templates_dir else DEFAULT_TEMPLATES_DIR
        self.body_truncation_limit = body_truncation_limit

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            autoescape=False  # prompts, not HTML
        )

        try:
            self.system_prompt = self.jinja_env.get_template("system.j2").render().strip()
            self.templates = {
                name: self.jinja_env.get_template(name)
                for name in (
                    *ANALYSIS_TEMPLATES.values(),
                    "response.j2",
                    "action_items.j2",
                    "thread_summary.j2",
                )
            }
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e), templates_dir=str(self.templates_dir))
            raise

        logger.info(
            "PromptBuilder initialized",
            templates_dir=str(self.templates_dir),
            body_truncation_limit=body_truncation_limit,
        )

    def _truncate(self, text: str) -> str:
        return truncate_at_sentence_boundary(text or "", self.body_truncation_limit)

    def _request(self, template: str, profile: str, **variables) -> CompletionRequest:
        rendered = self.templates[template].render(**variables).strip()
        params = PROFILES[profile]
        logger.debug("Prompt built", template=template, prompt_length=len(rendered))
        return CompletionRequest(
            prompt=rendered,
            system_prompt=self.system_prompt,
            max_tokens=params.max_tokens,
            temperature=params.temperature,
            json_mode=params.json_mode,
        )

    def build_analysis_request(self, request: AnalysisRequest) -> CompletionRequest:
        """
        Analysis prompt for the request's depth (quick / comprehensive / security).
        """
        profile = "analysis_quick" if request.depth == AnalysisDepth.QUICK else "analysis"
        return self._request(
            ANALYSIS_TEMPLATES[request.depth],
            profile,
            categories=[category.value for category in Category],
            sender=request.sender,
            subject=request.subject,
            body=self._truncate(request.text),
        )

    def build_response_request(self, original_text: str, context: str = "", tone: str = Tone.PROFESSIONAL.value) -> CompletionRequest:
        """Plain-text reply prompt."""
        tone_value = tone.value if isinstance(tone, Tone) else str(tone)
        return self._request(
            "response.j2",
            "response",
            body=self._truncate(original_text),
            context=(context or "").strip(),
            tone=tone_value,
        )

    def build_action_items_request(self, text: str) -> CompletionRequest:
        return self._request("action_items.j2", "action_items", body=self._truncate(text))

    def build_thread_summary_request(self, messages: Sequence[ThreadMessage]) -> CompletionRequest:
        """Thread prompt; the whole thread shares the body truncation budget."""
        return self._request(
            "thread_summary.j2",
            "thread_summary",
            thread=format_thread(messages, self.body_truncation_limit),
            thread_length=len(messages),
        )
