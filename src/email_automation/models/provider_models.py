"""
Provider configuration and the request/response models exchanged with adapters.

ProviderConfig is evaluated once at startup and never mutated afterwards; the
orchestrator and every adapter only ever read it.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


# Adapter kind per provider name. groq speaks the OpenAI chat-completions dialect.
PROVIDER_KINDS: Dict[str, str] = {
    "groq": "openai_compatible",
    "openai": "openai_compatible",
    "anthropic": "anthropic",
    "gemini": "gemini",
    "huggingface": "huggingface",
    "ollama": "ollama",
}


class ProviderEntry(BaseModel):
    """One configured remote provider."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Provider identifier, reported as provider_used")
    kind: str = Field(..., description="Adapter implementation to use")
    model: str = Field(...)
    base_url: str = Field(...)
    api_key: Optional[str] = Field(default=None, repr=False)
    timeout_seconds: float = Field(default=30.0, gt=0)
    enabled: bool = Field(default=True)


class ProviderConfig(BaseModel):
    """
    Ordered, immutable list of provider entries.

    The local inference engine is never listed here: it is implicitly the final,
    always-available step of every cascade.
    """
    model_config = ConfigDict(frozen=True)

    entries: tuple[ProviderEntry, ...] = Field(default_factory=tuple)

    def enabled_entries(self) -> tuple[ProviderEntry, ...]:
        """Enabled entries in configured priority order."""
        return tuple(entry for entry in self.entries if entry.enabled)

    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    @classmethod
    def from_settings(cls, settings) -> "ProviderConfig":
        """
        Build the provider list from application settings.

        Providers are listed in PROVIDER_ORDER. Remote vendors are enabled only
        when their API key is set; Ollama is enabled by OLLAMA_ENABLED.
        Unknown names in PROVIDER_ORDER are ignored.

        Args:
            settings: Settings instance

        Returns:
            ProviderConfig
        """
        credentials = {
            "groq": (settings.GROQ_API_KEY, settings.GROQ_MODEL, settings.GROQ_BASE_URL),
            "openai": (settings.OPENAI_API_KEY, settings.OPENAI_MODEL, settings.OPENAI_BASE_URL),
            "anthropic": (settings.ANTHROPIC_API_KEY, settings.ANTHROPIC_MODEL, settings.ANTHROPIC_BASE_URL),
            "gemini": (settings.GEMINI_API_KEY, settings.GEMINI_MODEL, settings.GEMINI_BASE_URL),
            "huggingface": (
                settings.HUGGINGFACE_API_TOKEN,
                settings.HUGGINGFACE_MODEL,
                settings.HUGGINGFACE_BASE_URL,
            ),
            "ollama": (None, settings.OLLAMA_MODEL, settings.OLLAMA_BASE_URL),
        }

        entries = []
        seen = set()
        for raw_name in settings.PROVIDER_ORDER:
            name = raw_name.strip().lower()
            if name not in PROVIDER_KINDS or name in seen:
                continue
            seen.add(name)

            api_key, model, base_url = credentials[name]
            enabled = settings.OLLAMA_ENABLED if name == "ollama" else bool(api_key)
            entries.append(
                ProviderEntry(
                    name=name,
                    kind=PROVIDER_KINDS[name],
                    model=model,
                    base_url=base_url,
                    api_key=api_key,
                    timeout_seconds=settings.PROVIDER_TIMEOUTS.get(name, settings.PROVIDER_TIMEOUT_SECONDS),
                    enabled=enabled,
                )
            )
        return cls(entries=tuple(entries))


class CompletionRequest(BaseModel):
    """
    Vendor-neutral completion request.

    Built by the base adapter from a rendered prompt; each vendor adapter only
    translates it into its own HTTP payload.
    """
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(...)
    system_prompt: Optional[str] = Field(default=None)
    max_tokens: int = Field(default=1000, ge=1, le=8192)
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    json_mode: bool = Field(default=True, description="Ask the vendor for a JSON object")
    format_schema: Optional[Dict[str, Any]] = Field(default=None)


class CompletionResponse(BaseModel):
    """Generated text plus metadata for logging."""
    model_config = ConfigDict(frozen=True)

    content: str = Field(...)
    model: str = Field(...)
    latency_ms: int = Field(..., ge=0)
    prompt_tokens: Optional[int] = Field(default=None)
    completion_tokens: Optional[int] = Field(default=None)
