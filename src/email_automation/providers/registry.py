"""
Adapter registry: turns the immutable ProviderConfig into adapter instances.
"""

from typing import Optional

import httpx
import structlog

from email_automation.models.provider_models import ProviderConfig, ProviderEntry
from email_automation.providers.anthropic_adapter import AnthropicAdapter
from email_automation.providers.base_adapter import BaseProviderAdapter
from email_automation.providers.gemini_adapter import GeminiAdapter
from email_automation.providers.huggingface_adapter import HuggingFaceAdapter
from email_automation.providers.ollama_adapter import OllamaAdapter
from email_automation.providers.openai_compatible import OpenAICompatibleAdapter
from email_automation.providers.prompt_builder import PromptBuilder


logger = structlog.get_logger(__name__)

ADAPTER_CLASSES: dict[str, type[BaseProviderAdapter]] = {
    "openai_compatible": OpenAICompatibleAdapter,
    "anthropic": AnthropicAdapter,
    "gemini": GeminiAdapter,
    "huggingface": HuggingFaceAdapter,
    "ollama": OllamaAdapter,
}


def create_adapter(
    entry: ProviderEntry,
    prompt_builder: PromptBuilder,
    max_retries: int = 1,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BaseProviderAdapter:
    """
    Instantiate the adapter for one entry.

    Raises:
        ValueError: Unknown adapter kind
    """
    try:
        adapter_cls = ADAPTER_CLASSES[entry.kind]
    except KeyError:
        raise ValueError(f"Unknown provider kind: {entry.kind}") from None
    return adapter_cls(entry, prompt_builder, max_retries=max_retries, transport=transport)


def build_adapters(
    config: ProviderConfig,
    prompt_builder: PromptBuilder,
    max_retries: int = 1,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[BaseProviderAdapter]:
    """
    One adapter per enabled entry, in configured priority order.
    """
    adapters = [
        create_adapter(entry, prompt_builder, max_retries=max_retries, transport=transport)
        for entry in config.enabled_entries()
    ]
    logger.info(
        "Provider adapters built",
        configured=config.names,
        enabled=[adapter.name for adapter in adapters],
    )
    return adapters
