"""
Remote AI provider adapters.

Components:
- BaseProviderAdapter: uniform capability interface over one vendor hook
- OpenAICompatibleAdapter (OpenAI, Groq), AnthropicAdapter, GeminiAdapter,
  HuggingFaceAdapter, OllamaAdapter
- PromptBuilder: Jinja2 prompt templates per operation
- registry: builds adapters from ProviderConfig
- exceptions: provider-specific exceptions
"""

from email_automation.providers.base_adapter import BaseProviderAdapter
from email_automation.providers.anthropic_adapter import AnthropicAdapter
from email_automation.providers.gemini_adapter import GeminiAdapter
from email_automation.providers.huggingface_adapter import HuggingFaceAdapter
from email_automation.providers.ollama_adapter import OllamaAdapter
from email_automation.providers.openai_compatible import OpenAICompatibleAdapter
from email_automation.providers.prompt_builder import PromptBuilder
from email_automation.providers.registry import build_adapters, create_adapter
from email_automation.providers.exceptions import (
    ProviderAuthenticationError,
    ProviderConnectionError,
    ProviderError,
    ProviderGenerationError,
    ProviderModelNotAvailableError,
    ProviderRateLimitError,
    ProviderResponseError,
    ProviderTimeoutError,
)

__all__ = [
    "BaseProviderAdapter",
    "AnthropicAdapter",
    "GeminiAdapter",
    "HuggingFaceAdapter",
    "OllamaAdapter",
    "OpenAICompatibleAdapter",
    "PromptBuilder",
    "build_adapters",
    "create_adapter",
    "ProviderAuthenticationError",
    "ProviderConnectionError",
    "ProviderError",
    "ProviderGenerationError",
    "ProviderModelNotAvailableError",
    "ProviderRateLimitError",
    "ProviderResponseError",
    "ProviderTimeoutError",
]
