"""
Configuration settings for the Email Automation Service.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

import json
from typing import Annotated, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Email Automation Service"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # === Provider Cascade ===
    # Tried strictly in this order; providers without credentials are skipped.
    # The local inference engine is always the implicit last step.
    PROVIDER_ORDER: Annotated[list[str], NoDecode] = ["groq", "openai", "anthropic", "gemini", "huggingface", "ollama"]
    PROVIDER_TIMEOUT_SECONDS: float = 30.0
    PROVIDER_TIMEOUTS: dict[str, float] = {}  # per-provider override, e.g. {"ollama": 60}
    PROVIDER_MAX_RETRIES: int = 1  # connection-level attempts per provider call

    # === Groq ===
    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL: str = "llama3-70b-8192"
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"

    # === OpenAI ===
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"

    # === Anthropic ===
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_MODEL: str = "claude-3-5-haiku-20241022"
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"

    # === Gemini ===
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"

    # === Hugging Face ===
    HUGGINGFACE_API_TOKEN: Optional[str] = None
    HUGGINGFACE_MODEL: str = "mistralai/Mistral-7B-Instruct-v0.2"
    HUGGINGFACE_BASE_URL: str = "https://api-inference.huggingface.co"

    # === Ollama (self-hosted, no key) ===
    OLLAMA_ENABLED: bool = False
    OLLAMA_BASE_URL: str = "http://ollama:11434"
    OLLAMA_MODEL: str = "qwen2.5:7b"

    # === Input Processing ===
    BODY_TRUNCATION_LIMIT: int = 8000  # chars
    PROMPT_TEMPLATES_DIR: Optional[str] = None  # defaults to the bundled prompts/

    # === Mailbox (IMAP) ===
    EMAIL_HOST: str = "mail.hostinger.com"
    EMAIL_PORT: int = 993
    EMAIL_USE_SSL: bool = True
    EMAIL_USER: Optional[str] = None
    EMAIL_PASSWORD: Optional[str] = None
    EMAIL_FOLDER: str = "INBOX"
    EMAIL_TIMEOUT_SECONDS: float = 30.0

    # === Verification Workflow ===
    VERIFICATION_POLL_INTERVAL_SECONDS: float = 5.0
    VERIFICATION_FRESHNESS_WINDOW_SECONDS: float = 300.0  # 5 minutes
    VERIFICATION_DEFAULT_TIMEOUT_SECONDS: float = 60.0
    VERIFICATION_MAX_TIMEOUT_SECONDS: float = 600.0
    VERIFICATION_COMPLETION_TIMEOUT_SECONDS: float = 10.0

    # === Headless Browser ===
    BROWSER_HEADLESS: bool = True
    BROWSER_EXECUTABLE_PATH: Optional[str] = None
    BROWSER_NAVIGATION_TIMEOUT_SECONDS: float = 30.0
    BROWSER_SUCCESS_SELECTOR: str = ".verification-success"

    # === API ===
    API_KEYS: Annotated[list[str], NoDecode] = []  # API_KEYS=key1,key2; empty disables checks
    CORS_ALLOWED_ORIGINS: Annotated[list[str], NoDecode] = ["*"]

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    @field_validator("PROVIDER_ORDER", "API_KEYS", "CORS_ALLOWED_ORIGINS", mode="before")
    @classmethod
    def split_comma_list(cls, value):
        """Accept a comma-separated string or a JSON array as well as a list."""
        if not isinstance(value, str):
            return value
        if value.strip().startswith("["):
            return json.loads(value)
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def mailbox_configured(self) -> bool:
        """True when IMAP credentials are present."""
        return bool(self.EMAIL_USER and self.EMAIL_PASSWORD)


# Global settings instance
settings = Settings()
