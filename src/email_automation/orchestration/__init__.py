"""
Cascading provider orchestration with a guaranteed local fallback.
"""

from email_automation.orchestration.exceptions import AllProvidersFailed, ProviderFailure
from email_automation.orchestration.orchestrator import CascadingOrchestrator

__all__ = [
    "AllProvidersFailed",
    "CascadingOrchestrator",
    "ProviderFailure",
]
