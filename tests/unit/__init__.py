"""
Unit tests for the Email Automation Service.

Test individual components in isolation:
- Local inference engine (scoring, extraction, templates)
- Provider adapters over httpx.MockTransport
- Response parsing stages
- Orchestrator cascade with mock adapters
- Verification workflow with fake mailbox, browser and clock
- API models and dependencies
"""
