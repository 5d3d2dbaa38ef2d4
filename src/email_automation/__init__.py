"""
Email Automation Service.

Combines two independent capabilities behind one FastAPI application:
- AI-assisted message analysis (categorization, sentiment, priority, response
  drafting, action items, thread summaries) through a cascade of remote
  providers that always ends in a deterministic local inference engine
- Mailbox verification workflows: poll for a fresh message from a sender,
  extract its verification link/code and complete it in a headless browser

Architecture: FastAPI + httpx provider adapters + rule-based local engine +
IMAP/Playwright collaborators
"""

__version__ = "0.1.0"
