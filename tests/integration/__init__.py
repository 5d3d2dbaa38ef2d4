"""
Integration tests for the Email Automation Service.

Exercise the FastAPI application end to end with TestClient: real adapters
over a mock transport, fake mailbox and browser collaborators.
"""
