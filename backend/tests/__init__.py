"""
Pytest suite for the checkout backend.

Test categories:
- Unit tests: commerce client, status poller, checkout flows with mocked collaborators
- API tests: FastAPI routes against a stubbed commerce API
"""
