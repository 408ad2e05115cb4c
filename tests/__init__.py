"""Test suite for faultline.

- unit/: Unit tests - each module in isolation with mocked collaborators
- api/: API tests - a FastAPI app wired with the error boundary, via TestClient
"""
