"""API tests package.

End-to-end tests for the error boundary using TestClient:
- Exception handler registration
- Request ID propagation
- Response envelope, status codes and headers
"""
