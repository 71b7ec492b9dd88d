"""
Integration tests for the AI request proxy.

Exercise the full request path through the FastAPI app:
- Routing, validation and exception handlers (TestClient)
- Dispatcher, retry and fallback with real adapters on mocked transports
- Usage recording with mocked Redis
"""
