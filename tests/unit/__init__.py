"""
Unit tests for the AI request proxy.

Test individual components in isolation:
- Data models (catalog, usage records, generation results)
- Provider adapters (httpx.MockTransport backends)
- Dispatcher and credential stores
- Retry controller and fallback orchestrator
- Sensitive data detector
- Usage repository (mocked Redis)
- API models, dependencies, exception handlers
"""
