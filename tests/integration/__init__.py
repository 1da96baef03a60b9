"""
Integration tests for the Chat Relay service.

The real FastAPI app is driven over ASGI; the TMI listing is mocked.
"""
