"""
Browserless Client Tests

Run all tests:
    pytest tests/ -v

Run specific test file:
    pytest tests/test_client.py -v

No Browserless instance is needed; HTTP traffic goes through httpx.MockTransport
and the WebSocket probe is patched.
"""
