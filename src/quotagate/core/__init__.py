"""
Core business logic components.

This package contains the gateway and its collaborators:
- Session store (encrypted session cookie)
- Unkey credential service client
- OpenAI image service client
- Metrics collection
"""
