"""
QuotaGate - Quota-gated image generation gateway

A FastAPI service that issues Unkey API keys into an encrypted session
cookie and only forwards prompts to OpenAI image generation while the
key is valid and has quota left.
"""

__version__ = "0.1.0"

from .main import app

__all__ = ["app"]
