"""
Pydantic data models package.

Contains all data validation models for:
- API requests and responses
- Credentials and verification results
"""

from .api import ErrorResponse, GenerateImageRequest, GenerateImageResponse
from .credential import Credential, RefillPolicy, VerificationResult

__all__ = [
    # API models
    "GenerateImageRequest",
    "GenerateImageResponse",
    "ErrorResponse",

    # Credential models
    "Credential",
    "RefillPolicy",
    "VerificationResult",
]
