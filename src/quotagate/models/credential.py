"""
Credential data models.

- Credential: an issued Unkey key, held only inside the session cookie
- VerificationResult: fresh answer from Unkey for one protected request
- RefillPolicy: how issued keys get their quota back
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Credential(BaseModel):
    """
    Rate-limited right to call the image generation endpoint.

    Serialized with the wire names `key` / `key_id`, which is also the
    shape returned by GET /me.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    secret: str = Field(
        alias="key",
        min_length=1,
        description="Bearer key presented to Unkey for verification",
    )
    identifier: str = Field(
        alias="key_id",
        min_length=1,
        description="Unkey key id, used for lookup and audit",
    )


class VerificationResult(BaseModel):
    """Result of verifying a key against Unkey."""

    valid: bool = Field(description="Whether the key currently authorizes use")
    remaining: Optional[int] = Field(
        default=None,
        description="Remaining uses; None when the key has no usage limit",
    )
    code: Optional[str] = Field(
        default=None,
        description="Unkey verification code, e.g. VALID or USAGE_EXCEEDED",
    )


class RefillPolicy(BaseModel):
    """Quota refill applied to issued keys."""

    amount: int = Field(ge=1, description="Uses restored on every refill")
    interval: Literal["daily", "monthly"] = Field(description="Refill interval")
