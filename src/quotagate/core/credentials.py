"""
Unkey client for issuing and verifying API keys.

Features:
- Creates quota-limited keys with a refill policy
- Verifies keys and reports the remaining quota
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from ..config import UnkeySettings
from ..models.credential import Credential, RefillPolicy, VerificationResult
from .exceptions import UpstreamEmptyResult
from .metrics import MetricsCollector
from .upstream import post_json

logger = structlog.get_logger(__name__)

SERVICE = "unkey"


def mask_secret(secret: str) -> str:
    """Shorten a secret for logging."""
    return secret[:8] + "..." if len(secret) >= 8 else "***"


class UnkeyCredentialService:
    """
    Credential service backed by the Unkey API.

    Both operations raise TransportFailure or UpstreamEmptyResult on failure;
    deciding what a failure means for the caller is left to the gateway.
    """

    def __init__(self, settings: UnkeySettings, metrics: Optional[MetricsCollector] = None) -> None:
        self.settings = settings
        self.metrics = metrics

    async def issue(
        self,
        owner_id: str,
        initial_quota: int,
        refill_policy: RefillPolicy,
    ) -> Credential:
        """Create a new key limited to `initial_quota` uses."""
        payload = {
            "apiId": self.settings.api_id,
            "ownerId": owner_id,
            "remaining": initial_quota,
            "refill": {
                "interval": refill_policy.interval,
                "amount": refill_policy.amount,
            },
        }

        body = await post_json(
            SERVICE,
            "create_key",
            self.settings.create_key_url,
            payload,
            timeout_seconds=self.settings.timeout_seconds,
            bearer_token=self.settings.root_key,
            metrics=self.metrics,
        )

        try:
            credential = Credential(secret=body.get("key"), identifier=body.get("keyId"))
        except ValidationError as e:
            raise UpstreamEmptyResult("Unkey did not return a key") from e

        logger.info(
            "Issued API key",
            key_id=credential.identifier,
            owner_id=owner_id,
            initial_quota=initial_quota,
            refill_interval=refill_policy.interval,
        )
        return credential

    async def verify(self, secret: str) -> VerificationResult:
        """Check whether `secret` is currently valid and how many uses remain."""
        payload = {
            "key": secret,
            "apiId": self.settings.api_id,
        }

        body = await post_json(
            SERVICE,
            "verify_key",
            self.settings.verify_key_url,
            payload,
            timeout_seconds=self.settings.timeout_seconds,
            bearer_token=self.settings.root_key,
            metrics=self.metrics,
        )

        if not isinstance(body.get("valid"), bool):
            raise UpstreamEmptyResult("Unkey verification response has no validity flag")

        try:
            result = VerificationResult(
                valid=body["valid"],
                remaining=body.get("remaining"),
                code=body.get("code"),
            )
        except ValidationError as e:
            raise UpstreamEmptyResult("Unkey verification response is malformed") from e

        logger.debug(
            "Verified API key",
            key=mask_secret(secret),
            valid=result.valid,
            remaining=result.remaining,
            code=result.code,
        )
        return result
