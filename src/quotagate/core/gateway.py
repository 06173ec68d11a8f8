"""
Gateway controller.

Orchestrates the three user-facing operations:
1. inspect: read the credential held by the session
2. authorize: issue a new credential and seal it into a session token
3. generate_image: verify the session credential, then call the image backend

Every decision is scoped to the session token passed in; the controller
keeps no per-client state.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

import structlog

from ..config import Settings
from ..models.credential import Credential, RefillPolicy, VerificationResult
from .credentials import UnkeyCredentialService, mask_secret
from .exceptions import (
    InternalError,
    InvalidCredential,
    QuotaGateException,
    TransportFailure,
    Unauthenticated,
    UpstreamEmptyResult,
    VerificationUnavailable,
)
from .images import OpenAIImageService
from .metrics import MetricsCollector
from .session import SessionStore

logger = structlog.get_logger(__name__)


class CredentialService(Protocol):
    async def issue(
        self, owner_id: str, initial_quota: int, refill_policy: RefillPolicy
    ) -> Credential: ...

    async def verify(self, secret: str) -> VerificationResult: ...


class ImageService(Protocol):
    async def generate(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class IssuancePolicy:
    """Fixed parameters every issued key is created with."""
    owner_id: str
    initial_quota: int
    refill: RefillPolicy


@dataclass
class AuthorizationResult:
    """A freshly issued credential and the session token holding it."""
    credential: Credential
    session_token: str


@dataclass
class GenerationResult:
    """
    Outcome of a successful protected generation.

    `remaining_calls` comes from the verification made before generating,
    so it can be one use higher than the backend's current count.
    """
    image_url: str
    remaining_calls: Optional[int]


class Gateway:
    """
    Quota-gated proxy in front of the image backend.

    The image backend is never called unless a verification made during
    the same request reported the session credential as valid.
    """

    def __init__(
        self,
        session_store: SessionStore,
        credential_service: CredentialService,
        image_service: ImageService,
        policy: IssuancePolicy,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.session_store = session_store
        self.credential_service = credential_service
        self.image_service = image_service
        self.policy = policy
        self.metrics = metrics

    def inspect(self, session_token: Optional[str]) -> Credential:
        """Return the credential held by the session."""
        credential = self.session_store.get(session_token)
        if credential is None:
            raise Unauthenticated("Unauthorized: No API key in session.")
        return credential

    async def authorize(self) -> AuthorizationResult:
        """
        Issue a new credential.

        Not idempotent: each call creates a distinct key and the returned
        token supersedes whatever the session held before.
        """
        try:
            credential = await self.credential_service.issue(
                owner_id=self.policy.owner_id,
                initial_quota=self.policy.initial_quota,
                refill_policy=self.policy.refill,
            )
        except QuotaGateException as e:
            logger.warning(
                "Key issuance failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            self._record_issuance("failed")
            raise Unauthenticated("Unauthorized: Unable to issue an API key.") from e

        self._record_issuance("issued")
        return AuthorizationResult(
            credential=credential,
            session_token=self.session_store.put(credential),
        )

    async def generate_image(self, session_token: Optional[str], prompt: str) -> GenerationResult:
        """Verify the session credential, then generate one image for `prompt`."""
        if not session_token:
            raise Unauthenticated("Unauthorized: Missing API key in cookies.")

        credential = self.session_store.get(session_token)
        if credential is None:
            raise InvalidCredential("Invalid API key format in cookies.")

        verification = await self._verify(credential)

        try:
            image_url = await self.image_service.generate(prompt)
        except Exception as e:
            logger.error(
                "Error generating image",
                key_id=credential.identifier,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=not isinstance(e, QuotaGateException),
            )
            self._record_generation("failed")
            raise InternalError() from e

        self._record_generation("succeeded")
        logger.info(
            "Image generated for key",
            key_id=credential.identifier,
            remaining_calls=verification.remaining,
        )
        return GenerationResult(image_url=image_url, remaining_calls=verification.remaining)

    async def _verify(self, credential: Credential) -> VerificationResult:
        try:
            verification = await self.credential_service.verify(credential.secret)
        except (TransportFailure, UpstreamEmptyResult) as e:
            logger.warning(
                "Key verification unavailable",
                key=mask_secret(credential.secret),
                error=str(e),
                error_type=type(e).__name__,
            )
            self._record_verification("unavailable")
            raise VerificationUnavailable() from e

        if not verification.valid:
            logger.info(
                "Key rejected",
                key_id=credential.identifier,
                code=verification.code,
                remaining=verification.remaining,
            )
            self._record_verification("rejected")
            raise InvalidCredential(
                "Invalid API key: Quota exceeded or invalid key.",
                details={"code": verification.code} if verification.code else None,
            )

        self._record_verification("valid")
        return verification

    def _record_issuance(self, outcome: str) -> None:
        if self.metrics is not None:
            self.metrics.record_issuance(outcome)

    def _record_verification(self, outcome: str) -> None:
        if self.metrics is not None:
            self.metrics.record_verification(outcome)

    def _record_generation(self, outcome: str) -> None:
        if self.metrics is not None:
            self.metrics.record_generation(outcome)


def build_gateway(settings: Settings, metrics: Optional[MetricsCollector] = None) -> Gateway:
    """Wire the production gateway from settings."""
    policy = IssuancePolicy(
        owner_id=settings.unkey.owner_id,
        initial_quota=settings.unkey.initial_quota,
        refill=RefillPolicy(
            amount=settings.unkey.refill_amount,
            interval=settings.unkey.refill_interval,
        ),
    )
    return Gateway(
        session_store=SessionStore.from_settings(settings.session),
        credential_service=UnkeyCredentialService(settings.unkey, metrics),
        image_service=OpenAIImageService(settings.openai, metrics),
        policy=policy,
        metrics=metrics,
    )
