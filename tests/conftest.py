"""
Pytest configuration and shared fixtures.

Contains common test fixtures and setup for all test modules.
"""

from typing import Generator, List, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.quotagate.api.dependencies import get_gateway
from src.quotagate.config import OpenAISettings, SessionSettings, Settings, UnkeySettings
from src.quotagate.core.exceptions import TransportFailure
from src.quotagate.core.gateway import Gateway, IssuancePolicy
from src.quotagate.core.metrics import MetricsCollector
from src.quotagate.core.session import SessionStore
from src.quotagate.main import create_app
from src.quotagate.models import Credential, RefillPolicy, VerificationResult


class FakeCredentialService:
    """In-memory stand-in for the Unkey client that records every call."""

    def __init__(self) -> None:
        self.issued: List[Credential] = [Credential(secret="sk_test", identifier="id_1")]
        self.verification = VerificationResult(valid=True, remaining=5, code="VALID")
        self.issue_error: Optional[Exception] = None
        self.verify_error: Optional[Exception] = None
        self.issue_calls: List[dict] = []
        self.verify_calls: List[str] = []

    async def issue(self, owner_id: str, initial_quota: int, refill_policy: RefillPolicy) -> Credential:
        self.issue_calls.append({
            "owner_id": owner_id,
            "initial_quota": initial_quota,
            "refill_policy": refill_policy,
        })
        if self.issue_error is not None:
            raise self.issue_error
        return self.issued[min(len(self.issue_calls), len(self.issued)) - 1]

    async def verify(self, secret: str) -> VerificationResult:
        self.verify_calls.append(secret)
        if self.verify_error is not None:
            raise self.verify_error
        return self.verification


class FakeImageService:
    """In-memory stand-in for the OpenAI client."""

    def __init__(self) -> None:
        self.image_url = "https://images.example.com/cat.png"
        self.error: Optional[Exception] = None
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.image_url


@pytest.fixture
def test_settings() -> Settings:
    """Settings with every backend configured and fixed session secret."""
    return Settings(
        log_level="DEBUG",
        unkey=UnkeySettings(root_key="unkey_root_test", api_id="api_test"),
        openai=OpenAISettings(api_key="sk-openai-test"),
        session=SessionSettings(secret_key="test-session-secret"),
    )


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore("test-session-secret")


@pytest.fixture
def credential_service() -> FakeCredentialService:
    return FakeCredentialService()


@pytest.fixture
def image_service() -> FakeImageService:
    return FakeImageService()


@pytest.fixture
def metrics() -> MetricsCollector:
    return MetricsCollector()


@pytest.fixture
def gateway(
    session_store: SessionStore,
    credential_service: FakeCredentialService,
    image_service: FakeImageService,
    metrics: MetricsCollector,
) -> Gateway:
    """Gateway wired with fake backends."""
    return Gateway(
        session_store=session_store,
        credential_service=credential_service,
        image_service=image_service,
        policy=IssuancePolicy(
            owner_id="superuser",
            initial_quota=10,
            refill=RefillPolicy(amount=10, interval="daily"),
        ),
        metrics=metrics,
    )


@pytest.fixture
def test_app(test_settings: Settings, gateway: Gateway) -> FastAPI:
    """Application whose gateway is replaced by the fake-backed one."""
    app = create_app(test_settings)
    app.dependency_overrides[get_gateway] = lambda: gateway
    return app


@pytest.fixture
def test_client(test_app: FastAPI) -> Generator[TestClient, None, None]:
    """FastAPI test client with test configuration."""
    with TestClient(test_app) as client:
        yield client


@pytest.fixture
def transport_failure() -> TransportFailure:
    return TransportFailure("backend unreachable", details={"error_type": "ClientConnectorError"})
