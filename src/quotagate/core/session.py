"""
Session store for issued credentials.

The credential is serialized to JSON and sealed with Fernet, so the token
handed to the client is opaque, authenticated and unreadable without the
server secret. Nothing is kept server side.
"""

import base64
import secrets
from typing import Optional

import structlog
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from pydantic import ValidationError

from ..config import SessionSettings
from ..models.credential import Credential

logger = structlog.get_logger(__name__)

_KDF_SALT = b"quotagate-session-v1"
_KDF_ITERATIONS = 100_000


def derive_session_key(secret_key: str) -> bytes:
    """Derive a Fernet key from an arbitrary secret string."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=_KDF_SALT,
        iterations=_KDF_ITERATIONS,
    )
    return base64.urlsafe_b64encode(kdf.derive(secret_key.encode()))


class SessionStore:
    """
    Serialize-on-write, deserialize-on-read adapter for the session token.

    `put` returns a fresh token; the caller replaces the client's cookie with
    it, which drops whatever credential the session held before.
    """

    def __init__(self, secret_key: str, max_age_seconds: Optional[int] = None) -> None:
        self._fernet = Fernet(derive_session_key(secret_key))
        self.max_age_seconds = max_age_seconds

    @classmethod
    def from_settings(cls, settings: SessionSettings) -> "SessionStore":
        secret_key = settings.secret_key
        if not secret_key:
            logger.warning(
                "No session secret configured, using a random one; "
                "sessions will not survive a restart"
            )
            secret_key = secrets.token_urlsafe(32)
        return cls(secret_key, max_age_seconds=settings.max_age_seconds)

    def put(self, credential: Credential) -> str:
        """Seal a credential into a session token."""
        payload = credential.model_dump_json(by_alias=True).encode()
        return self._fernet.encrypt(payload).decode()

    def get(self, token: Optional[str]) -> Optional[Credential]:
        """
        Read the credential from a session token.

        Returns None for a missing, tampered, expired or otherwise unreadable
        token; never raises.
        """
        if not token:
            return None

        try:
            payload = self._fernet.decrypt(token.encode(), ttl=self.max_age_seconds)
        except (InvalidToken, UnicodeEncodeError):
            logger.info("Discarding unreadable session token")
            return None

        try:
            return Credential.model_validate_json(payload)
        except ValidationError:
            logger.warning("Session token holds a malformed credential")
            return None
