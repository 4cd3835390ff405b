"""Signed, expiring delegation tokens for application prefill.

A token lets its bearer act on one application without a login session.
Wire format::

    <base64url(JSON payload)>.<base64url(HMAC-SHA256 over the encoded payload)>

The payload is ``{"appId": <application id>, "exp": <epoch milliseconds>}``.
Base64url values carry no padding.
"""

import base64
import binascii
import hashlib
import hmac
import json
import math
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Optional

from intake_portal.core.exceptions import ConfigurationError
from intake_portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_TTL = timedelta(minutes=20)
SEPARATOR = "."


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


class DelegationTokenService:
    """Issues and verifies delegation tokens.

    Verification never raises: malformed input, a bad signature and an
    expired token all produce ``None``.
    """

    def __init__(
        self,
        secret: str,
        default_ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the service.

        Args:
            secret: HMAC signing secret
            default_ttl: Lifetime used when issue() is given no ttl
            clock: Returns the current time in epoch seconds

        Raises:
            ConfigurationError: If the secret is empty
        """
        if not secret:
            raise ConfigurationError("Missing PREFILL_SECRET")
        if default_ttl <= timedelta(0):
            raise ConfigurationError("Delegation token TTL must be positive")

        self._key = secret.encode("utf-8")
        self.default_ttl = default_ttl
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _sign(self, encoded_payload: str) -> str:
        digest = hmac.new(self._key, encoded_payload.encode("ascii"), hashlib.sha256).digest()
        return _b64url_encode(digest)

    def issue(self, application_id: str, ttl: Optional[timedelta] = None) -> str:
        """Issue a token for an application.

        Args:
            application_id: Application the bearer may act on
            ttl: Token lifetime (defaults to ``default_ttl``)

        Returns:
            Signed token string

        Raises:
            ValueError: If the application ID is empty or the ttl is not positive
        """
        if not application_id:
            raise ValueError("application_id is required")
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")

        payload = {
            "appId": str(application_id),
            "exp": self._now_ms() + int(ttl / timedelta(milliseconds=1)),
        }
        encoded_payload = _b64url_encode(
            json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
        )
        return f"{encoded_payload}{SEPARATOR}{self._sign(encoded_payload)}"

    def verify(self, token: Any) -> Optional[str]:
        """Verify a token.

        Args:
            token: Token string as presented by the bearer

        Returns:
            The application ID, or None if the token is not valid
        """
        if not isinstance(token, str):
            return None

        parts = token.split(SEPARATOR)
        if len(parts) != 2 or not all(parts):
            LOGGER.debug("Delegation token rejected: malformed")
            return None

        encoded_payload, signature = parts
        try:
            expected = self._sign(encoded_payload)
        except UnicodeEncodeError:
            return None

        if not hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8")):
            LOGGER.debug("Delegation token rejected: signature mismatch")
            return None

        payload = self._decode_payload(encoded_payload)
        if payload is None:
            LOGGER.debug("Delegation token rejected: unreadable payload")
            return None

        app_id = payload.get("appId")
        exp = payload.get("exp")
        if not isinstance(app_id, str) or not app_id:
            return None
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return None
        if isinstance(exp, float) and not math.isfinite(exp):
            return None

        if self._now_ms() > exp:
            LOGGER.debug("Delegation token rejected: expired")
            return None

        return app_id

    @staticmethod
    def _decode_payload(encoded_payload: str) -> Optional[Dict[str, Any]]:
        try:
            payload = json.loads(_b64url_decode(encoded_payload).decode("utf-8"))
        except (binascii.Error, ValueError):
            return None
        return payload if isinstance(payload, dict) else None
