"""Signed APNs provider tokens, cached until they go stale."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec
from py_vapid import Vapid01

from barkpush.config import BarkConfig
from barkpush.const import JWT_ALGORITHM
from barkpush.errors import ConfigurationError, SigningError

logger = logging.getLogger(__name__)

__all__ = ["ApnsToken", "TokenManager"]


@dataclass(frozen=True)
class ApnsToken:
    issued_at: int
    value: str

    def is_expired(self, now: int, ttl: int) -> bool:
        return self.issued_at + ttl <= now

    def dump(self) -> str:
        """Share the token as `<issued_at>.<value>`."""
        return f"{self.issued_at}.{self.value}"

    @classmethod
    def load(cls, text: str) -> "ApnsToken":
        timestamp, sep, value = text.partition(".")
        if not sep or not value:
            raise ConfigurationError("Token must be formatted as <timestamp>.<token>")
        try:
            return cls(int(timestamp), value)
        except ValueError:
            raise ConfigurationError(f"Invalid token timestamp: {timestamp!r}") from None


class TokenManager:
    """Produces the bearer token APNs expects, signing a new one only when
    the cached one has outlived the configured ttl."""

    def __init__(
        self,
        config: BarkConfig,
        token: Optional[ApnsToken] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self._clock = clock
        self._lock = threading.Lock()
        self._signing_key: Optional[ec.EllipticCurvePrivateKey] = None
        self._token: Optional[ApnsToken] = None

        if token is not None:
            if token.is_expired(self._now(), config.token_ttl):
                logger.warning(
                    f"Token issued at {token.issued_at} expired, a new one will be signed"
                )
            else:
                self._token = token

    @classmethod
    def born(cls, config: BarkConfig, timestamp: int, token: str, **kwargs) -> "TokenManager":
        """Restore a manager from a previously persisted token."""
        return cls(config, ApnsToken(timestamp, token), **kwargs)

    @property
    def cached(self) -> Optional[ApnsToken]:
        return self._token

    def _now(self) -> int:
        try:
            return int(self._clock())
        except (OSError, OverflowError, ValueError) as e:
            logger.warning(f"Unable to read the clock, using epoch: {e}")
            return 0

    def current_token(self) -> ApnsToken:
        """Return a usable token, signing a new one if the cache is stale."""
        with self._lock:
            now = self._now()
            if self._token is None or self._token.is_expired(now, self.config.token_ttl):
                self._token = self._mint(now)
            return self._token

    def force_refresh(self) -> ApnsToken:
        """Sign a new token regardless of the cached one."""
        with self._lock:
            self._token = self._mint(self._now())
            return self._token

    def token(self) -> tuple[int, str]:
        current = self.current_token()
        return current.issued_at, current.value

    def _load_signing_key(self) -> ec.EllipticCurvePrivateKey:
        if self._signing_key is None:
            try:
                vapid = Vapid01.from_pem(self.config.private_key.encode("utf-8"))
            except (ValueError, TypeError, UnsupportedAlgorithm) as e:
                raise SigningError(f"Unable to load the APNs auth key: {e}") from e

            if not isinstance(vapid.private_key, ec.EllipticCurvePrivateKey):
                raise SigningError("The APNs auth key is not an elliptic curve key")
            self._signing_key = vapid.private_key
        return self._signing_key

    def _mint(self, now: int) -> ApnsToken:
        key = self._load_signing_key()
        try:
            value = jwt.encode(
                {"iss": self.config.team_id, "iat": now},
                key,
                algorithm=JWT_ALGORITHM,
                headers={"kid": self.config.auth_key_id},
            )
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            raise SigningError(f"Signing the APNs token failed: {e}") from e

        logger.info(f"Signed a new APNs token for team {self.config.team_id}")
        return ApnsToken(now, value)
