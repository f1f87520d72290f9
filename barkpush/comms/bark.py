"""Client for sending Bark notifications."""

from typing import Iterable, Optional

import httpx

from barkpush.comms import apns
from barkpush.comms.apns import DispatchOutcome
from barkpush.comms.message import Msg
from barkpush.comms.token import ApnsToken, TokenManager
from barkpush.config import BarkConfig

__all__ = ["Bark"]


class Bark:
    """Sends Bark notifications to devices with a cached APNs token.

    The token lives in memory and is refreshed on demand. Processes that
    run once per notification can persist token() and restore it with
    born() instead of signing a new token on every run.
    """

    def __init__(
        self,
        config: BarkConfig,
        token: Optional[ApnsToken] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self.tokens = TokenManager(config, token)
        self.client = client

    @classmethod
    def born(cls, config: BarkConfig, timestamp: int, token: str, **kwargs) -> "Bark":
        return cls(config, ApnsToken(timestamp, token), **kwargs)

    def token(self) -> tuple[int, str]:
        """Current (issued_at, token) pair, suitable for born()."""
        return self.tokens.token()

    def force_refresh_token(self) -> tuple[int, str]:
        refreshed = self.tokens.force_refresh()
        return refreshed.issued_at, refreshed.value

    def send(self, msg: Msg, devices: Iterable[str]) -> DispatchOutcome:
        """Send msg and wait for every device.

        Returns an empty dict on success, otherwise the failed devices with
        the reason each one failed.
        """
        return apns.send(
            msg,
            self.config.topic,
            self.tokens.current_token().value,
            devices,
            host=self.config.host,
            timeout=self.config.timeout,
            max_concurrency=self.config.max_concurrency,
            client=self.client,
        )

    async def async_send(self, msg: Msg, devices: Iterable[str]) -> DispatchOutcome:
        return await apns.async_send(
            msg,
            self.config.topic,
            self.tokens.current_token().value,
            devices,
            host=self.config.host,
            timeout=self.config.timeout,
            max_concurrency=self.config.max_concurrency,
            client=self.client,
        )
