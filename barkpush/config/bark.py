from pydantic import Field

from barkpush.const import (
    APNS_HOST,
    APNS_SANDBOX_HOST,
    DEFAULT_TIMEOUT,
    DEFAULT_TOPIC,
    TOKEN_TTL,
)

from .base import BarkBaseModel

__all__ = ["BarkConfig"]


class BarkConfig(BarkBaseModel):
    team_id: str = Field(min_length=1, title="Apple developer team id (token issuer).")
    auth_key_id: str = Field(min_length=1, title="Id of the APNs auth key.")
    private_key: str = Field(
        min_length=1, title="PEM encoded EC private key used to sign tokens."
    )
    topic: str = Field(default=DEFAULT_TOPIC, title="Bundle id of the receiving app.")
    token_ttl: int = Field(
        default=TOKEN_TTL, gt=0, title="Seconds a signed token is reused (time in seconds)."
    )
    sandbox: bool = Field(default=False, title="Send through the APNs sandbox gateway.")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, title="Per request timeout (time in seconds)."
    )
    max_concurrency: int = Field(
        default=1, ge=1, title="Maximum number of devices pushed to at once."
    )

    @property
    def host(self) -> str:
        return APNS_SANDBOX_HOST if self.sandbox else APNS_HOST
