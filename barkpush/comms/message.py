"""Bark notification messages and their APNs payload."""

import base64
import json
import logging
import secrets
import string
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from barkpush.comms import cipher
from barkpush.comms.cipher import CipherFamily, CipherMode
from barkpush.const import (
    DEFAULT_ICON,
    DEFAULT_SOUND,
    DEFAULT_TITLE,
    ENCRYPTED_PLACEHOLDER,
    ENCRYPTION_IV_LENGTH,
    ENCRYPTION_KEY_LENGTH,
    NOTIFICATION_CATEGORY,
)
from barkpush.errors import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = ["InterruptionLevel", "Msg", "generate_iv", "serialize"]

IV_ALPHABET = string.ascii_letters + string.digits


class InterruptionLevel(str, Enum):
    # shown on screen immediately
    active = "active"
    # shown even in focus mode
    time_sensitive = "timeSensitive"
    # only added to the notification list
    passive = "passive"

    @classmethod
    def parse(cls, value: str) -> "InterruptionLevel":
        for level in cls:
            if level.value.lower() == value.strip().lower():
                return level
        raise ConfigurationError(f"Invalid interruption level: {value!r}")


def generate_iv() -> str:
    return "".join(secrets.choice(IV_ALPHABET) for _ in range(ENCRYPTION_IV_LENGTH))


def _blank_to_none(value: str) -> Optional[str]:
    return None if not value or not value.strip() else value


@dataclass
class Msg:
    """A push notification for the Bark app.

    Configure with the chained setters, then hand it to a sender which
    only ever reads it through serialize().

    Example:
        msg = Msg("title", "body").set_level("passive").set_badge(1)
    """

    title: str
    body: str
    level: InterruptionLevel = InterruptionLevel.active
    badge: Optional[int] = None
    auto_copy: Optional[int] = None
    copy: Optional[str] = None
    sound: Optional[str] = DEFAULT_SOUND
    icon: Optional[str] = DEFAULT_ICON
    group: Optional[str] = None
    is_archive: Optional[int] = None
    url: Optional[str] = None
    iv: Optional[str] = None
    enc_type: Optional[CipherFamily] = None
    mode: Optional[CipherMode] = None
    key: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.title:
            self.title = DEFAULT_TITLE

    @classmethod
    def with_body(cls, body: str) -> "Msg":
        return cls(DEFAULT_TITLE, body)

    def set_level(self, level: str) -> "Msg":
        self.level = InterruptionLevel.parse(level)
        return self

    def set_badge(self, badge: int) -> "Msg":
        if badge < 0:
            raise ConfigurationError(f"Badge must not be negative, got {badge}")
        self.badge = badge or None
        return self

    def set_auto_copy(self, auto_copy: int) -> "Msg":
        self.auto_copy = 0 if auto_copy == 0 else None
        return self

    def set_copy(self, copy: str) -> "Msg":
        self.copy = _blank_to_none(copy)
        return self

    def set_sound(self, sound: str) -> "Msg":
        self.sound = sound
        return self

    def set_icon(self, icon: str) -> "Msg":
        self.icon = _blank_to_none(icon)
        return self

    def set_group(self, group: str) -> "Msg":
        self.group = group
        return self

    def set_is_archive(self, is_archive: int) -> "Msg":
        self.is_archive = 1 if is_archive == 1 else None
        return self

    def set_url(self, url: str) -> "Msg":
        self.url = _blank_to_none(url)
        return self

    def set_iv(self, iv: str) -> "Msg":
        self.iv = _blank_to_none(iv)
        return self

    def set_enc_type(self, enc_type: str) -> "Msg":
        if self.enc_type is not None:
            raise ConfigurationError("Encrypt type can only be set once")
        self.enc_type = CipherFamily.parse(enc_type)
        return self

    def set_mode(self, mode: str) -> "Msg":
        if self.mode is not None:
            raise ConfigurationError("Encrypt mode can only be set once")
        self.mode = CipherMode.parse(mode)
        return self

    def set_key(self, key: str) -> "Msg":
        self.key = key
        return self

    @property
    def encrypted(self) -> bool:
        return self.enc_type is not None and self.mode is not None

    def _payload(
        self, ciphertext: Optional[str] = None, iv: Optional[str] = None
    ) -> dict[str, Any]:
        aps: dict[str, Any] = {
            "mutable-content": 1,
            "category": NOTIFICATION_CATEGORY,
            "interruption-level": self.level.value,
        }
        if self.badge is not None:
            aps["badge"] = self.badge
        if self.sound is not None:
            aps["sound"] = self.sound
        if self.group is not None:
            aps["thread-id"] = self.group
        aps["alert"] = {
            "title": self.title,
            "body": self.body if ciphertext is None else ENCRYPTED_PLACEHOLDER,
        }
        if self.icon is not None:
            aps["icon"] = self.icon

        payload: dict[str, Any] = {"aps": aps}
        for name, value in (
            ("autoCopy", self.auto_copy),
            ("isArchive", self.is_archive),
            ("copy", self.copy),
            ("url", self.url),
            ("iv", iv),
            ("ciphertext", ciphertext),
        ):
            if value is not None:
                payload[name] = value
        return payload

    @staticmethod
    def _dumps(payload: dict[str, Any]) -> str:
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)

    def to_json(self) -> str:
        """Plaintext payload, ignoring any encryption settings."""
        return self._dumps(self._payload())

    def encrypt(self, iv_factory: Callable[[], str] = generate_iv) -> str:
        """Payload with the body encrypted into the ciphertext field.

        Raises:
            ConfigurationError: If encryption is not fully configured or the
                key or IV has the wrong length.
            EncryptionError: If the cipher rejects the key, IV or data.
        """
        if not self.encrypted:
            raise ConfigurationError("Encrypt type and mode must be set")
        if self.key is None:
            raise ConfigurationError("Encrypt key must be set")
        key = self.key.encode("utf-8")
        if len(key) != ENCRYPTION_KEY_LENGTH:
            raise ConfigurationError(
                f"Encrypt key must be {ENCRYPTION_KEY_LENGTH} bytes, got {len(key)}"
            )

        iv = self.iv
        if iv is None:
            if not self.mode.generates_iv:
                raise ConfigurationError(f"An iv is required for {self.mode.value} mode")
            iv = iv_factory()
        iv_bytes = iv.encode("utf-8")
        if len(iv_bytes) != ENCRYPTION_IV_LENGTH:
            raise ConfigurationError(
                f"Iv must be {ENCRYPTION_IV_LENGTH} bytes, got {len(iv_bytes)}"
            )

        original = self._dumps({"body": self.body}).encode("utf-8")
        ciphertext = cipher.encrypt(self.enc_type, self.mode, key, iv_bytes, original)
        logger.debug(
            f"Encrypted notification body with {self.enc_type.value}-{self.mode.value}"
        )
        return self._dumps(
            self._payload(ciphertext=base64.b64encode(ciphertext).decode("ascii"), iv=iv)
        )

    def serialize(self, iv_factory: Callable[[], str] = generate_iv) -> bytes:
        """Request body for APNs, encrypted when a cipher is configured."""
        if self.encrypted:
            return self.encrypt(iv_factory).encode("utf-8")
        return self.to_json().encode("utf-8")


def serialize(msg: Msg, iv_factory: Callable[[], str] = generate_iv) -> bytes:
    return msg.serialize(iv_factory)
