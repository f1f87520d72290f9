from typing import Optional

from pydantic import BaseModel, Field


class SendNotificationBody(BaseModel):
    title: Optional[str] = Field(
        title="Notification title", default=None, max_length=200
    )
    body: str = Field(title="Notification body", min_length=1, max_length=4000)
    devices: list[str] = Field(title="Device tokens to notify", min_length=1)
    level: Optional[str] = Field(
        title="Interruption level: active, timeSensitive or passive", default=None
    )
    badge: Optional[int] = Field(title="Badge number, 0 to leave unset", default=None, ge=0)
    sound: Optional[str] = Field(title="Notification sound", default=None)
    icon: Optional[str] = Field(title="Icon URL, empty to remove", default=None)
    group: Optional[str] = Field(title="Group (thread id) of the notification", default=None)
    url: Optional[str] = Field(
        title="URL to open when notification is clicked", default=None, max_length=500
    )
    copy_text: Optional[str] = Field(title="Text copied instead of the body", default=None)
    auto_copy: Optional[int] = Field(title="Auto copy flag", default=None)
    is_archive: Optional[int] = Field(title="Pass 1 to archive the notification", default=None)
    enc_type: Optional[str] = Field(title="Cipher: aes128, aes192 or aes256", default=None)
    mode: Optional[str] = Field(title="Cipher mode: cbc, ecb or gcm", default=None)
    key: Optional[str] = Field(title="Encryption key", default=None)
    iv: Optional[str] = Field(title="Encryption iv", default=None)
