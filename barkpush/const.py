APNS_HOST = "api.push.apple.com"
APNS_SANDBOX_HOST = "api.sandbox.push.apple.com"
APNS_DEVICE_PATH = "/3/device/{device}"
APNS_PUSH_TYPE = "alert"

DEFAULT_TOPIC = "me.fin.bark"
DEFAULT_TIMEOUT = 10.0

# tokens are cached for 45 minutes, APNs rejects them after an hour
TOKEN_TTL = 2700
JWT_ALGORITHM = "ES256"

DEFAULT_TITLE = "Notification"
DEFAULT_SOUND = "chime.caf"
DEFAULT_ICON = "https://github.com/66f94eae/bark-dev/raw/main/bot.jpg"
NOTIFICATION_CATEGORY = "myNotificationCategory"
ENCRYPTED_PLACEHOLDER = "NoContent"

# the Bark app only accepts these lengths, whatever the cipher
ENCRYPTION_KEY_LENGTH = 24
ENCRYPTION_IV_LENGTH = 12

# failure bodies up to this size carry no useful detail
TRIVIAL_BODY_LENGTH = 2
