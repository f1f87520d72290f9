"""Push notifications to Bark devices through APNs."""

from barkpush.comms.bark import Bark
from barkpush.comms.message import Msg
from barkpush.comms.token import ApnsToken, TokenManager
from barkpush.config import BarkConfig

__version__ = "0.1.0"

__all__ = ["ApnsToken", "Bark", "BarkConfig", "Msg", "TokenManager"]
