from enum import Enum


class Tags(Enum):
    notifications = "Notifications"
