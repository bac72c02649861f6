"""Built-in passive detectors."""

from .cache_control import CacheControlDetector
from .heartbleed import HeartBleedDetector
from .javascript_event import UserControlledJavascriptEventDetector
from .permissions_policy import PermissionsPolicyDetector
from .timestamp import TimestampDisclosureDetector

__all__ = [
    "CacheControlDetector",
    "HeartBleedDetector",
    "PermissionsPolicyDetector",
    "TimestampDisclosureDetector",
    "UserControlledJavascriptEventDetector",
]
