"""htmlform 常量包."""

from .flash_categories import FlashCategory
from .http_methods import HttpMethod, SetupMode
from .system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "FlashCategory",
    "HttpMethod",
    "SetupMode",
]
