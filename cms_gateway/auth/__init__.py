from .credentials import validate_credentials, anonymous_caller
from .permissions import CallerContext, ALL_PERMISSIONS, DEFAULT_PERMISSIONS

__all__ = [
    "validate_credentials",
    "anonymous_caller",
    "CallerContext",
    "ALL_PERMISSIONS",
    "DEFAULT_PERMISSIONS",
]
