"""Intent Classification API Package"""

from commitect.api.base import (
    ClassificationRequest,
    ClassificationError,
    RequestTimeoutError,
    UnreachableError,
    TlsVerificationError,
    ApiError,
    MalformedResponseError,
)
from commitect.api.client import IntentClient

__all__ = [
    "ClassificationRequest",
    "ClassificationError",
    "RequestTimeoutError",
    "UnreachableError",
    "TlsVerificationError",
    "ApiError",
    "MalformedResponseError",
    "IntentClient",
]
