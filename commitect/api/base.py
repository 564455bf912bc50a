"""Classification API Base Types and Errors"""

import json
from dataclasses import dataclass


@dataclass
class ClassificationRequest:
    """One diff on its way to the classifier, with the settings to send it."""
    diff: str
    api_url: str
    timeout_ms: int = 30000
    allow_insecure_ssl: bool = False

    @classmethod
    def from_config(cls, diff: str, config) -> 'ClassificationRequest':
        return cls(
            diff=diff,
            api_url=config.api_url,
            timeout_ms=config.timeout,
            allow_insecure_ssl=config.allow_insecure_ssl,
        )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def insecure(self) -> bool:
        """Skip certificate checks only when asked to and only for https."""
        return self.allow_insecure_ssl and self.api_url.lower().startswith('https://')

    def to_json(self) -> bytes:
        return json.dumps({"diff": self.diff}).encode('utf-8')


class ClassificationError(Exception):
    """Raised when the intent classifier cannot be used."""
    pass


class RequestTimeoutError(ClassificationError):
    def __init__(self, url: str, seconds: float):
        super().__init__(f"Request timeout: Cannot reach backend API at {url} within {seconds:g} seconds.")
        self.url = url
        self.seconds = seconds


class UnreachableError(ClassificationError):
    def __init__(self, url: str):
        super().__init__(
            f"Cannot reach backend API at {url}. "
            "Please check if the server is running and the URL is correct."
        )
        self.url = url


class TlsVerificationError(ClassificationError):
    def __init__(self):
        super().__init__(
            "SSL certificate verification failed. If using a self-signed certificate, "
            "set 'allow_insecure_ssl' to true in .commitectrc or pass --insecure (development only)."
        )


class ApiError(ClassificationError):
    """Non-success HTTP status from the classifier."""

    def __init__(self, status: int, body: str):
        super().__init__(f"API returned {status}: {body}")
        self.status = status
        self.body = body


class MalformedResponseError(ClassificationError):
    def __init__(self, detail: str = "expected { intent: string }"):
        super().__init__(f"Invalid response format: {detail}")
