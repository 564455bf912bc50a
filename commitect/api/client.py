"""Intent Classification Client - POST a diff, get an intent back."""

import json
import ssl
import urllib.error
import urllib.request

from loguru import logger

from commitect.api.base import (
    ClassificationRequest, ApiError, MalformedResponseError, RequestTimeoutError,
    TlsVerificationError, UnreachableError,
)


class IntentClient:
    """Talks to the remote commit intent classifier over HTTP.

    Every failure is mapped to a ClassificationError subclass except the
    ones we do not recognise, which propagate unchanged. No retries.
    """

    UNKNOWN_BODY = "Unknown error"

    def classify(self, diff: str, config) -> str:
        """Send diff to config.api_url and return the raw 'intent' string."""
        request = ClassificationRequest.from_config(diff, config)
        logger.debug(f"Sending diff to API: {request.api_url} Size: {len(diff)}")
        body = self._post(request)
        return self._parse_body(body)

    def _ssl_context(self, request: ClassificationRequest) -> ssl.SSLContext | None:
        if not request.insecure:
            return None
        logger.warning(
            "SSL certificate verification is disabled. This should only be used "
            "for development with self-signed certificates!"
        )
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context

    def _post(self, request: ClassificationRequest) -> bytes:
        req = urllib.request.Request(
            request.api_url,
            data=request.to_json(),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        url = request.api_url

        try:
            with urllib.request.urlopen(req, timeout=request.timeout_seconds,
                                        context=self._ssl_context(request)) as response:
                status = getattr(response, 'status', 200)
                if not 200 <= status < 300:
                    raise ApiError(status, self._read_text(response))
                return response.read()
        except urllib.error.HTTPError as e:
            # HTTPError must come before URLError (it's a subclass)
            raise ApiError(e.code, self._read_text(e))
        except urllib.error.URLError as e:
            if isinstance(e.reason, TimeoutError):
                raise RequestTimeoutError(url, request.timeout_seconds)
            if isinstance(e.reason, ssl.SSLCertVerificationError):
                raise TlsVerificationError()
            if isinstance(e.reason, OSError):
                raise UnreachableError(url)
            raise
        except TimeoutError:
            raise RequestTimeoutError(url, request.timeout_seconds)
        except ssl.SSLCertVerificationError:
            raise TlsVerificationError()
        except ConnectionError:
            raise UnreachableError(url)

    def _read_text(self, response) -> str:
        """Best-effort body text of an error response."""
        try:
            data = response.read()
        except (OSError, ValueError, AttributeError):
            return self.UNKNOWN_BODY
        if data is None:
            return self.UNKNOWN_BODY
        return data.decode('utf-8', errors='replace')

    @staticmethod
    def _parse_body(body: bytes) -> str:
        try:
            data = json.loads(body.decode('utf-8'))
        except ValueError:
            raise MalformedResponseError()
        if not isinstance(data, dict) or not isinstance(data.get('intent'), str):
            raise MalformedResponseError()
        return data['intent']
