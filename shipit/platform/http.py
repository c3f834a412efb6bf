"""HTTP client abstraction for the hosting-service API.

This module provides:
- HttpClient: Protocol for JSON POST requests (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Protocol, cast, runtime_checkable

from shipit import __version__
from shipit.core.result import Err, Ok, Result
from shipit.core.structured import as_str_dict

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations."""

    def post_json(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        """POST a JSON body and parse the JSON object response.

        Args:
            url: Endpoint URL
            body: JSON-serializable request body
            headers: Extra request headers

        Returns:
            Ok with the parsed response object, or Err with HttpError
        """
        ...


class RealHttpClient:
    """Real HTTP client using urllib, with system certificates."""

    def __init__(self, timeout: float = 30.0, user_agent: str = f"shipit/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def post_json(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        all_headers = {
            "User-Agent": self.user_agent,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        all_headers.update(headers or {})
        data = json.dumps(body).encode("utf-8")

        try:
            req = urllib.request.Request(url, data=data, headers=all_headers, method="POST")
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                raw: bytes = response.read()
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=e.reason))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        try:
            obj: object = json.loads(raw.decode("utf-8")) if raw else {}
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))

        parsed = as_str_dict(obj)
        if parsed is None:
            return Err(HttpError(url=url, status=0, message="Expected JSON object"))
        # Values are dynamic; preserve as Any for callers.
        return Ok(cast(dict[str, Any], parsed))


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_response(url, {"html_url": "https://example.com/r/1"})
        result = client.post_json(url, {"tag_name": "v1.0.0"})
    """

    def __init__(self) -> None:
        self._responses: dict[str, dict[str, Any] | HttpError] = {}
        self.calls: list[tuple[str, dict[str, Any], dict[str, str]]] = []

    def set_response(self, url: str, response: dict[str, Any] | HttpError) -> None:
        self._responses[url] = response

    def post_json(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        self.calls.append((url, body, dict(headers or {})))

        if url not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)
