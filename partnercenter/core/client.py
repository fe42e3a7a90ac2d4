"""
Core HTTP client for the Partner Center API.

Handles templated request building, the call through a pluggable transport,
response parsing and error mapping.
"""

import http.client
import json
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any, Protocol, TypeVar

from partnercenter.core.errors import RemoteError, TransportError
from partnercenter.core.registry import BODYLESS_VERBS, OperationDescriptor, OperationRegistry, default_registry

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_BASE_URL = "https://api.partnercenter.microsoft.com/v1"
DEFAULT_TIMEOUT = 60

T = TypeVar("T")


# =============================================================================
# Transport
# =============================================================================


@dataclass
class TransportResponse:
    """Raw response handed back by a transport."""

    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)


class Transport(Protocol):
    """
    Anything that can send one HTTP request.

    Implementations return the response for every status code and raise
    TransportError only when the server could not be reached. They must be
    safe to call from several threads at once.
    """

    def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> TransportResponse: ...


class UrllibTransport:
    """Default transport built on urllib."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> TransportResponse:
        req = urllib.request.Request(url, data=body, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                return TransportResponse(
                    status=response.getcode(),
                    body=response.read(),
                    headers=dict(response.headers.items()),
                )

        except urllib.error.HTTPError as e:
            return TransportResponse(
                status=e.code,
                body=e.read() or b"",
                headers=dict(e.headers.items()) if e.headers else {},
            )

        except urllib.error.URLError as e:
            raise TransportError(f"Connection error: {e.reason}") from e

        except TimeoutError as e:
            raise TransportError(f"Request timed out after {self.timeout} seconds") from e

        except OSError as e:
            raise TransportError(f"Connection error: {e}") from e

        except http.client.HTTPException as e:
            raise TransportError(f"Connection error: {e!r}") from e


# =============================================================================
# Service client
# =============================================================================


def _serialize(body: Any) -> Any:
    """Turn a payload into JSON-ready data."""
    if hasattr(body, "to_dict"):
        return body.to_dict()
    if is_dataclass(body) and not isinstance(body, type):
        return asdict(body)
    if isinstance(body, (list, tuple)):
        return [_serialize(item) for item in body]
    if isinstance(body, dict):
        return {key: _serialize(value) for key, value in body.items()}
    return body


def _error_fields(payload: Any) -> tuple[str | None, str | None]:
    """Pull (code, message) out of an error document."""
    if not isinstance(payload, dict):
        return None, None
    # Handle {"code", "message"}, {"code", "description"}, {"error": "message"}
    # and {"error": {"code", "message"}}
    error = payload.get("error", payload)
    if isinstance(error, str):
        code = payload.get("code")
        return (str(code) if code is not None else None), error
    if isinstance(error, dict):
        code = error.get("code") or error.get("errorName")
        message = error.get("message") or error.get("description")
        return (str(code) if code is not None else None), message
    return None, None


class ServiceClient:
    """
    Generic invoker for Partner Center operations.

    Resolves an operation name to its verb and path template, fills the
    template from a resource context, sends the request through the
    transport and parses the result.

    Example:
        client = ServiceClient()
        ctx = ResourceContext("cust-1", "sub-9")
        sub = client.invoke("GetSubscription", ctx, parser=Subscription.from_dict)

    """

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        transport: Transport | None = None,
        registry: OperationRegistry | None = None,
        timeout: float | None = None,
        default_headers: dict[str, str] | None = None,
    ):
        """
        Initialize the service client.

        Args:
            base_url: API base URL (or PARTNER_CENTER_BASE_URL env var)
            access_token: Bearer token (or PARTNER_CENTER_ACCESS_TOKEN env var)
            transport: Transport to send requests with (defaults to UrllibTransport)
            registry: Operation registry (defaults to the process-wide one)
            timeout: Request timeout in seconds for the default transport
                (or PARTNER_CENTER_TIMEOUT env var)
            default_headers: Headers added to every request

        """
        self.base_url = (base_url or os.environ.get("PARTNER_CENTER_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.access_token = access_token or os.environ.get("PARTNER_CENTER_ACCESS_TOKEN")
        if timeout is None:
            timeout = float(os.environ.get("PARTNER_CENTER_TIMEOUT", DEFAULT_TIMEOUT))
        self.timeout = timeout
        self.transport = transport or UrllibTransport(timeout=timeout)
        self.registry = registry if registry is not None else default_registry()
        self.default_headers = dict(default_headers or {})

    def _build_url(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Build full URL from path and query parameters."""
        url = path if path.startswith("http") else f"{self.base_url}{path}"
        if params:
            # Filter out None values and URL-encode
            filtered_params = {k: v for k, v in params.items() if v is not None}
            if filtered_params:
                query_string = urllib.parse.urlencode(filtered_params)
                separator = "&" if "?" in url else "?"
                url = f"{url}{separator}{query_string}"
        return url

    def _build_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {"Accept": "application/json", **self.default_headers}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if extra:
            headers.update(extra)
        return headers

    def invoke(
        self,
        operation: str | OperationDescriptor,
        context: Sequence[Any] | None = None,
        body: Any | None = None,
        parser: Callable[[Any], T] | None = None,
        *,
        required: bool = False,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> T | Any:
        """
        Invoke a registered operation.

        Args:
            operation: Operation name or descriptor
            context: Identifiers to substitute into the path template, in order
            body: Request payload (ignored for GET and DELETE)
            parser: Function applied to the decoded JSON response
            required: Treat an empty success body as an error
            params: Query string parameters
            headers: Extra request headers

        Returns:
            Parsed response, or None for an empty body

        Raises:
            UnknownOperation: If the operation name is not registered
            TemplateArityMismatch: If the context does not fit the path template
            RemoteError: On a non-success status
            TransportError: If the service could not be reached

        """
        if isinstance(operation, OperationDescriptor):
            descriptor = operation
        else:
            descriptor = self.registry.descriptor_for(operation)
        values = tuple(context) if context is not None else ()
        path = descriptor.expand(values)
        return self.request(
            descriptor.verb,
            path,
            body,
            parser,
            required=required,
            params=params,
            headers=headers,
            operation=descriptor.name,
        )

    def request(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        parser: Callable[[Any], T] | None = None,
        *,
        required: bool = False,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        operation: str | None = None,
    ) -> T | Any:
        """
        Make an HTTP request to an already-built path.

        Args:
            method: HTTP method (GET, POST, PATCH, PUT, DELETE)
            path: API path (e.g., /customers/{id}/orders)
            body: Request payload for POST/PATCH/PUT
            parser: Function applied to the decoded JSON response
            required: Treat an empty success body as an error
            params: Query string parameters
            headers: Extra request headers
            operation: Operation name, for diagnostics

        Returns:
            Parsed response, or None for an empty body

        Raises:
            RemoteError: On a non-success status or unreadable response
            TransportError: If the service could not be reached

        """
        method = method.upper()
        url = self._build_url(path, params)
        req_headers = self._build_headers(headers)

        data: bytes | None = None
        if body is not None and method not in BODYLESS_VERBS:
            data = json.dumps(_serialize(body)).encode("utf-8")
            req_headers.setdefault("Content-Type", "application/json")

        logger.debug("%s %s (%s)", method, url, operation or "-")
        try:
            response = self.transport.send(method, url, req_headers, data)
        except TransportError as e:
            logger.warning("Transport failure for %s %s: %s", method, path, e.message)
            raise TransportError(e.message, operation=operation, path=path) from e
        except OSError as e:
            logger.warning("Transport failure for %s %s: %s", method, path, e)
            raise TransportError(f"Connection error: {e}", operation=operation, path=path) from e

        return self._handle_response(response, parser, required, operation, path)

    def _handle_response(
        self,
        response: TransportResponse,
        parser: Callable[[Any], T] | None,
        required: bool,
        operation: str | None,
        path: str,
    ) -> T | Any:
        status = response.status
        raw = response.body or b""

        if status < 200 or status >= 300:
            raise self._remote_error(status, raw, operation, path)

        if not raw.strip():
            payload = None
        else:
            try:
                payload = json.loads(raw.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise RemoteError(
                    f"Invalid JSON response: {e}",
                    status,
                    code="InvalidResponse",
                    operation=operation,
                    path=path,
                ) from e

        if payload is None:
            if required:
                raise RemoteError(
                    "Empty response body",
                    status,
                    code="EmptyResponse",
                    operation=operation,
                    path=path,
                )
            return None

        if parser is None:
            return payload
        try:
            return parser(payload)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise RemoteError(
                f"Invalid response: {e!r}",
                status,
                code="InvalidResponse",
                operation=operation,
                path=path,
                response_body=payload,
            ) from e

    def _remote_error(self, status: int, raw: bytes, operation: str | None, path: str) -> RemoteError:
        text = raw.decode("utf-8", errors="replace")
        try:
            payload: Any = json.loads(text) if text.strip() else None
        except json.JSONDecodeError:
            payload = text or None

        code, message = _error_fields(payload)
        if not message:
            message = text.strip() if isinstance(payload, str) else f"HTTP {status}"

        logger.debug("%s failed with %s: %s", operation or path, status, message)
        return RemoteError(
            message,
            status,
            code=code,
            operation=operation,
            path=path,
            response_body=payload,
        )
