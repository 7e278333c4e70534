"""Hand-off from validated requests to the HTTP collaborator.

Requests never talk to the network themselves. ``dispatch`` validates and
serializes a request, logs a redacted copy of what is about to be sent, and
passes method, path and payload to a ``Transport``. ``HttpTransport`` is the
default collaborator, built on ``httpx``.
"""

import time
from typing import Any, NamedTuple, Protocol

import httpx
import orjson

from jambojet.core.config import ApiConfig, Settings, get_settings
from jambojet.core.constants import HTTP_ERROR_THRESHOLD, SUBSCRIPTION_KEY_HEADER
from jambojet.core.error_context import (
    sanitize_dict,
    sanitize_error_context,
    sanitize_headers,
)
from jambojet.core.exceptions import TransportError, ValidationError
from jambojet.core.logging import get_logger
from jambojet.core.types import Payload
from jambojet.requests.base import BaseRequest

logger = get_logger(__name__)

# Verbs whose payload travels as query parameters rather than a JSON body
QUERY_METHODS = frozenset({"GET", "DELETE"})
MAX_ERROR_BODY_LENGTH = 500


class Endpoint(NamedTuple):
    """An upstream operation: HTTP verb and path relative to the base URL.

    ``path`` may hold ``{name}`` placeholders filled from the request's
    ``path_parameters``.
    """

    method: str
    path: str

    def resolve(self, request: BaseRequest) -> str:
        parameters: dict[str, str] = getattr(request, "path_parameters", {})
        return self.path.format(**parameters) if parameters else self.path


class Transport(Protocol):
    """Anything able to deliver a serialized payload upstream."""

    def send(self, method: str, path: str, payload: Payload) -> Any:  # noqa: ANN401
        """Send ``payload`` and return the decoded response body."""
        ...


def dispatch(
    transport: Transport,
    endpoint: Endpoint,
    request: BaseRequest,
    settings: Settings | None = None,
) -> Any:  # noqa: ANN401
    """Validate ``request`` and hand its payload to ``transport``.

    Args:
        transport: Collaborator that performs the call.
        endpoint: Target verb and path.
        request: The request to send.
        settings: Settings to read logging options from; defaults to the cached ones.

    Returns:
        Any: Whatever the transport returns.

    Raises:
        ValidationError: If the request is invalid; nothing is sent.
        TransportError: If the transport fails.
    """
    settings = settings or get_settings()
    request_type = type(request).__name__
    path = endpoint.resolve(request)

    try:
        payload = request.validated_payload()
    except ValidationError as exc:
        logger.info(
            "Request validation failed: {}",
            exc.message,
            request_type=request_type,
            method=endpoint.method,
            path=path,
            fields=exc.fields,
        )
        raise

    if settings.log_config.log_payloads:
        logger.debug(
            "Dispatching request",
            request_type=request_type,
            method=endpoint.method,
            path=path,
            payload=sanitize_dict(payload),
        )
    else:
        logger.debug(
            "Dispatching request",
            request_type=request_type,
            method=endpoint.method,
            path=path,
        )

    return transport.send(endpoint.method, path, payload)


class HttpTransport:
    """``Transport`` backed by a synchronous ``httpx.Client``.

    Every call carries the subscription key header when one is configured.
    Connection failures are retried ``retry_attempts`` times by the underlying
    httpx transport; HTTP error responses are never retried.

    Args:
        config: Connection settings; defaults to the cached settings' ``api_config``.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or get_settings().api_config
        headers = {"Accept": "application/json"}
        if self.config.subscription_key:
            headers[SUBSCRIPTION_KEY_HEADER] = self.config.subscription_key
        self._client = httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            headers=headers,
            transport=transport or httpx.HTTPTransport(retries=self.config.retry_attempts),
        )
        logger.debug(
            "HTTP transport ready",
            base_url=self.config.base_url,
            headers=sanitize_headers(headers),
        )

    def send(self, method: str, path: str, payload: Payload) -> Any:  # noqa: ANN401
        """Perform the call and decode the JSON response.

        Returns:
            Any: The decoded body, or None for an empty response.

        Raises:
            TransportError: On connection failure, timeout, an HTTP status of
                400 or above, or a body that is not JSON.
        """
        method = method.upper()
        start_time = time.perf_counter()
        try:
            if method in QUERY_METHODS:
                response = self._client.request(method, path, params=payload or None)
            else:
                response = self._client.request(
                    method,
                    path,
                    content=orjson.dumps(payload),
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as exc:
            logger.error(
                "Upstream call failed",
                **sanitize_error_context(exc, {"method": method, "path": path}),
            )
            msg = f"{method} {path} failed: {exc}"
            raise TransportError(
                msg, context={"method": method, "path": path}, cause=exc
            ) from exc

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            "Upstream call completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        if response.status_code >= HTTP_ERROR_THRESHOLD:
            msg = f"{method} {path} returned HTTP {response.status_code}"
            raise TransportError(
                msg,
                status_code=response.status_code,
                context={
                    "method": method,
                    "path": path,
                    "body": response.text[:MAX_ERROR_BODY_LENGTH],
                },
            )

        if not response.content:
            return None
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            msg = f"{method} {path} returned a non-JSON body"
            raise TransportError(
                msg,
                status_code=response.status_code,
                context={"method": method, "path": path},
                cause=exc,
            ) from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
