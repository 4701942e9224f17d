"""HTTP and WebSocket transport to a remote Docker Engine.

HTTP calls go through the docker SDK's low-level ``APIClient`` (itself a
``requests.Session``) so TLS client certificates are configured the same way
the SDK does it. The attach socket is opened with ``websocket-client``, the
library the SDK uses for its own websocket attach.

The transport never interprets status codes. It returns an ``EngineResponse``
and leaves the success check to the client. Connection errors and timeouts
propagate unchanged as ``requests`` / ``websocket`` exceptions.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import docker
import requests
import websocket

from docker_tenant.core.config import EngineConfig
from docker_tenant.core.schemas import EngineResponse

logger = logging.getLogger(__name__)


def encode_params(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Render query parameters the way the Engine expects them.

    Booleans become ``true``/``false``; everything else is stringified.
    """
    encoded: dict[str, str] = {}
    for key, value in (params or {}).items():
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = str(value)
    return encoded


def decode_body(response: requests.Response) -> Any:
    """Decode a response body to JSON, text, or None when empty."""
    if not response.content:
        return None

    content_type = response.headers.get("Content-Type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            logger.debug("Engine sent a JSON content type with a non-JSON body")
    return response.content.decode("utf-8", errors="replace")


class EngineTransport:
    """Single-shot HTTP/WebSocket calls against one Engine endpoint.

    Every request is sent with ``Connection: close`` so no connection outlives
    the call that opened it.

    Example:
        ```python
        transport = EngineTransport(EngineConfig(host_ip="10.0.0.5"))
        response = transport.get("images/json")
        print(response.status, len(response.body))
        ```
    """

    def __init__(self, config: EngineConfig) -> None:
        self._config = config
        self._api = docker.APIClient(
            base_url=config.docker_host,
            version=config.api_version,
            timeout=config.timeout,
            tls=config.tls.to_docker_tls() if config.tls else False,
        )

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        payload: Any = None,
    ) -> EngineResponse:
        """Send one request and return its status and decoded body.

        Args:
            method: HTTP method (GET, POST, DELETE)
            path: Unversioned API path, e.g. ``containers/abc/start``
            params: Query string parameters
            payload: JSON body, omitted when None

        Returns:
            EngineResponse with the received status and body
        """
        kwargs: dict[str, Any] = {
            "params": encode_params(params),
            "headers": {"Connection": "close"},
            "timeout": self._config.timeout,
        }
        if payload is not None:
            kwargs["json"] = payload

        logger.debug(f"{method} {path} params={kwargs['params']}")
        response = self._api.request(method, self.url(path), **kwargs)
        try:
            return EngineResponse(status=response.status_code, body=decode_body(response))
        finally:
            response.close()

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> EngineResponse:
        return self.request("GET", path, params=params)

    def post(
        self, path: str, params: Mapping[str, Any] | None = None, payload: Any = None
    ) -> EngineResponse:
        return self.request("POST", path, params=params, payload=payload)

    def delete(self, path: str, params: Mapping[str, Any] | None = None) -> EngineResponse:
        return self.request("DELETE", path, params=params)

    def open_socket(
        self, path: str, params: Mapping[str, Any] | None = None
    ) -> websocket.WebSocket:
        """Open a websocket to ``path`` on the Engine.

        The caller owns the returned socket and must close it.
        """
        url = f"{self._config.ws_base_url}/{path.lstrip('/')}"
        if params:
            url = f"{url}?{urlencode(encode_params(params))}"

        options: dict[str, Any] = {"timeout": self._config.timeout}
        if self._config.tls:
            options["sslopt"] = self._config.tls.to_sslopt()

        logger.debug(f"WS {url}")
        return websocket.create_connection(url, **options)

    def close(self) -> None:
        self._api.close()
