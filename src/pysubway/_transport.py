"""JSON-over-HTTP transport."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pysubway._redact import redact_for_log
from pysubway.config import SubwayConfig
from pysubway.exceptions import SubwayDecodeError, SubwayNetworkError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    Both methods return the decoded JSON body, or ``None`` for an empty one.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        ...

    async def post_json(self, endpoint: str, body: Mapping[str, Any] | None = None) -> Any:
        ...


class HttpTransport:
    """aiohttp transport that maps every failure onto the pysubway error taxonomy."""

    def __init__(self, config: SubwayConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)
        self._headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": config.user_agent,
        }

    async def get_json(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self._request("GET", endpoint, params=params)

    async def post_json(self, endpoint: str, body: Mapping[str, Any] | None = None) -> Any:
        return await self._request("POST", endpoint, body=body)

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        url = f"{self._config.base_url}{endpoint}"
        headers = dict(self._headers)
        data: str | None = None
        if body is not None:
            headers["content-type"] = "application/json"
            data = json.dumps(body, separators=(",", ":"))

        _logger.debug("%s %s params=%s body=%s", method, url, params, redact_for_log(body))

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                data=data,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                raw = await resp.read()
                if resp.status >= 300:
                    raise SubwayNetworkError(
                        f"HTTP {resp.status} from {endpoint}: {raw[:200].decode(errors='replace')}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except SubwayNetworkError:
            raise
        except TimeoutError as exc:
            raise SubwayNetworkError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise SubwayNetworkError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        # 204 and other empty 2xx bodies are a bare acknowledgement.
        if not raw.strip():
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SubwayDecodeError(
                f"Invalid JSON from {endpoint}: {raw[:200].decode(errors='replace')}",
                endpoint=endpoint,
            ) from exc
