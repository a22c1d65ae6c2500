"""Client configuration for pysubway."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pysubway._constants import (
    BASE_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RECENT_REPORTS_LIMIT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TOP_LINES_LIMIT,
    USER_AGENT,
)
from pysubway.exceptions import SubwayConfigError


def _env_number(env: Mapping[str, str], key: str, cast: type) -> Any:
    value = env.get(key)
    if value is None:
        return None
    try:
        return cast(value.strip())
    except ValueError as exc:
        raise SubwayConfigError(f"{key} must be a {cast.__name__}, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class SubwayConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Backend base URL. All endpoint paths are relative to it.
    poll_interval : float
        Seconds between two poll cycles of the global sources.
    recent_reports_limit : int
        ``limit`` query parameter of the cross-line report feed.
    top_lines_limit : int
        Number of entries in the "most delayed lines" ranking.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    user_agent : str
        User-Agent header sent with every request.
    """

    base_url: str = BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    recent_reports_limit: int = DEFAULT_RECENT_REPORTS_LIMIT
    top_lines_limit: int = DEFAULT_TOP_LINES_LIMIT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if not self.base_url.startswith(("http://", "https://")):
            raise SubwayConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        # Endpoint paths always start with "/", keep the join unambiguous.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if self.poll_interval <= 0:
            raise SubwayConfigError("poll_interval must be positive")
        if self.recent_reports_limit < 1:
            raise SubwayConfigError("recent_reports_limit must be at least 1")
        if self.top_lines_limit < 1:
            raise SubwayConfigError("top_lines_limit must be at least 1")
        if self.request_timeout <= 0:
            raise SubwayConfigError("request_timeout must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> SubwayConfig:
        """Create configuration from environment variables.

        Reads ``SUBWAY_BASE_URL``, ``SUBWAY_POLL_INTERVAL``,
        ``SUBWAY_RECENT_REPORTS_LIMIT``, ``SUBWAY_TOP_LINES_LIMIT`` and
        ``SUBWAY_REQUEST_TIMEOUT``. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SubwayConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("SUBWAY_BASE_URL")
        if base_url:
            config_kwargs["base_url"] = base_url
        user_agent = env.get("SUBWAY_USER_AGENT")
        if user_agent:
            config_kwargs["user_agent"] = user_agent

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "SUBWAY_POLL_INTERVAL": ("poll_interval", float),
            "SUBWAY_RECENT_REPORTS_LIMIT": ("recent_reports_limit", int),
            "SUBWAY_TOP_LINES_LIMIT": ("top_lines_limit", int),
            "SUBWAY_REQUEST_TIMEOUT": ("request_timeout", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            if field_name in overrides:
                continue
            value = _env_number(env, env_key, cast)
            if value is not None:
                config_kwargs[field_name] = value

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
