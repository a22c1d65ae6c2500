"""Service alert endpoints.

Endpoints:
  - GET /api/alerts/{line}
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from pysubway._api._common import path_segment, validate_list
from pysubway._transport import Transport
from pysubway.models.alert import Alert

_logger = logging.getLogger(__name__)


async def fetch_alerts_for_line(transport: Transport, line: str) -> list[Alert]:
    endpoint = f"/api/alerts/{path_segment(line)}"
    payload = await transport.get_json(endpoint)
    return validate_list(endpoint, Alert, payload)


async def fetch_all_alerts(transport: Transport, lines: Iterable[str]) -> dict[str, list[Alert]]:
    """Fan out one request per line; keep only lines with at least one alert.

    The whole fetch fails if any single line fails, so a partially
    answered fan-out never replaces a complete earlier map.
    """
    codes = list(lines)
    results = await asyncio.gather(*(fetch_alerts_for_line(transport, line) for line in codes))
    by_line = {line: alerts for line, alerts in zip(codes, results, strict=True) if alerts}
    _logger.debug("Alerts fan-out: %d lines queried, %d with alerts", len(codes), len(by_line))
    return by_line
