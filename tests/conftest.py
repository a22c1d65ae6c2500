from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from pysubway.catalog import LineCatalog
from pysubway.client import SubwayClient
from pysubway.config import SubwayConfig
from pysubway.exceptions import SubwayError, SubwayNetworkError

NOW = datetime(2026, 3, 10, 8, 30, tzinfo=UTC)


def iso(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class FakeBackend:
    """In-memory stand-in for the delay-tracker API (implements ``Transport``)."""

    lines: list[dict[str, Any]] = field(default_factory=list)
    stats: dict[str, Any] = field(
        default_factory=lambda: {
            "total_delays_recorded": 0,
            "lines_tracked": 0,
            "overall_avg_delay": "0.0",
            "last_scrape": iso(NOW),
        }
    )
    reports: list[dict[str, Any]] = field(default_factory=list)
    alerts: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)
    bodies: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    failures: dict[str, SubwayError] = field(default_factory=dict)
    holds: dict[str, asyncio.Event] = field(default_factory=dict)
    subscribe_message: str = "Subscribed to delay alerts"
    _next_id: int = 1

    def count(self, method: str, endpoint: str) -> int:
        return sum(1 for call in self.calls if call == (method, endpoint))

    def add_report(
        self,
        line: str,
        issue_type: str = "minor_delay",
        description: str = "",
        upvotes: int = 0,
        age: timedelta = timedelta(minutes=5),
    ) -> dict[str, Any]:
        report = {
            "id": self._next_id,
            "line": line,
            "issue_type": issue_type,
            "description": description,
            "upvotes": upvotes,
            "created_at": iso(NOW - age),
        }
        self._next_id += 1
        self.reports.insert(0, report)
        return report

    def add_alert(self, line: str, header: str = "Delays", alert_type: str = "delay") -> dict[str, Any]:
        alert = {
            "id": len(self.alerts.get(line, [])) + 100,
            "line": line,
            "alert_type": alert_type,
            "header": header,
            "description": "",
            "created_at": iso(NOW),
        }
        self.alerts.setdefault(line, []).append(alert)
        return alert

    async def _enter(self, method: str, endpoint: str) -> None:
        self.calls.append((method, endpoint))
        hold = self.holds.pop(endpoint, None)
        if hold is not None:
            await hold.wait()
        else:
            await asyncio.sleep(0)
        failure = self.failures.get(endpoint)
        if failure is not None:
            raise failure

    async def get_json(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        await self._enter("GET", endpoint)
        if endpoint == "/api/lines":
            return list(self.lines)
        if endpoint == "/api/stats":
            return dict(self.stats)
        if endpoint == "/api/reports/recent":
            limit = int((params or {}).get("limit", 8))
            return [dict(report) for report in self.reports[:limit]]
        if endpoint.startswith("/api/reports/"):
            line = endpoint.rsplit("/", 1)[1]
            return [dict(report) for report in self.reports if report["line"] == line]
        if endpoint.startswith("/api/alerts/"):
            line = endpoint.rsplit("/", 1)[1]
            return list(self.alerts.get(line, []))
        raise SubwayNetworkError(f"HTTP 404 from {endpoint}", status_code=404, endpoint=endpoint)

    async def post_json(self, endpoint: str, body: Mapping[str, Any] | None = None) -> Any:
        await self._enter("POST", endpoint)
        body = dict(body or {})
        self.bodies.append((endpoint, body))
        if endpoint == "/api/reports":
            return dict(self.add_report(body["line"], body["issue_type"], body.get("description", ""), age=timedelta()))
        if endpoint.startswith("/api/reports/") and endpoint.endswith("/upvote"):
            report_id = int(endpoint.split("/")[3])
            for report in self.reports:
                if report["id"] == report_id:
                    report["upvotes"] += 1
                    return {"message": "Upvoted", "upvotes": report["upvotes"]}
            raise SubwayNetworkError("HTTP 404", status_code=404, endpoint=endpoint)
        if endpoint == "/api/subscribe":
            return {"message": self.subscribe_message}
        raise SubwayNetworkError(f"HTTP 404 from {endpoint}", status_code=404, endpoint=endpoint)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def config() -> SubwayConfig:
    return SubwayConfig(base_url="http://backend.test", poll_interval=60.0)


@pytest.fixture
def catalog() -> LineCatalog:
    return LineCatalog.default()


@pytest.fixture
def client(backend: FakeBackend, config: SubwayConfig) -> SubwayClient:
    return SubwayClient(config, transport=backend)
