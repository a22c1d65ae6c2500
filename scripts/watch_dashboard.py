#!/usr/bin/env python3
"""Watch the delay dashboard from a terminal.

This script starts a dashboard against the configured backend, waits for
the first poll cycle and prints the stats, the "most delayed" ranking and
one row per catalog line. Without ``--once`` it keeps printing after every
poll cycle until interrupted.

Usage
-----
::

    export SUBWAY_BASE_URL="http://localhost:8000"
    python scripts/watch_dashboard.py

Options::

    --once               Print a single snapshot and exit
    --json               Output as machine-readable JSON
    --line A             Also open the interaction session for line A
    --interval SECONDS   Override the poll interval
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from typing import Any

from pysubway import Dashboard, SubwayConfig, SubwayError, time_ago, truncate_header
from pysubway.display import CardStatus


def _snapshot(dashboard: Dashboard) -> dict[str, Any]:
    store = dashboard.store
    result: dict[str, Any] = {
        "last_refresh": store.last_refresh,
        "stats": store.stats.model_dump() if store.stats is not None else None,
        "top_lines": [status.model_dump() for status in store.top_lines()],
        "cards": [card.model_dump() | {"status": str(card.status)} for card in store.line_cards()],
        "recent_reports": [report.model_dump() for report in store.recent_reports],
    }
    session = dashboard.session
    if session.is_open:
        result["session"] = {
            "line": session.line,
            "reports": [report.model_dump() for report in session.reports],
            "alerts": [alert.model_dump() for alert in session.alerts],
        }
    return result


def _print_text(dashboard: Dashboard) -> None:
    store = dashboard.store
    catalog = dashboard.catalog
    refreshed = store.last_refresh.astimezone().strftime("%H:%M:%S") if store.last_refresh else "never"
    print(f"── Last updated: {refreshed} · refreshes every {dashboard.config.poll_interval:.0f}s")

    stats = store.stats
    if stats is not None:
        print(
            f"   delays recorded: {stats.total_delays_recorded:,} · lines tracked: {stats.lines_tracked}"
            f" · avg delay: {stats.overall_avg_delay} min"
        )

    hint = store.rush_hour_hint(datetime.now())
    if hint is not None:
        print(f"   No delay data yet. {hint.message}")
    else:
        ranking = ", ".join(f"{s.line}={s.total_delays}" for s in store.top_lines())
        print(f"   Most delayed: {ranking}")

    for card in store.line_cards():
        if card.status is CardStatus.DELAYS:
            summary = f"{card.total_delays} delays today"
        elif card.status is CardStatus.ALERT:
            summary = "MTA Alert"
        else:
            summary = "No delays today"
        avg = f"{card.avg_delay} min" if card.has_data else "n/a"
        peak = f"{card.max_delay} min" if card.has_data else "n/a"
        print(f"   [{card.line:>1}] {summary:<22} avg {avg:<9} max {peak}")
        alert = card.headline_alert
        if alert is not None:
            print(f"        {catalog.alert_icon(alert.alert_type)} {truncate_header(alert.header)}")

    if store.recent_reports:
        print("── Live community reports")
        for report in store.recent_reports:
            age = time_ago(report.created_at) if report.created_at else "?"
            print(f"   [{report.line}] {catalog.issue_label(report.issue_type)} · {age} · 👍 {report.upvotes}")

    session = dashboard.session
    if session.is_open:
        print(f"── Line {session.line}: {len(session.alerts)} alert(s), {len(session.reports)} report(s)")
        for report in session.reports:
            print(f"   #{report.id} {catalog.issue_label(report.issue_type)} {report.description} · 👍 {report.upvotes}")


def _emit(dashboard: Dashboard, json_mode: bool) -> None:
    if json_mode:
        print(json.dumps(_snapshot(dashboard), indent=2, default=str, ensure_ascii=False))
    else:
        _print_text(dashboard)
    sys.stdout.flush()


async def main() -> None:
    parser = argparse.ArgumentParser(description="Watch the subway delay dashboard")
    parser.add_argument("--once", action="store_true", help="Print a single snapshot and exit")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--line", help="Open the interaction session for this line")
    parser.add_argument("--interval", type=float, help="Override the poll interval in seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.interval is not None:
        overrides["poll_interval"] = args.interval
    try:
        config = SubwayConfig.from_env(**overrides)
    except SubwayError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(2)

    async with Dashboard(config) as dashboard:
        await dashboard.scheduler.wait_until_loaded()
        if args.line:
            try:
                await dashboard.session.open(args.line.upper())
            except SubwayError as exc:
                print(f"Cannot open line {args.line}: {exc}", file=sys.stderr)
                sys.exit(2)
        _emit(dashboard, args.json_mode)
        if args.once:
            return

        seen = dashboard.scheduler.cycles_completed
        while True:
            await asyncio.sleep(1.0)
            if dashboard.scheduler.cycles_completed == seen:
                continue
            seen = dashboard.scheduler.cycles_completed
            if dashboard.session.is_open:
                await dashboard.session.refresh_reports()
            _emit(dashboard, args.json_mode)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
