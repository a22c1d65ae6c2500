"""Immutable line catalog and label tables.

The catalog is plain configuration data: it is built once (usually via
:meth:`LineCatalog.default`) and handed explicitly to every component
that needs it.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from pysubway.exceptions import SubwayConfigError

NYC_SUBWAY_LINES: tuple[str, ...] = (
    "1", "2", "3", "4", "5", "6", "7",
    "A", "C", "E", "B", "D", "F", "M",
    "G", "J", "Z", "L", "N", "Q", "R", "W", "S",
)  # fmt: skip

_RED = "#EE352E"
_GREEN = "#00933C"
_PURPLE = "#B933AD"
_BLUE = "#0039A6"
_ORANGE = "#FF6319"
_LIME = "#6CBE45"
_BROWN = "#996633"
_GREY = "#A7A9AC"
_YELLOW = "#FCCC0A"
_SHUTTLE = "#808183"

NYC_LINE_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "1": _RED, "2": _RED, "3": _RED,
        "4": _GREEN, "5": _GREEN, "6": _GREEN,
        "7": _PURPLE,
        "A": _BLUE, "C": _BLUE, "E": _BLUE,
        "B": _ORANGE, "D": _ORANGE, "F": _ORANGE, "M": _ORANGE,
        "G": _LIME,
        "J": _BROWN, "Z": _BROWN,
        "L": _GREY,
        "N": _YELLOW, "Q": _YELLOW, "R": _YELLOW, "W": _YELLOW,
        "S": _SHUTTLE,
    }
)  # fmt: skip

#: Bullets drawn with dark text because their background is light.
NYC_DARK_TEXT_LINES: frozenset[str] = frozenset({"N", "Q", "R", "W"})

ISSUE_TYPE_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "major_delay": "🚨 Major Delay",
        "minor_delay": "⚠️ Minor Delay",
        "service_change": "🚧 Service Change",
        "overcrowding": "👥 Overcrowding",
        "mechanical": "🔧 Mechanical Issue",
        "running_fine": "✅ Running Fine",
    }
)

ALERT_ICONS: Mapping[str, str] = MappingProxyType(
    {
        "delay": "⚠️",
        "suspended": "🚫",
        "stops_skipped": "⏭️",
        "express_to_local": "🐢",
        "reduced_service": "📉",
        "planned_work": "🔧",
        "service_change": "🔄",
    }
)

DEFAULT_BULLET_COLOR = "#555"
DEFAULT_ALERT_ICON = "⚠️"


@dataclasses.dataclass(frozen=True)
class LineCatalog:
    """Fixed, ordered set of line codes plus their display tables.

    Parameters
    ----------
    lines : tuple[str, ...]
        Line codes in display order. Order is significant.
    colors : Mapping[str, str]
        Bullet background color per line.
    dark_text_lines : frozenset[str]
        Lines whose bullet uses dark text.
    issue_labels : Mapping[str, str]
        Human label per report issue type.
    alert_icons : Mapping[str, str]
        Icon per alert type.
    """

    lines: tuple[str, ...]
    colors: Mapping[str, str] = dataclasses.field(default_factory=lambda: NYC_LINE_COLORS)
    dark_text_lines: frozenset[str] = NYC_DARK_TEXT_LINES
    issue_labels: Mapping[str, str] = dataclasses.field(default_factory=lambda: ISSUE_TYPE_LABELS)
    alert_icons: Mapping[str, str] = dataclasses.field(default_factory=lambda: ALERT_ICONS)

    def __post_init__(self) -> None:
        lines = tuple(self.lines)
        if not lines:
            raise SubwayConfigError("line catalog must not be empty")
        if len(set(lines)) != len(lines):
            raise SubwayConfigError(f"line catalog contains duplicates: {lines}")
        object.__setattr__(self, "lines", lines)
        # Freeze caller-provided dicts so the catalog stays read-only.
        for name in ("colors", "issue_labels", "alert_icons"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))
        object.__setattr__(self, "dark_text_lines", frozenset(self.dark_text_lines))

    @classmethod
    def default(cls) -> LineCatalog:
        """The 23-line NYC subway catalog."""
        return cls(lines=NYC_SUBWAY_LINES)

    def __contains__(self, line: object) -> bool:
        return line in self.lines

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def color(self, line: str) -> str:
        return self.colors.get(line, DEFAULT_BULLET_COLOR)

    def text_color(self, line: str) -> str:
        return "#000" if line in self.dark_text_lines else "#fff"

    def issue_label(self, issue_type: str) -> str:
        """Label for *issue_type*, falling back to the raw value."""
        return self.issue_labels.get(str(issue_type), str(issue_type))

    def alert_icon(self, alert_type: str) -> str:
        return self.alert_icons.get(str(alert_type), DEFAULT_ALERT_ICON)
