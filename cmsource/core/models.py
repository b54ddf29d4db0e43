"""Domain models for the Cloudera Manager data source.

All models in this module are built from Python standard library types.
Host-shaped dictionaries are converted through the from_dict constructors.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeAlias

from .datemath import parse

INSPECT_TAG: Mapping[str, str] = MappingProxyType({"type": "cloudera_manager"})


class ApiVersion(Enum):
    """Cloudera Manager API version family.

    The tier controls the shape of time-series requests: the path segment
    (``/api/v{tier}``) and whether ``contentType`` is sent.
    """

    V4 = 4
    V6 = 6
    V11 = 11

    @classmethod
    def from_setting(cls, value: str | None) -> "ApiVersion":
        """Map the user-selected ``cmAPIVersion`` string to a tier.

        Only exact matches are recognized; anything else is treated as
        the oldest supported family.
        """
        if value == "v6-10":
            return cls.V6
        if value == "v11+":
            return cls.V11
        return cls.V4


@dataclass(frozen=True)
class InstanceSettings:
    """Connection settings handed over by the dashboard host."""

    url: str
    name: str = ""
    basic_auth: str | None = None
    with_credentials: bool = False
    json_data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate settings and freeze json_data."""
        if not self.url or not self.url.strip():
            raise ValueError("url must be a non-empty string")
        if isinstance(self.json_data, dict):
            object.__setattr__(self, "json_data", MappingProxyType(self.json_data))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InstanceSettings":
        """Build settings from the host's camelCase dictionary."""
        return cls(
            url=data["url"],
            name=data.get("name") or "",
            basic_auth=data.get("basicAuth") or None,
            with_credentials=bool(data.get("withCredentials", False)),
            json_data=dict(data.get("jsonData") or {}),
        )


@dataclass(frozen=True)
class QueryTarget:
    """One query row of a dashboard panel."""

    target: str  # tsquery expression
    hide: bool = False
    ref_id: str | None = None

    @property
    def is_active(self) -> bool:
        """True if the row has an expression and is not hidden."""
        return bool(self.target) and not self.hide


@dataclass(frozen=True)
class TimeRange:
    """Dashboard time range, ``from`` and ``to`` in host terms."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class QueryOptions:
    """Everything the host passes to a single ``query`` call."""

    targets: tuple[QueryTarget, ...]
    range: TimeRange

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QueryOptions":
        """Build options from the host's dictionary.

        ``range.from`` and ``range.to`` may be datetimes or date-math
        strings such as ``now-6h``.

        Raises:
            DateMathError: If a range bound cannot be parsed.
        """
        raw_range = data.get("range") or {}
        targets = tuple(
            QueryTarget(
                target=t.get("target") or "",
                hide=bool(t.get("hide", False)),
                ref_id=t.get("refId"),
            )
            for t in data.get("targets") or []
        )
        return cls(
            targets=targets,
            range=TimeRange(
                start=parse(raw_range.get("from", "now-6h")),
                end=parse(raw_range.get("to", "now"), round_up=True),
            ),
        )


@dataclass(frozen=True)
class HttpRequest:
    """Transport-neutral description of an outbound request."""

    url: str
    method: str = "GET"
    params: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    with_credentials: bool = False
    raw_body: bool = False  # return the body as text, skip JSON parsing
    inspect: Mapping[str, str] = field(default_factory=lambda: INSPECT_TAG)


@dataclass(frozen=True)
class HttpResponse:
    """Response returned by an HttpClientPort."""

    status: int
    data: Any
    headers: Mapping[str, str] = field(default_factory=dict)


Datapoint: TypeAlias = tuple[float, int]


@dataclass(frozen=True)
class OutputSeries:
    """A named series in the dashboard's time-series schema."""

    target: str
    datapoints: tuple[Datapoint, ...]

    def to_dict(self) -> dict[str, Any]:
        """Render as ``{"target": ..., "datapoints": [[value, ts], ...]}``."""
        return {
            "target": self.target,
            "datapoints": [[value, ts] for value, ts in self.datapoints],
        }


@dataclass(frozen=True)
class QueryResult:
    """Combined result of a query across all active targets."""

    data: tuple[OutputSeries, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"data": [series.to_dict() for series in self.data]}


@dataclass(frozen=True)
class ConnectionTestResult:
    """Outcome of a successful connection test."""

    message: str
    status: str = "success"
    title: str = "Success"

    def to_dict(self) -> dict[str, str]:
        return {"status": self.status, "message": self.message, "title": self.title}
