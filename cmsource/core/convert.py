"""Conversion of Cloudera Manager time-series payloads.

The CM API answers ``/timeseries`` with the general form::

    {"items": [
        {"timeSeries": [
            {"metadata": {"metricName": "cpu_percent", "entityName": "host-1", ...},
             "data": [
                 {"value": 45.1234, "timestamp": "2015-10-02T12:58:24.009Z", ...},
                 ...
             ]},
            ...
        ]},
        ...
    ]}

The dashboard expects one series per time series::

    [{"target": "cpu_percent (host-1)",
      "datapoints": [[45.1234, 1443790704009], ...]},
     ...]
"""

import logging
from collections.abc import Mapping
from typing import Any

from .datemath import DateMathError, parse, to_epoch_millis
from .models import Datapoint, HttpResponse, OutputSeries

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "UNKNOWN NAME"


def make_timeseries_name(metadata: Mapping[str, Any] | None) -> str:
    """Derive the series display name from CM metadata.

    Args:
        metadata: The ``metadata`` object of a CM time series.

    Returns:
        ``"metric (entity)"`` when both are present, otherwise whichever
        one is present, otherwise ``"UNKNOWN NAME"``.
    """
    match metadata:
        case {"metricName": str(metric), "entityName": str(entity)} if metric and entity:
            return f"{metric} ({entity})"
        case {"metricName": str(metric)} if metric:
            return metric
        case {"entityName": str(entity)} if entity:
            return entity
        case _:
            return UNKNOWN_NAME


def _convert_points(points: list[Any], name: str) -> tuple[Datapoint, ...]:
    datapoints: list[Datapoint] = []
    for point in points:
        match point:
            case {"value": value, "timestamp": str(timestamp)}:
                try:
                    datapoints.append((value, to_epoch_millis(parse(timestamp))))
                except DateMathError as e:
                    logger.warning(f"Skipping point of '{name}' with bad timestamp: {e}")
            case _:
                logger.warning(f"Skipping malformed point of '{name}': {point!r}")
    return tuple(datapoints)


def flatten_response(response: HttpResponse | Mapping[str, Any] | None) -> list[OutputSeries]:
    """Flatten a CM time-series response into output series.

    Absent or malformed bodies produce an empty list rather than an error,
    so a panel with no matching series still renders.

    Args:
        response: Transport response, or a mapping with a ``data`` key.

    Returns:
        One OutputSeries per time series, items outer and time series
        inner, in document order.
    """
    match response:
        case HttpResponse(data=body):
            pass
        case {"data": body}:
            pass
        case _:
            return []

    match body:
        case {"items": list(items)}:
            pass
        case _:
            return []

    series_list: list[OutputSeries] = []
    for item in items:
        match item:
            case {"timeSeries": list(time_series)}:
                pass
            case _:
                continue

        for series in time_series:
            if not isinstance(series, Mapping):
                series = {}
            name = make_timeseries_name(series.get("metadata"))
            match series.get("data"):
                case list(points):
                    datapoints = _convert_points(points, name)
                case _:
                    datapoints = ()
            series_list.append(OutputSeries(target=name, datapoints=datapoints))

    return series_list
