"""Core domain logic for the Cloudera Manager data source.

This package holds request construction, response conversion and date
math. Network access is delegated to an HttpClientPort implementation
from the adapters package.
"""

from .convert import flatten_response, make_timeseries_name
from .datasource import ClouderaManagerDataSource
from .datemath import DateMathError
from .models import (
    ApiVersion,
    ConnectionTestResult,
    HttpRequest,
    HttpResponse,
    InstanceSettings,
    OutputSeries,
    QueryOptions,
    QueryResult,
    QueryTarget,
    TimeRange,
)

__all__ = [
    "ApiVersion",
    "ClouderaManagerDataSource",
    "ConnectionTestResult",
    "DateMathError",
    "HttpRequest",
    "HttpResponse",
    "InstanceSettings",
    "OutputSeries",
    "QueryOptions",
    "QueryResult",
    "QueryTarget",
    "TimeRange",
    "flatten_response",
    "make_timeseries_name",
]
