"""Cloudera Manager data source.

Translates dashboard queries into Cloudera Manager ``tsquery`` requests and
reshapes the answers into the dashboard's time-series schema. All network
access goes through the injected HttpClientPort.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from .convert import flatten_response
from .datemath import to_iso8601
from .models import (
    ApiVersion,
    ConnectionTestResult,
    HttpRequest,
    HttpResponse,
    InstanceSettings,
    QueryOptions,
    QueryResult,
    QueryTarget,
    TimeRange,
)
from .ports import DataSourcePort, HttpClientPort

logger = logging.getLogger(__name__)


class ClouderaManagerDataSource(DataSourcePort):
    """Data source backed by the Cloudera Manager time-series API."""

    def __init__(self, instance_settings: InstanceSettings, http_client: HttpClientPort):
        """Initialize the data source.

        Args:
            instance_settings: Connection settings from the host.
            http_client: Transport used for every request.
        """
        url = instance_settings.url
        if url.endswith("/"):
            url = url[:-1]
        self.url = url
        self.name = instance_settings.name
        self.basic_auth = instance_settings.basic_auth
        self.with_credentials = instance_settings.with_credentials
        self.api_version = ApiVersion.from_setting(
            instance_settings.json_data.get("cmAPIVersion")
        )
        self.http_client = http_client

    def _build_request(
        self,
        path: str,
        params: Mapping[str, str] | None = None,
        raw_body: bool = False,
    ) -> HttpRequest:
        headers: dict[str, str] = {}
        with_credentials = self.with_credentials
        if self.basic_auth:
            with_credentials = True
            headers["Authorization"] = self.basic_auth

        return HttpRequest(
            url=self.url + path,
            method="GET",
            params=dict(params or {}),
            headers=headers,
            with_credentials=with_credentials,
            raw_body=raw_body,
        )

    async def _request(self, request: HttpRequest) -> HttpResponse:
        logger.debug(f"{self.name or 'cloudera_manager'}: {request.method} {request.url}")
        return await self.http_client.send(request)

    def build_query_request(self, target: QueryTarget, time_range: TimeRange) -> HttpRequest:
        """Build the time-series request for one target.

        API v6 and later also get ``contentType=application/json``; older
        versions reject it.
        """
        params = {
            "query": target.target,
            "from": to_iso8601(time_range.start),
            "to": to_iso8601(time_range.end),
        }
        if self.api_version.value >= 6:
            params["contentType"] = "application/json"

        return self._build_request(f"/api/v{self.api_version.value}/timeseries", params)

    async def test_connection(self) -> ConnectionTestResult:
        """Query the supported API version.

        Returns:
            ConnectionTestResult embedding the raw version string.

        Raises:
            Exception: Transport errors, unchanged.
        """
        response = await self._request(self._build_request("/api/version", raw_body=True))
        return ConnectionTestResult(
            message=f"Data source is working. API version is '{response.data}'.",
        )

    def convert_response(self, response: HttpResponse | Mapping[str, Any] | None) -> QueryResult:
        """Convert one CM response into a QueryResult.

        Absent or malformed responses give an empty result.
        """
        return QueryResult(data=tuple(flatten_response(response)))

    async def _query_target(self, request: HttpRequest) -> QueryResult:
        return self.convert_response(await self._request(request))

    async def query(self, options: QueryOptions) -> QueryResult:
        """Query every active target concurrently.

        Requests are issued together and joined; the first failure cancels
        the rest and is re-raised as-is. Series keep target order, then
        response order, whatever order the requests complete in.

        Args:
            options: Panel targets and time range.

        Returns:
            QueryResult with the concatenated series.

        Raises:
            Exception: The first transport error raised by any target.
        """
        requests = [
            self.build_query_request(target, options.range)
            for target in options.targets
            if target.is_active
        ]
        if not requests:
            return QueryResult()

        tasks = [asyncio.create_task(self._query_target(request)) for request in requests]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        series = tuple(s for result in results for s in result.data)
        logger.info(
            f"Query returned {len(series)} series for {len(requests)} target(s)"
        )
        return QueryResult(data=series)
