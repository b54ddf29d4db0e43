"""Port interfaces for the Cloudera Manager data source.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - HttpClientPort: Send requests to the Cloudera Manager API

2. **Driving Ports** (the host or CLI calls into core)
   - DataSourcePort: Connection test and time-series queries
"""

from abc import ABC, abstractmethod

from .models import ConnectionTestResult, HttpRequest, HttpResponse, QueryOptions, QueryResult


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class HttpClientPort(ABC):
    """Port for sending HTTP requests on behalf of the data source.

    This is the host's transport: proxying, authentication plumbing and
    any retry behaviour belong to the implementation, not to the core.

    Implementations must:
    - Raise on network failures and non-2xx responses
    - Return the body as text when ``request.raw_body`` is set
    - Otherwise return the decoded JSON body
    """

    @abstractmethod
    async def send(self, request: HttpRequest) -> HttpResponse:
        """Send a request and return its response.

        Args:
            request: Fully built request (absolute URL, params, headers).

        Returns:
            HttpResponse with status and decoded body.

        Raises:
            Exception: If the API is unreachable or answers with an error
                status. The core propagates it unchanged.
        """


# ============================================================================
# DRIVING PORTS (External systems call into core)
# ============================================================================


class DataSourcePort(ABC):
    """Port exposed to the dashboard host."""

    @abstractmethod
    async def test_connection(self) -> ConnectionTestResult:
        """Check that the API answers its version endpoint.

        Returns:
            ConnectionTestResult embedding the reported API version.

        Raises:
            Exception: Transport errors, unchanged.
        """

    @abstractmethod
    async def query(self, options: QueryOptions) -> QueryResult:
        """Run every active target over the given time range.

        Args:
            options: Targets and time range from the panel.

        Returns:
            QueryResult with series in target order, then response order.

        Raises:
            Exception: The first transport error of any target; no partial
                results are returned.
        """
